"""Tests for Sentry event filtering."""

from gateway_checkin.middleware.sentry import _before_send, _before_send_transaction, init_sentry
from gateway_checkin.utils.errors import AlreadyCheckedInError, StorageFailureError


def _hint(exc: Exception) -> dict:
    return {"exc_info": (type(exc), exc, None)}


def test_expected_errors_dropped():
    event = {"level": "error"}
    assert _before_send(event, _hint(AlreadyCheckedInError("2026-03-01"))) is None


def test_storage_failures_kept():
    event = {"level": "error"}
    assert _before_send(event, _hint(StorageFailureError("boom"))) is event


def test_health_transactions_dropped():
    assert _before_send_transaction({"transaction": "/health/ready"}, {}) is None
    event = {"transaction": "/api/v1/checkin"}
    assert _before_send_transaction(event, {}) is event


def test_init_without_dsn(monkeypatch):
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    assert init_sentry(dsn=None) is False

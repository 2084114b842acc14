"""Sentry error tracking integration."""

import logging
import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from gateway_checkin import __version__

# Business outcomes that are reported to the caller, not to Sentry
EXPECTED_ERRORS = {
    "AlreadyCheckedInError",
    "CheckinDisabledError",
    "InvalidCheckinCodeError",
    "CheckinValidationError",
    "CheckinNotFoundError",
    "RequestValidationError",
}


def init_sentry(
    dsn: str | None = None,
    environment: str = "development",
    release: str | None = None,
    traces_sample_rate: float = 0.0,
) -> bool:
    """Initialize the Sentry SDK.

    Returns:
        True if Sentry was initialized, False when no DSN is configured
    """
    sentry_dsn = dsn or os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        return False

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=environment,
        release=release or os.getenv("APP_VERSION", __version__),
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=traces_sample_rate,
        send_default_pii=False,
        before_send=_before_send,
        before_send_transaction=_before_send_transaction,
    )
    return True


def _before_send(event: dict, hint: dict) -> dict | None:
    """Drop expected business errors."""
    if "exc_info" in hint:
        exc_type = hint["exc_info"][0]
        if exc_type.__name__ in EXPECTED_ERRORS:
            return None
    return event


def _before_send_transaction(event: dict, hint: dict) -> dict | None:
    """Drop health check and metrics transactions."""
    transaction_name = event.get("transaction", "")
    if any(path in transaction_name for path in ("/health", "/metrics")):
        return None
    return event


def capture_credit_error(
    error: Exception,
    user_id: int,
    amount: int,
    extra: dict[str, Any] | None = None,
) -> str | None:
    """Report a failed balance credit at fatal level.

    Returns:
        Sentry event ID, or None when Sentry is not initialized
    """
    with sentry_sdk.new_scope() as scope:
        scope.set_level("fatal")
        scope.set_user({"id": str(user_id)})
        scope.set_tag("operation", "checkin_credit")
        scope.set_tag("financial_error", "true")
        scope.set_extra("amount", amount)
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)

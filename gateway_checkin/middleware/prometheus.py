"""Prometheus metrics for the check-in service."""

from fastapi import FastAPI
from prometheus_client import Counter, Info
from prometheus_fastapi_instrumentator import Instrumentator, metrics

APP_INFO = Info("gateway_checkin_app", "Application information")

CHECKIN_ATTEMPTS = Counter(
    "gateway_checkin_attempts_total",
    "Check-in attempts by outcome",
    ["result"],  # granted, already_checked_in, disabled, invalid_code, error
)

CHECKIN_QUOTA_GRANTED = Counter(
    "gateway_checkin_quota_granted_total",
    "Quota credited through check-ins",
)

CHECKIN_BONUS_GRANTED = Counter(
    "gateway_checkin_bonus_granted_total",
    "Check-ins that received the streak bonus",
)


def setup_prometheus(app: FastAPI, app_version: str) -> Instrumentator:
    """Instrument HTTP handlers and expose ``/metrics``."""
    APP_INFO.info({
        "version": app_version,
        "app_name": "gateway-checkin",
    })

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        excluded_handlers=["/health", "/health/live", "/health/ready", "/metrics"],
    )
    instrumentator.add(
        metrics.default(
            metric_namespace="gateway_checkin",
            metric_subsystem="http",
        )
    )
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint="/metrics", include_in_schema=False, tags=["Monitoring"])
    return instrumentator


def record_checkin(result: str, quota: int = 0, bonus: bool = False) -> None:
    """Count one check-in attempt."""
    CHECKIN_ATTEMPTS.labels(result=result).inc()
    if quota > 0:
        CHECKIN_QUOTA_GRANTED.inc(quota)
    if bonus:
        CHECKIN_BONUS_GRANTED.inc()

"""Business logic services."""

from gateway_checkin.services.checkin import CheckinResult, CheckinService
from gateway_checkin.services.checkin_config import (
    CheckinConfigStore,
    validate_config_update,
)
from gateway_checkin.services.checkin_records import CheckinRecordStore
from gateway_checkin.services.quota import QuotaError, QuotaService
from gateway_checkin.services.streak import current_streak, streak_as_of

__all__ = [
    "CheckinConfigStore",
    "CheckinRecordStore",
    "CheckinResult",
    "CheckinService",
    "QuotaError",
    "QuotaService",
    "current_streak",
    "streak_as_of",
    "validate_config_update",
]

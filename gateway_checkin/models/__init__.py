"""Database models."""

from gateway_checkin.models.base import Base, TimestampMixin
from gateway_checkin.models.checkin import (
    CHECKIN_CONFIG_DEFAULTS,
    CheckinConfig,
    CheckinRecord,
)
from gateway_checkin.models.log import Log, LogType
from gateway_checkin.models.user import User, UserRole, UserStatus

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Check-in
    "CheckinRecord",
    "CheckinConfig",
    "CHECKIN_CONFIG_DEFAULTS",
    # Log
    "Log",
    "LogType",
    # User
    "User",
    "UserRole",
    "UserStatus",
]

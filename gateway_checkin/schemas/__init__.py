"""Pydantic schemas for API requests and responses."""

from gateway_checkin.schemas.checkin import (
    AdminCheckinHistoryItem,
    CheckinCalendarData,
    CheckinConfigData,
    CheckinData,
    CheckinHistoryItem,
    CheckinRequest,
    CheckinStat,
    CheckinStatusData,
    PublicCheckinConfig,
    TodayCheckin,
    UpdateCheckinConfigRequest,
)
from gateway_checkin.schemas.common import (
    ApiResponse,
    BaseSchema,
    PageInfo,
    error_envelope,
    normalize_pagination,
)

__all__ = [
    # Common
    "ApiResponse",
    "BaseSchema",
    "PageInfo",
    "error_envelope",
    "normalize_pagination",
    # Requests
    "CheckinRequest",
    "UpdateCheckinConfigRequest",
    # Responses
    "AdminCheckinHistoryItem",
    "CheckinCalendarData",
    "CheckinConfigData",
    "CheckinData",
    "CheckinHistoryItem",
    "CheckinStat",
    "CheckinStatusData",
    "PublicCheckinConfig",
    "TodayCheckin",
]

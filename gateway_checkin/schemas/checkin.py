"""Check-in request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from gateway_checkin.schemas.common import BaseSchema


# ============================================================================
# Requests
# ============================================================================


class CheckinRequest(BaseModel):
    """Body of POST /checkin (may be empty)."""

    checkin_code: str = Field(default="", max_length=20)


class UpdateCheckinConfigRequest(BaseModel):
    """Full replacement of the check-in settings.

    Bounds are checked by ``validate_config_update`` so the client gets the
    same envelope-style message for every rule.
    """

    enabled: bool = False
    min_quota: int = 0
    max_quota: int = 0
    checkin_code_enabled: bool = False
    checkin_code: str = Field(default="", max_length=20)
    consecutive_reward_enabled: bool = False
    consecutive_reward_quota: int = 0
    calendar_enabled: bool = False


# ============================================================================
# Responses
# ============================================================================


class CheckinData(BaseModel):
    quota: int
    quota_display: str
    consecutive_days: int


class CheckinStat(BaseModel):
    total_checkins: int
    consecutive_days: int
    this_month_checkins: int
    total_quota: int


class PublicCheckinConfig(BaseModel):
    enabled: bool
    checkin_code_enabled: bool
    calendar_enabled: bool


class TodayCheckin(BaseModel):
    quota: int
    quota_display: str
    checkin_time: datetime | None


class CheckinStatusData(BaseModel):
    has_checked_in: bool
    stat: CheckinStat
    config: PublicCheckinConfig
    today_checkin: TodayCheckin | None = None


class CheckinHistoryItem(BaseModel):
    id: int
    quota: int
    quota_display: str
    checkin_date: str
    checkin_code: str
    created_at: datetime | None
    consecutive_days: int


class AdminCheckinHistoryItem(BaseModel):
    id: int
    user_id: int
    username: str
    quota: int
    quota_display: str
    checkin_date: str
    checkin_code: str
    created_at: datetime | None


class CheckinCalendarData(BaseModel):
    month: str
    dates: list[str]
    calendar_enabled: bool


class CheckinConfigData(BaseSchema):
    """Admin view of the full configuration."""

    id: int | None = None
    enabled: bool
    min_quota: int
    max_quota: int
    checkin_code_enabled: bool
    checkin_code: str
    consecutive_reward_enabled: bool
    consecutive_reward_quota: int
    calendar_enabled: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

"""Check-in API."""

from fastapi import APIRouter

from gateway_checkin.api.deps import AppSettings, CurrentAdmin, CurrentUser, DbSession
from gateway_checkin.logging_config import get_logger
from gateway_checkin.schemas.checkin import (
    AdminCheckinHistoryItem,
    CheckinCalendarData,
    CheckinConfigData,
    CheckinData,
    CheckinHistoryItem,
    CheckinRequest,
    CheckinStatusData,
    UpdateCheckinConfigRequest,
)
from gateway_checkin.schemas.common import ApiResponse, PageInfo, normalize_pagination
from gateway_checkin.services.checkin import CheckinService
from gateway_checkin.services.checkin_config import validate_config_update
from gateway_checkin.utils.async_utils import with_timeout
from gateway_checkin.utils.dates import parse_month
from gateway_checkin.utils.errors import CheckinValidationError
from gateway_checkin.utils.quota import quota_display

router = APIRouter(prefix="/checkin", tags=["Checkin"])

logger = get_logger(__name__)


# ============================================================================
# User endpoints
# ============================================================================


@router.post("", response_model=ApiResponse[CheckinData])
async def do_checkin(
    user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
    body: CheckinRequest | None = None,
):
    """Claim today's reward.

    - Once per calendar day
    - Base grant is the configured minimum quota
    - Streak bonus when yesterday was checked in and the bonus is enabled
    """
    service = CheckinService(db, settings)
    code = body.checkin_code if body else ""
    result = await with_timeout(
        service.checkin(user.id, code),
        settings.request_timeout_seconds,
        operation="checkin",
    )
    return ApiResponse(
        message="Check-in successful",
        data=CheckinData(
            quota=result.quota,
            quota_display=quota_display(result.quota, settings.quota_per_unit),
            consecutive_days=result.consecutive_days,
        ),
    )


@router.get("/status", response_model=ApiResponse[CheckinStatusData])
async def get_checkin_status(
    user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
):
    """Today's state, statistics and public config."""
    service = CheckinService(db, settings)
    status = await with_timeout(
        service.get_status(user.id),
        settings.request_timeout_seconds,
        operation="checkin status",
    )
    return ApiResponse(data=CheckinStatusData(**status))


@router.get("/history", response_model=ApiResponse[PageInfo[CheckinHistoryItem]])
async def get_checkin_history(
    user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
    page: int = 1,
    page_size: int = 20,
):
    """The caller's check-in history, newest first."""
    page, page_size = normalize_pagination(page, page_size)
    service = CheckinService(db, settings)
    items, total = await with_timeout(
        service.get_history(user.id, page, page_size),
        settings.request_timeout_seconds,
        operation="checkin history",
    )
    return ApiResponse(
        data=PageInfo[CheckinHistoryItem](
            page=page,
            page_size=page_size,
            total=total,
            items=[CheckinHistoryItem(**item) for item in items],
        )
    )


@router.get("/calendar", response_model=ApiResponse[CheckinCalendarData])
async def get_checkin_calendar(
    user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
    month: str | None = None,
):
    """Dates checked in during ``month`` (YYYY-MM, default current month)."""
    month_start = None
    if month:
        month_start = parse_month(month)
        if month_start is None:
            raise CheckinValidationError("month must be in YYYY-MM format", "month")

    service = CheckinService(db, settings)
    calendar = await with_timeout(
        service.get_calendar(user.id, month_start),
        settings.request_timeout_seconds,
        operation="checkin calendar",
    )
    return ApiResponse(data=CheckinCalendarData(**calendar))


# ============================================================================
# Admin endpoints
# ============================================================================


@router.get("/config", response_model=ApiResponse[CheckinConfigData])
async def get_checkin_config(
    admin: CurrentAdmin,
    db: DbSession,
    settings: AppSettings,
):
    """Full check-in configuration (defaults when never saved)."""
    service = CheckinService(db, settings)
    config = await with_timeout(
        service.get_config(),
        settings.request_timeout_seconds,
        operation="checkin config",
    )
    return ApiResponse(data=CheckinConfigData.model_validate(config))


@router.put("/config", response_model=ApiResponse[CheckinConfigData])
async def update_checkin_config(
    request: UpdateCheckinConfigRequest,
    admin: CurrentAdmin,
    db: DbSession,
    settings: AppSettings,
):
    """Replace the check-in configuration."""
    values = request.model_dump()
    validate_config_update(values)

    service = CheckinService(db, settings)
    config = await with_timeout(
        service.update_config(values),
        settings.request_timeout_seconds,
        operation="checkin config update",
    )
    logger.info("checkin_config_saved", admin_id=admin.id)
    return ApiResponse(
        message="Check-in configuration updated",
        data=CheckinConfigData.model_validate(config),
    )


@router.get("/history/all", response_model=ApiResponse[PageInfo[AdminCheckinHistoryItem]])
async def get_all_checkin_history(
    admin: CurrentAdmin,
    db: DbSession,
    settings: AppSettings,
    page: int = 1,
    page_size: int = 20,
    user_id: str | None = None,
):
    """Check-in history across all users, optionally filtered by ``user_id``."""
    page, page_size = normalize_pagination(page, page_size)

    filter_user_id = None
    if user_id:
        try:
            filter_user_id = int(user_id)
        except ValueError:
            raise CheckinValidationError("Invalid user ID", "user_id")

    service = CheckinService(db, settings)
    items, total = await with_timeout(
        service.get_admin_history(filter_user_id, page, page_size),
        settings.request_timeout_seconds,
        operation="checkin admin history",
    )
    return ApiResponse(
        data=PageInfo[AdminCheckinHistoryItem](
            page=page,
            page_size=page_size,
            total=total,
            items=[AdminCheckinHistoryItem(**item) for item in items],
        )
    )

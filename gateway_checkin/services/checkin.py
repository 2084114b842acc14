"""Daily check-in service.

Grants one reward per user per calendar day and answers the status and
history queries shown in the check-in page and the admin console.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gateway_checkin.config import Settings, get_settings
from gateway_checkin.logging_config import get_logger
from gateway_checkin.middleware.prometheus import record_checkin
from gateway_checkin.middleware.sentry import capture_credit_error
from gateway_checkin.models.checkin import CheckinConfig, CheckinRecord
from gateway_checkin.models.log import LogType
from gateway_checkin.models.user import User
from gateway_checkin.services.checkin_config import CheckinConfigStore
from gateway_checkin.services.checkin_records import CheckinRecordStore
from gateway_checkin.services.quota import QuotaError, QuotaService
from gateway_checkin.services.streak import RECENT_WINDOW, current_streak, streak_as_of
from gateway_checkin.utils.async_utils import summarize_exception
from gateway_checkin.utils.dates import format_date, format_month, local_today
from gateway_checkin.utils.errors import (
    AlreadyCheckedInError,
    CheckinDisabledError,
    CheckinError,
    CheckinNotFoundError,
    CreditFailureError,
    InvalidCheckinCodeError,
    StorageFailureError,
)
from gateway_checkin.utils.quota import quota_display

logger = get_logger(__name__)


@dataclass
class CheckinResult:
    """Outcome of a successful check-in."""

    quota: int
    checkin_date: str
    consecutive_days: int
    bonus_applied: bool


def compute_grant(config: CheckinConfig, incoming_streak: int) -> tuple[int, bool]:
    """Quota to grant and whether the streak bonus applies.

    The base grant is always ``min_quota``; ``max_quota`` does not vary it.
    """
    quota = config.min_quota
    bonus = config.consecutive_reward_enabled and incoming_streak > 0
    if bonus:
        quota += config.consecutive_reward_quota
    return quota, bonus


class CheckinService:
    """Check-in reward engine and reporting queries."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()
        self.configs = CheckinConfigStore(db)
        self.records = CheckinRecordStore(db)
        self.quota = QuotaService(db)

    def _get_today(self) -> date:
        """Current date in the check-in time zone."""
        return local_today(self.settings.checkin_timezone)

    def _display(self, quota: int) -> str:
        return quota_display(quota, self.settings.quota_per_unit)

    # ------------------------------------------------------------------
    # Reward engine
    # ------------------------------------------------------------------

    async def checkin(self, user_id: int, checkin_code: str = "") -> CheckinResult:
        """Claim today's reward.

        Raises:
            AlreadyCheckedInError: Today already has a record (also raised
                when a concurrent request wins the insert)
            CheckinDisabledError: Feature switched off
            InvalidCheckinCodeError: Code gate on and code mismatch
            CreditFailureError: Balance credit failed; nothing was written
            StorageFailureError: Any other database failure; nothing written
        """
        today = self._get_today()
        today_str = format_date(today)

        try:
            result = await self._checkin(user_id, checkin_code or "", today, today_str)
        except AlreadyCheckedInError:
            record_checkin("already_checked_in")
            raise
        except CheckinDisabledError:
            record_checkin("disabled")
            raise
        except InvalidCheckinCodeError:
            record_checkin("invalid_code")
            raise
        except CheckinError:
            record_checkin("error")
            raise

        record_checkin("granted", quota=result.quota, bonus=result.bonus_applied)
        return result

    async def _checkin(
        self,
        user_id: int,
        checkin_code: str,
        today: date,
        today_str: str,
    ) -> CheckinResult:
        try:
            if await self.records.get_for_date(user_id, today_str) is not None:
                raise AlreadyCheckedInError(today_str)

            config = await self.configs.get()
            if not config.enabled:
                raise CheckinDisabledError()

            if config.checkin_code_enabled and checkin_code != config.checkin_code:
                raise InvalidCheckinCodeError()

            recent = await self.records.recent_dates(user_id)
        except SQLAlchemyError as e:
            logger.error("checkin_read_failed", user_id=user_id, error=str(e))
            raise StorageFailureError(summarize_exception(e))

        # Streak ending yesterday, i.e. before today's record exists
        incoming_streak = current_streak(recent, today - timedelta(days=1))
        quota, bonus_applied = compute_grant(config, incoming_streak)

        try:
            await self.records.insert(user_id, quota, checkin_code, today_str)
            await self.quota.increase_user_quota(user_id, quota)
            self.quota.record_log(
                user_id,
                LogType.SYSTEM,
                f"Check-in succeeded, received {self._display(quota)}",
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            # Lost the race against a concurrent request for the same day
            if await self.records.get_for_date(user_id, today_str) is not None:
                logger.info("checkin_conflict", user_id=user_id, checkin_date=today_str)
                raise AlreadyCheckedInError(today_str)
            logger.error("checkin_insert_failed", user_id=user_id, error=str(e))
            raise StorageFailureError(summarize_exception(e))
        except QuotaError as e:
            await self.db.rollback()
            logger.error(
                "checkin_credit_failed",
                user_id=user_id,
                quota=quota,
                error=str(e),
            )
            capture_credit_error(e, user_id, quota, {"checkin_date": today_str})
            raise CreditFailureError(user_id, quota, summarize_exception(e))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("checkin_write_failed", user_id=user_id, error=str(e))
            raise StorageFailureError(summarize_exception(e))

        logger.info(
            "checkin_granted",
            user_id=user_id,
            checkin_date=today_str,
            quota=quota,
            bonus=bonus_applied,
            incoming_streak=incoming_streak,
        )
        return CheckinResult(
            quota=quota,
            checkin_date=today_str,
            consecutive_days=min(incoming_streak + 1, RECENT_WINDOW),
            bonus_applied=bonus_applied,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    async def get_config(self) -> CheckinConfig:
        return await self.configs.get()

    async def update_config(self, values: dict[str, Any]) -> CheckinConfig:
        """Persist new settings; values must already be validated."""
        try:
            return await self.configs.update(values)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("checkin_config_update_failed", error=str(e))
            raise StorageFailureError(summarize_exception(e))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_stat(self, user_id: int, today: date | None = None) -> dict[str, int]:
        """Aggregate statistics derived from the user's records."""
        today = today or self._get_today()
        total_checkins, total_quota = await self.records.totals(user_id)
        recent = await self.records.recent_dates(user_id)
        this_month = await self.records.month_count(user_id, format_month(today))
        return {
            "total_checkins": total_checkins,
            "consecutive_days": current_streak(recent, today),
            "this_month_checkins": this_month,
            "total_quota": total_quota,
        }

    async def get_today_record(self, user_id: int, today: date | None = None) -> CheckinRecord:
        """The user's record for today.

        Raises:
            CheckinNotFoundError: Not checked in yet today
        """
        today_str = format_date(today or self._get_today())
        record = await self.records.get_for_date(user_id, today_str)
        if record is None:
            raise CheckinNotFoundError("Check-in record")
        return record

    async def get_status(self, user_id: int) -> dict[str, Any]:
        """Today's state, statistics and public config for the check-in page."""
        today = self._get_today()
        try:
            today_record = await self.get_today_record(user_id, today)
        except CheckinNotFoundError:
            today_record = None
        stat = await self.get_stat(user_id, today)
        config = await self.configs.get()

        status: dict[str, Any] = {
            "has_checked_in": today_record is not None,
            "stat": stat,
            "config": {
                "enabled": config.enabled,
                "checkin_code_enabled": config.checkin_code_enabled,
                "calendar_enabled": config.calendar_enabled,
            },
        }
        if today_record is not None:
            status["today_checkin"] = {
                "quota": today_record.quota,
                "quota_display": self._display(today_record.quota),
                "checkin_time": today_record.created_at,
            }
        return status

    def _format_record(self, record: CheckinRecord) -> dict[str, Any]:
        return {
            "id": record.id,
            "quota": record.quota,
            "quota_display": self._display(record.quota),
            "checkin_date": record.checkin_date,
            "checkin_code": record.checkin_code,
            "created_at": record.created_at,
        }

    async def get_history(
        self,
        user_id: int,
        page: int,
        page_size: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """A page of the user's records, each with its streak as of that day."""
        records, total = await self.records.list_by_user(user_id, page, page_size)
        all_dates = await self.records.dates_for_user(user_id)

        items = []
        for record in records:
            item = self._format_record(record)
            item["consecutive_days"] = streak_as_of(all_dates, record.checkin_date)
            items.append(item)
        return items, total

    async def _usernames(self, user_ids: set[int]) -> dict[int, str]:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.username).where(User.id.in_(user_ids))
        )
        return {row.id: row.username for row in result}

    async def get_admin_history(
        self,
        user_id: int | None,
        page: int,
        page_size: int,
    ) -> tuple[list[dict[str, Any]], int]:
        """A page of records across users (or one user) with usernames."""
        if user_id:
            records, total = await self.records.list_by_user(user_id, page, page_size)
        else:
            records, total = await self.records.list_all(page, page_size)

        usernames = await self._usernames({r.user_id for r in records})

        items = []
        for record in records:
            item = self._format_record(record)
            item["user_id"] = record.user_id
            # Deleted users keep their ledger rows
            item["username"] = usernames.get(record.user_id, f"User {record.user_id}")
            items.append(item)
        return items, total

    async def get_calendar(self, user_id: int, month: date | None = None) -> dict[str, Any]:
        """Dates checked in during a month, for the calendar widget."""
        month_str = format_month(month or self._get_today())
        dates = await self.records.dates_in_month(user_id, month_str)
        config = await self.configs.get()
        return {
            "month": month_str,
            "dates": dates,
            "calendar_enabled": config.calendar_enabled,
        }

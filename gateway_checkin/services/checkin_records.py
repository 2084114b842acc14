"""Check-in record store (append-only ledger)."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gateway_checkin.models.checkin import CheckinRecord
from gateway_checkin.services.streak import RECENT_WINDOW
from gateway_checkin.utils.sql import escape_like_pattern


class CheckinRecordStore:
    """Queries and inserts on ``checkin_records``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_for_date(self, user_id: int, checkin_date: str) -> CheckinRecord | None:
        """The user's record for a given day, if any."""
        result = await self.db.execute(
            select(CheckinRecord)
            .where(CheckinRecord.user_id == user_id)
            .where(CheckinRecord.checkin_date == checkin_date)
        )
        return result.scalar_one_or_none()

    async def insert(
        self,
        user_id: int,
        quota: int,
        checkin_code: str,
        checkin_date: str,
    ) -> CheckinRecord:
        """Add a record and flush it.

        A second record for the same (user, day) raises IntegrityError here
        because of ``uq_checkin_user_date``.
        """
        record = CheckinRecord(
            user_id=user_id,
            quota=quota,
            checkin_date=checkin_date,
            checkin_code=checkin_code or "",
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def list_by_user(
        self,
        user_id: int,
        page: int,
        page_size: int,
    ) -> tuple[list[CheckinRecord], int]:
        """One page of a user's records, newest first, plus the total."""
        total = await self.db.scalar(
            select(func.count(CheckinRecord.id)).where(CheckinRecord.user_id == user_id)
        )
        result = await self.db.execute(
            select(CheckinRecord)
            .where(CheckinRecord.user_id == user_id)
            .order_by(CheckinRecord.created_at.desc(), CheckinRecord.id.desc())
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        return list(result.scalars().all()), total or 0

    async def list_all(self, page: int, page_size: int) -> tuple[list[CheckinRecord], int]:
        """One page of records across all users, newest first."""
        total = await self.db.scalar(select(func.count(CheckinRecord.id)))
        result = await self.db.execute(
            select(CheckinRecord)
            .order_by(CheckinRecord.created_at.desc(), CheckinRecord.id.desc())
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        return list(result.scalars().all()), total or 0

    async def dates_for_user(self, user_id: int) -> set[str]:
        """Every date the user has checked in on."""
        result = await self.db.execute(
            select(CheckinRecord.checkin_date).where(CheckinRecord.user_id == user_id)
        )
        return set(result.scalars().all())

    async def recent_dates(self, user_id: int, limit: int = RECENT_WINDOW) -> list[str]:
        """Most recent check-in dates, newest first."""
        result = await self.db.execute(
            select(CheckinRecord.checkin_date)
            .where(CheckinRecord.user_id == user_id)
            .order_by(CheckinRecord.checkin_date.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def totals(self, user_id: int) -> tuple[int, int]:
        """(number of check-ins, total quota granted)."""
        result = await self.db.execute(
            select(
                func.count(CheckinRecord.id),
                func.coalesce(func.sum(CheckinRecord.quota), 0),
            ).where(CheckinRecord.user_id == user_id)
        )
        count, quota = result.one()
        return int(count or 0), int(quota or 0)

    @staticmethod
    def _in_month(month: str):
        return CheckinRecord.checkin_date.like(
            escape_like_pattern(month) + "-%", escape="\\"
        )

    async def dates_in_month(self, user_id: int, month: str) -> list[str]:
        """Dates checked in during ``month`` (YYYY-MM), ascending."""
        result = await self.db.execute(
            select(CheckinRecord.checkin_date)
            .where(CheckinRecord.user_id == user_id)
            .where(self._in_month(month))
            .order_by(CheckinRecord.checkin_date)
        )
        return list(result.scalars().all())

    async def month_count(self, user_id: int, month: str) -> int:
        """Number of check-ins during ``month`` (YYYY-MM)."""
        count = await self.db.scalar(
            select(func.count(CheckinRecord.id))
            .where(CheckinRecord.user_id == user_id)
            .where(self._in_month(month))
        )
        return int(count or 0)

"""User quota balance operations.

The check-in core credits balances through this service only. Changes are
made on the caller's session and are committed (or rolled back) together
with whatever else the caller wrote in the same unit of work.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gateway_checkin.models.log import Log, LogType
from gateway_checkin.models.user import User

logger = logging.getLogger(__name__)


class QuotaError(Exception):
    """Quota operation error."""

    pass


class QuotaService:
    """Atomic balance mutations on ``users.quota``."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_quota(self, user_id: int) -> int:
        """Current balance.

        Raises:
            QuotaError: If the user does not exist
        """
        quota = await self.session.scalar(select(User.quota).where(User.id == user_id))
        if quota is None:
            raise QuotaError(f"User not found: {user_id}")
        return quota

    async def increase_user_quota(self, user_id: int, amount: int) -> None:
        """Credit ``amount`` to the user's balance.

        Uses a single ``UPDATE ... SET quota = quota + :amount`` so concurrent
        credits never overwrite each other.

        Raises:
            QuotaError: Negative amount or unknown user
        """
        if amount < 0:
            raise QuotaError("Amount cannot be negative")
        if amount == 0:
            return

        result = await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(quota=User.quota + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise QuotaError(f"User not found: {user_id}")

        logger.info(f"Quota credit: user={user_id} amount={amount:+,}")

    def record_log(self, user_id: int, log_type: LogType, content: str) -> Log:
        """Queue a user-visible log line in the current unit of work."""
        entry = Log(user_id=user_id, type=log_type.value, content=content)
        self.session.add(entry)
        return entry

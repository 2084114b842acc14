"""Check-in configuration store."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gateway_checkin.logging_config import get_logger
from gateway_checkin.models.checkin import CHECKIN_CONFIG_DEFAULTS, CheckinConfig
from gateway_checkin.utils.errors import CheckinValidationError

logger = get_logger(__name__)


def validate_config_update(values: dict[str, Any]) -> None:
    """Check quota bounds before a config write.

    Raises:
        CheckinValidationError: On the first violated rule
    """
    min_quota = values.get("min_quota", 0)
    max_quota = values.get("max_quota", 0)

    if min_quota < 0:
        raise CheckinValidationError("min_quota must not be negative", "min_quota")
    if max_quota < 0:
        raise CheckinValidationError("max_quota must not be negative", "max_quota")
    if max_quota > 0 and max_quota < min_quota:
        raise CheckinValidationError(
            "max_quota must not be less than min_quota", "max_quota"
        )
    if values.get("consecutive_reward_quota", 0) < 0:
        raise CheckinValidationError(
            "consecutive_reward_quota must not be negative",
            "consecutive_reward_quota",
        )


class CheckinConfigStore:
    """Reads and writes the single check-in configuration row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _first_row(self, for_update: bool = False) -> CheckinConfig | None:
        stmt = select(CheckinConfig).order_by(CheckinConfig.id).limit(1)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self) -> CheckinConfig:
        """Saved config, or a transient object with default values."""
        config = await self._first_row()
        if config is None:
            return CheckinConfig.defaults()
        return config

    async def update(self, values: dict[str, Any]) -> CheckinConfig:
        """Replace the configuration row, creating it when absent.

        Unknown keys are ignored. Caller validates bounds first.
        """
        config = await self._first_row(for_update=True)
        if config is None:
            config = CheckinConfig.defaults()
            self.db.add(config)

        for key in CHECKIN_CONFIG_DEFAULTS:
            if key in values:
                setattr(config, key, values[key])

        await self.db.commit()
        await self.db.refresh(config)

        logger.info(
            "checkin_config_updated",
            enabled=config.enabled,
            min_quota=config.min_quota,
            max_quota=config.max_quota,
            checkin_code_enabled=config.checkin_code_enabled,
            consecutive_reward_enabled=config.consecutive_reward_enabled,
        )
        return config

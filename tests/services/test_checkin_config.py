"""Tests for check-in config validation and storage."""

import pytest

from gateway_checkin.services.checkin_config import CheckinConfigStore, validate_config_update
from gateway_checkin.utils.errors import CheckinValidationError
from tests.conftest import make_config


class TestValidateConfigUpdate:
    """Rules are checked in a fixed order; the first violation wins."""

    def test_valid(self):
        validate_config_update(make_config(min_quota=100, max_quota=200))

    def test_zero_max_means_unbounded(self):
        validate_config_update(make_config(min_quota=500, max_quota=0))

    def test_equal_bounds(self):
        validate_config_update(make_config(min_quota=100, max_quota=100))

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"min_quota": -1}, "min_quota"),
            ({"max_quota": -5}, "max_quota"),
            ({"min_quota": 300, "max_quota": 200}, "max_quota"),
            ({"consecutive_reward_quota": -1}, "consecutive_reward_quota"),
        ],
    )
    def test_rejects(self, overrides, field):
        with pytest.raises(CheckinValidationError) as exc_info:
            validate_config_update(make_config(**overrides))
        assert exc_info.value.details == {"field": field}

    def test_first_violation_reported(self):
        with pytest.raises(CheckinValidationError, match="min_quota must not be negative"):
            validate_config_update(
                make_config(min_quota=-1, max_quota=-1, consecutive_reward_quota=-1)
            )


class TestCheckinConfigStore:
    """Single-row storage."""

    @pytest.mark.asyncio
    async def test_get_returns_unsaved_defaults(self, test_db):
        config = await CheckinConfigStore(test_db).get()
        assert config.id is None
        assert config.to_dict()["checkin_code"] == ""

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_keys(self, test_db):
        store = CheckinConfigStore(test_db)
        config = await store.update({"enabled": True, "bogus": 1})

        assert config.enabled is True
        assert config.min_quota == 100
        assert not hasattr(config, "bogus")

    @pytest.mark.asyncio
    async def test_update_reuses_row(self, test_db):
        store = CheckinConfigStore(test_db)
        first = await store.update(make_config(min_quota=10, max_quota=20))
        second = await store.update(make_config(min_quota=30, max_quota=40))

        assert first.id == second.id
        assert (await store.get()).min_quota == 30

"""Tests for check-in API endpoints."""

import pytest
from httpx import AsyncClient

from gateway_checkin.models import CheckinRecord, User

API = "/api/v1/checkin"


class TestCallerResolution:
    """X-User-Id handling and the admin guard."""

    @pytest.mark.asyncio
    async def test_missing_header(self, test_client: AsyncClient):
        response = await test_client.post(API)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_REQUIRED"

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client: AsyncClient):
        response = await test_client.get(f"{API}/status", headers={"X-User-Id": "777"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_header(self, test_client: AsyncClient):
        response = await test_client.get(f"{API}/status", headers={"X-User-Id": "abc"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_disabled_user(self, test_client: AsyncClient, disabled_user: User):
        response = await test_client.post(
            API, headers={"X-User-Id": str(disabled_user.id)}
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_routes_reject_common_user(
        self, test_client: AsyncClient, user_headers: dict
    ):
        for method, path in (
            ("GET", f"{API}/config"),
            ("PUT", f"{API}/config"),
            ("GET", f"{API}/history/all"),
        ):
            response = await test_client.request(method, path, headers=user_headers, json={})
            assert response.status_code == 403, path
            assert response.json()["error"]["code"] == "AUTH_ADMIN_REQUIRED"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client: AsyncClient, user_headers: dict):
        response = await test_client.get(
            f"{API}/status", headers={**user_headers, "X-Request-ID": "req-1"}
        )
        assert response.headers["X-Request-ID"] == "req-1"


class TestCheckinEndpoint:
    """POST /api/v1/checkin"""

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, test_client: AsyncClient, user_headers: dict):
        response = await test_client.post(API, headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Check-in is disabled"}

    @pytest.mark.asyncio
    async def test_success_then_already_checked_in(
        self, test_client: AsyncClient, user_headers: dict, enabled_config
    ):
        response = await test_client.post(API, headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Check-in successful"
        assert body["data"] == {
            "quota": 100,
            "quota_display": "$0.10",
            "consecutive_days": 1,
        }

        response = await test_client.post(API, headers=user_headers, json={})
        assert response.json() == {"success": False, "message": "Already checked in today"}

    @pytest.mark.asyncio
    async def test_balance_credited(
        self, test_client: AsyncClient, test_db, test_user: User, user_headers: dict, enabled_config
    ):
        user_id = test_user.id
        await test_client.post(API, headers=user_headers)

        user = await test_db.get(User, user_id, populate_existing=True)
        assert user.quota == 1100

    @pytest.mark.asyncio
    async def test_code_gate(
        self, test_client: AsyncClient, user_headers: dict, admin_headers: dict
    ):
        from tests.conftest import make_config

        await test_client.put(
            f"{API}/config",
            headers=admin_headers,
            json=make_config(checkin_code_enabled=True, checkin_code="LUCKY7"),
        )

        response = await test_client.post(API, headers=user_headers)
        assert response.json() == {"success": False, "message": "Invalid check-in code"}

        response = await test_client.post(
            API, headers=user_headers, json={"checkin_code": "LUCKY7"}
        )
        assert response.json()["success"] is True

    @pytest.mark.asyncio
    async def test_invalid_body(
        self, test_client: AsyncClient, user_headers: dict, enabled_config
    ):
        response = await test_client.post(
            API, headers=user_headers, json={"checkin_code": "x" * 21}
        )

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Invalid parameters"}


class TestStatusEndpoint:
    """GET /api/v1/checkin/status"""

    @pytest.mark.asyncio
    async def test_status_after_checkin(
        self, test_client: AsyncClient, user_headers: dict, enabled_config
    ):
        response = await test_client.get(f"{API}/status", headers=user_headers)
        data = response.json()["data"]
        assert data["has_checked_in"] is False
        assert data["today_checkin"] is None
        assert data["config"]["enabled"] is True

        await test_client.post(API, headers=user_headers)

        response = await test_client.get(f"{API}/status", headers=user_headers)
        data = response.json()["data"]
        assert data["has_checked_in"] is True
        assert data["today_checkin"]["quota"] == 100
        assert data["today_checkin"]["quota_display"] == "$0.10"
        assert data["today_checkin"]["checkin_time"] is not None
        assert data["stat"]["total_checkins"] == 1
        assert data["stat"]["consecutive_days"] == 1
        assert data["stat"]["this_month_checkins"] == 1
        assert data["stat"]["total_quota"] == 100


class TestHistoryEndpoints:
    """GET /api/v1/checkin/history and /history/all"""

    @pytest.mark.asyncio
    async def test_pagination_normalized(
        self, test_client: AsyncClient, user_headers: dict, enabled_config
    ):
        await test_client.post(API, headers=user_headers)

        response = await test_client.get(
            f"{API}/history",
            headers=user_headers,
            params={"page": 0, "page_size": 500},
        )

        data = response.json()["data"]
        assert data["page"] == 1
        assert data["page_size"] == 20
        assert data["total"] == 1
        item = data["items"][0]
        assert item["quota"] == 100
        assert item["consecutive_days"] == 1
        assert item["checkin_code"] == ""

    @pytest.mark.asyncio
    async def test_non_numeric_page(self, test_client: AsyncClient, user_headers: dict):
        response = await test_client.get(
            f"{API}/history", headers=user_headers, params={"page": "two"}
        )
        assert response.json() == {"success": False, "message": "Invalid parameters"}

    @pytest.mark.asyncio
    async def test_admin_history_filters_and_fallback(
        self,
        test_client: AsyncClient,
        test_db,
        test_user: User,
        user_headers: dict,
        admin_headers: dict,
        enabled_config,
    ):
        user_id = test_user.id
        await test_client.post(API, headers=user_headers)
        test_db.add(CheckinRecord(user_id=31337, quota=100, checkin_date="2026-01-01"))
        await test_db.commit()

        response = await test_client.get(f"{API}/history/all", headers=admin_headers)
        data = response.json()["data"]
        assert data["total"] == 2
        usernames = {item["user_id"]: item["username"] for item in data["items"]}
        assert usernames == {user_id: "alice", 31337: "User 31337"}

        response = await test_client.get(
            f"{API}/history/all",
            headers=admin_headers,
            params={"user_id": str(user_id)},
        )
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_admin_history_invalid_user_id(
        self, test_client: AsyncClient, admin_headers: dict
    ):
        response = await test_client.get(
            f"{API}/history/all", headers=admin_headers, params={"user_id": "abc"}
        )
        assert response.json() == {"success": False, "message": "Invalid user ID"}


class TestCalendarEndpoint:
    """GET /api/v1/checkin/calendar"""

    @pytest.mark.asyncio
    async def test_explicit_month(
        self, test_client: AsyncClient, test_db, test_user: User, user_headers: dict
    ):
        test_db.add(CheckinRecord(user_id=test_user.id, quota=100, checkin_date="2025-12-24"))
        test_db.add(CheckinRecord(user_id=test_user.id, quota=100, checkin_date="2026-01-02"))
        await test_db.commit()

        response = await test_client.get(
            f"{API}/calendar", headers=user_headers, params={"month": "2025-12"}
        )
        assert response.json()["data"] == {
            "month": "2025-12",
            "dates": ["2025-12-24"],
            "calendar_enabled": False,
        }

    @pytest.mark.asyncio
    async def test_bad_month(self, test_client: AsyncClient, user_headers: dict):
        response = await test_client.get(
            f"{API}/calendar", headers=user_headers, params={"month": "December"}
        )
        assert response.json() == {
            "success": False,
            "message": "month must be in YYYY-MM format",
        }


class TestConfigEndpoints:
    """GET/PUT /api/v1/checkin/config"""

    @pytest.mark.asyncio
    async def test_defaults(self, test_client: AsyncClient, admin_headers: dict):
        response = await test_client.get(f"{API}/config", headers=admin_headers)

        data = response.json()["data"]
        assert data["id"] is None
        assert data["enabled"] is False
        assert data["min_quota"] == 100
        assert data["max_quota"] == 100
        assert data["consecutive_reward_quota"] == 50
        assert data["calendar_enabled"] is False

    @pytest.mark.asyncio
    async def test_update(self, test_client: AsyncClient, admin_headers: dict):
        from tests.conftest import make_config

        response = await test_client.put(
            f"{API}/config",
            headers=admin_headers,
            json=make_config(min_quota=250, max_quota=0, calendar_enabled=True),
        )

        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Check-in configuration updated"
        assert body["data"]["min_quota"] == 250
        assert body["data"]["calendar_enabled"] is True

        response = await test_client.get(f"{API}/config", headers=admin_headers)
        assert response.json()["data"]["min_quota"] == 250

    @pytest.mark.asyncio
    async def test_update_rejected(self, test_client: AsyncClient, admin_headers: dict):
        from tests.conftest import make_config

        response = await test_client.put(
            f"{API}/config",
            headers=admin_headers,
            json=make_config(min_quota=500, max_quota=100),
        )
        assert response.json() == {
            "success": False,
            "message": "max_quota must not be less than min_quota",
        }

        response = await test_client.get(f"{API}/config", headers=admin_headers)
        assert response.json()["data"]["enabled"] is False


class TestHealth:
    """Liveness endpoint."""

    @pytest.mark.asyncio
    async def test_liveness(self, test_client: AsyncClient):
        response = await test_client.get("/health/live")
        assert response.json() == {"status": "alive"}

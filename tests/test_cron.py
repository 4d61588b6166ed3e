"""Tests for the scheduled schedule refresh"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.config import settings
from app.jobs.tasks import request_schedule_refresh
from app.api.schedule import get_schedule_cache
from app.services.espn import EspnScheduleClient, ScheduleCache


@pytest.fixture
def cache():
    def handler(request: httpx.Request) -> httpx.Response:
        if "/teams/7/" in request.url.path:
            return httpx.Response(200, json={"events": []})
        return httpx.Response(500)

    schedule_cache = ScheduleCache(
        EspnScheduleClient(
            base_url="https://espn.test/football/nfl",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        ),
        ttl=1800,
    )
    app.dependency_overrides[get_schedule_cache] = lambda: schedule_cache
    yield schedule_cache
    app.dependency_overrides.pop(get_schedule_cache, None)


async def test_schedule_refresh_reports_each_team(client: AsyncClient, test_db, test_tenant, other_tenant, cache):
    other_tenant.home_team_id = "99"
    await test_db.commit()

    response = await client.post("/cron/schedule-refresh")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["refreshed"] == [{"team_id": "7", "games": 0}]
    assert [f["team_id"] for f in body["failed"]] == ["99"]
    assert not cache.is_stale("7", "America/Denver")


async def test_refresh_job_warms_api_cache(client: AsyncClient, test_tenant, cache, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")
    assert cache.is_stale("7", "America/Denver")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as api:
        outcome = await request_schedule_refresh(api)

    assert outcome == {"refreshed": 1, "failed": 0}
    assert not cache.is_stale("7", "America/Denver")


async def test_refresh_job_fails_on_rejected_secret():
    def reject(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Unauthorized"})

    async with AsyncClient(transport=httpx.MockTransport(reject), base_url="http://api.test") as api:
        with pytest.raises(httpx.HTTPStatusError):
            await request_schedule_refresh(api)


async def test_cron_secret_needs_bearer_scheme(client: AsyncClient, test_tenant, cache, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")

    basic = await client.post("/cron/schedule-refresh", headers={"Authorization": "Basic s3cret"})
    longer = await client.post("/cron/schedule-refresh", headers={"Authorization": "Bearer s3cret2"})
    allowed = await client.post("/cron/schedule-refresh", headers={"Authorization": "bearer s3cret"})

    assert basic.status_code == 401
    assert longer.status_code == 401
    assert allowed.status_code == 200

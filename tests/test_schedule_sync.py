"""Tests for the team schedule client, cache and calendar sync"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.main import app
from app.api.schedule import get_schedule_cache
from app.errors import ExternalServiceError
from app.models.audit import AuditLog
from app.models.event import Event, EventType
from app.services import schedule_sync
from app.services.espn import EspnScheduleClient, ScheduleCache, map_game_status, parse_game

DENVER = ZoneInfo("America/Denver")


def _kickoff(days_ahead):
    return (datetime.now(timezone.utc) + timedelta(days=days_ahead)).replace(hour=1, minute=20, second=0, microsecond=0)


def _espn_event(event_id, opponent, kickoff, home=True, time_valid=True):
    return {
        "id": event_id,
        "name": f"{opponent} at Denver Broncos" if home else f"Denver Broncos at {opponent}",
        "week": {"number": 3},
        "competitions": [{
            "date": kickoff.strftime("%Y-%m-%dT%H:%MZ"),
            "timeValid": time_valid,
            "venue": {"fullName": "Empower Field at Mile High"},
            "status": {"type": {"state": "pre", "completed": False}},
            "competitors": [
                {"homeAway": "home" if home else "away", "team": {"id": "7", "displayName": "Denver Broncos"}},
                {"homeAway": "away" if home else "home", "team": {"id": "12", "displayName": opponent}},
            ],
        }],
    }


def _schedule_payload():
    return {"events": [
        _espn_event("401", "Kansas City Chiefs", _kickoff(10)),
        _espn_event("402", "Las Vegas Raiders", _kickoff(17), home=False),
        {"id": "bad", "competitions": []},
    ]}


class FakeEspn:
    """Mock transport handler counting requests"""

    def __init__(self, payload=None, status_code=200):
        self.payload = payload if payload is not None else _schedule_payload()
        self.status_code = status_code
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        assert request.url.path.endswith("/teams/7/schedule")
        return httpx.Response(self.status_code, json=self.payload)


def _client(handler):
    return EspnScheduleClient(
        base_url="https://espn.test/football/nfl",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_parse_game_converts_to_local_time():
    kickoff = _kickoff(10)
    game = parse_game(_espn_event("401", "Kansas City Chiefs", kickoff), "7", DENVER)

    local = kickoff.astimezone(DENVER)
    assert game.id == "espn-401"
    assert game.game_date == local.date()
    assert game.kickoff == local.strftime("%H:%M")
    assert game.opponent == "Kansas City Chiefs"
    assert game.is_home is True
    assert game.week == 3
    assert game.status == "scheduled"


def test_unannounced_kickoff_has_no_time():
    game = parse_game(_espn_event("403", "Denver Rivals", _kickoff(30), time_valid=False), "7", DENVER)

    assert game.kickoff is None


def test_parse_game_without_our_team():
    event = _espn_event("404", "Somebody", _kickoff(3))
    assert parse_game(event, "99", DENVER) is None


def test_map_game_status():
    assert map_game_status({"type": {"completed": True}}) == "finished"
    assert map_game_status({"type": {"state": "in"}}) == "live"
    assert map_game_status({"type": {"state": "post"}}) == "finished"
    assert map_game_status({}) == "scheduled"


async def test_fetch_skips_malformed_events():
    payload = _schedule_payload()
    no_team = _espn_event("405", "Seattle Seahawks", _kickoff(24))
    no_team["competitions"][0]["competitors"][1] = {"homeAway": "away"}
    null_team = _espn_event("406", "Chicago Bears", _kickoff(31))
    null_team["competitions"][0]["competitors"][0]["team"] = None
    null_opponent = _espn_event("407", "Green Bay Packers", _kickoff(38))
    null_opponent["competitions"][0]["competitors"][1]["team"] = None
    payload["events"].extend([no_team, null_team, null_opponent, {"id": "408", "competitions": [None]}])

    games = await _client(FakeEspn(payload)).fetch_team_schedule("7", "America/Denver")

    assert [g.id for g in games] == ["espn-401", "espn-402"]


async def test_fetch_failure_raises_external_error():
    with pytest.raises(ExternalServiceError):
        await _client(FakeEspn(status_code=503)).fetch_team_schedule("7")


async def test_cache_serves_fresh_data_without_refetch():
    espn = FakeEspn()
    clock = FakeClock()
    cache = ScheduleCache(_client(espn), ttl=60, clock=clock)

    await cache.get_games("7")
    await cache.get_games("7")
    assert espn.calls == 1
    assert cache.age("7") == 0

    clock.now += 61
    assert cache.is_stale("7")
    await cache.get_games("7")
    assert espn.calls == 2


async def test_cache_keeps_stale_data_when_refresh_fails():
    espn = FakeEspn()
    clock = FakeClock()
    cache = ScheduleCache(_client(espn), ttl=60, clock=clock)
    first = await cache.get_games("7")

    espn.status_code = 500
    clock.now += 120
    games = await cache.get_games("7")

    assert games == first


async def test_cache_raises_when_empty_and_unreachable():
    cache = ScheduleCache(_client(FakeEspn(status_code=500)), ttl=60)

    with pytest.raises(ExternalServiceError):
        await cache.get_games("7")


@pytest.fixture
def espn():
    handler = FakeEspn()
    cache = ScheduleCache(_client(handler), ttl=1800)
    app.dependency_overrides[get_schedule_cache] = lambda: cache
    yield handler
    app.dependency_overrides.pop(get_schedule_cache, None)


async def test_sync_is_idempotent(client: AsyncClient, test_db, test_tenant, espn, manager_headers):
    first = await client.post("/admin/schedule/sync", headers=manager_headers)

    assert first.status_code == 200
    body = first.json()
    assert len(body["syncedGames"]) == 2
    assert body["skippedGames"] == []
    assert body["totalGames"] == 2

    second = await client.post("/admin/schedule/sync", headers=manager_headers)

    assert second.status_code == 200
    assert second.json()["syncedGames"] == []
    assert [g["reason"] for g in second.json()["skippedGames"]] == ["Event already exists"] * 2

    events = (await test_db.execute(select(Event).where(Event.tenant_id == test_tenant.id))).scalars().all()
    assert len(events) == 2
    assert {e.external_id for e in events} == {"espn-401", "espn-402"}
    assert all(e.end_time == "23:59" for e in events)
    away = next(e for e in events if e.external_id == "espn-402")
    assert away.location == "Watch party at Test Restaurant"

    sports_types = (
        await test_db.execute(select(EventType).where(EventType.tenant_id == test_tenant.id))
    ).scalars().all()
    assert [t.name for t in sports_types] == ["Sports"]

    syncs = (
        await test_db.execute(select(AuditLog).where(AuditLog.resource == "events_sync"))
    ).scalars().all()
    assert len(syncs) == 2
    assert sorted(entry.changes["synced_games"] for entry in syncs) == [0, 2]

    assert espn.calls == 1


async def test_manual_event_blocks_game(client: AsyncClient, espn, manager_headers):
    kickoff = _kickoff(10).astimezone(DENVER)
    day = kickoff.date().isoformat()
    await client.post(
        "/admin/events",
        json={"name": "Kansas City Chiefs watch party", "startDate": f"{day}T17:00:00", "endDate": f"{day}T23:00:00"},
        headers=manager_headers,
    )

    response = await client.post("/admin/schedule/sync", headers=manager_headers)

    assert len(response.json()["syncedGames"]) == 1
    assert response.json()["skippedGames"][0]["gameId"] == "espn-401"


async def test_sync_requires_home_team(client: AsyncClient, test_db, test_tenant, espn, manager_headers):
    test_tenant.home_team_id = None
    await test_db.commit()

    response = await client.post("/admin/schedule/sync", headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "No home team selected"


async def test_list_games(client: AsyncClient, espn, staff_headers):
    response = await client.get("/admin/schedule/games", headers=staff_headers)

    assert response.status_code == 200
    assert response.json()["teamId"] == "7"
    assert len(response.json()["games"]) == 2


async def test_staff_cannot_sync(client: AsyncClient, espn, staff_headers):
    response = await client.post("/admin/schedule/sync", headers=staff_headers)

    assert response.status_code == 403
    assert espn.calls == 0


async def test_failed_game_does_not_abort_sync(client: AsyncClient, test_db, test_tenant, espn, manager_headers, monkeypatch):
    real_build = schedule_sync.build_game_event

    def build_or_fail(tenant_id, tenant_name, event_type_id, game):
        if game.id == "espn-401":
            raise RuntimeError("calendar write rejected")
        return real_build(tenant_id, tenant_name, event_type_id, game)

    monkeypatch.setattr(schedule_sync, "build_game_event", build_or_fail)

    response = await client.post("/admin/schedule/sync", headers=manager_headers)

    assert response.status_code == 200
    body = response.json()
    assert [g["gameId"] for g in body["failedGames"]] == ["espn-401"]
    assert body["failedGames"][0]["reason"] == "calendar write rejected"
    assert [g["gameId"] for g in body["syncedGames"]] == ["espn-402"]
    assert body["totalGames"] == 2

    events = (await test_db.execute(select(Event).where(Event.tenant_id == test_tenant.id))).scalars().all()
    assert [e.external_id for e in events] == ["espn-402"]

    sync_entry = (
        await test_db.execute(select(AuditLog).where(AuditLog.resource == "events_sync"))
    ).scalar_one()
    assert sync_entry.changes["failed_games"] == 1
    assert sync_entry.changes["synced_games"] == 1

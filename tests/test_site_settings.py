"""Tests for site profile, theme and business hours"""

from httpx import AsyncClient
from sqlalchemy import select

from app.models.audit import AuditLog


async def _entries(test_db, resource):
    result = await test_db.execute(select(AuditLog).where(AuditLog.resource == resource))
    return result.scalars().all()


async def test_update_site_settings(client: AsyncClient, test_db, owner_headers):
    response = await client.put(
        "/admin/site-settings",
        json={"phone": "(303) 555-0100", "timezone": "America/Chicago"},
        headers=owner_headers,
    )

    assert response.status_code == 200
    assert response.json()["timezone"] == "America/Chicago"

    entry = (await _entries(test_db, "site_settings"))[0]
    assert entry.changes == {"phone": "(303) 555-0100", "timezone": "America/Chicago"}
    assert entry.previous_values["timezone"] == "America/Denver"


async def test_unknown_timezone_rejected(client: AsyncClient, owner_headers):
    response = await client.put(
        "/admin/site-settings",
        json={"timezone": "Mars/Olympus_Mons"},
        headers=owner_headers,
    )

    assert response.status_code == 400


async def test_manager_cannot_edit_settings(client: AsyncClient, manager_headers):
    response = await client.put("/admin/site-settings", json={"name": "Hijacked"}, headers=manager_headers)

    assert response.status_code == 403


async def test_change_theme(client: AsyncClient, test_db, owner_headers):
    response = await client.put("/admin/theme", json={"themeId": "midnight"}, headers=owner_headers)

    assert response.status_code == 200
    assert response.json() == {"themeId": "midnight"}

    current = await client.get("/admin/theme", headers=owner_headers)
    assert current.json()["themeId"] == "midnight"

    entry = (await _entries(test_db, "theme"))[0]
    assert entry.previous_values == {"theme_id": "classic-green"}


async def test_unknown_theme_rejected(client: AsyncClient, test_db, owner_headers):
    response = await client.put("/admin/theme", json={"themeId": "neon-pink"}, headers=owner_headers)

    assert response.status_code == 400
    assert await _entries(test_db, "theme") == []


async def test_business_hours_upsert(client: AsyncClient, test_db, manager_headers):
    first = await client.put(
        "/admin/business-hours",
        json={"hours": [
            {"dayOfWeek": 1, "openTime": "11:00", "closeTime": "22:00"},
            {"dayOfWeek": 0, "isClosed": True, "openTime": "12:00"},
        ]},
        headers=manager_headers,
    )

    assert first.status_code == 200
    assert [row["dayOfWeek"] for row in first.json()] == [0, 1]
    assert first.json()[0]["openTime"] is None

    second = await client.put(
        "/admin/business-hours",
        json={"hours": [{"dayOfWeek": 1, "openTime": "10:00", "closeTime": "22:00"}]},
        headers=manager_headers,
    )

    assert second.status_code == 200
    assert second.json()[1]["openTime"] == "10:00"

    entries = await _entries(test_db, "business_hours")
    assert len(entries) == 2
    latest = max(entries, key=lambda e: e.created_at)
    assert latest.changes == {"1": {"open_time": "10:00"}}
    assert latest.previous_values == {"1": {"open_time": "11:00"}}


async def test_duplicate_days_rejected(client: AsyncClient, manager_headers):
    response = await client.put(
        "/admin/business-hours",
        json={"hours": [{"dayOfWeek": 2, "isClosed": True}, {"dayOfWeek": 2, "isClosed": True}]},
        headers=manager_headers,
    )

    assert response.status_code == 400

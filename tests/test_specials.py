"""Tests for specials management"""

from datetime import date, timedelta

from httpx import AsyncClient


def _special_payload(**overrides):
    today = date.today()
    payload = {
        "name": "Taco Tuesday",
        "description": "Three brisket tacos",
        "price": "$9.99",
        "originalPrice": "13.99",
        "startDate": today.isoformat(),
        "endDate": (today + timedelta(days=14)).isoformat(),
    }
    payload.update(overrides)
    return payload


async def test_create_special_shows_in_activity_feed(client: AsyncClient, test_tenant, manager_headers, owner_headers):
    response = await client.post("/admin/specials", json=_special_payload(), headers=manager_headers)

    assert response.status_code == 201
    special = response.json()
    assert special["priceCents"] == 999
    assert special["originalPriceCents"] == 1399
    assert special["isActive"] is True

    feed = await client.get("/admin/activity?category=specials", headers=owner_headers)

    assert feed.status_code == 200
    body = feed.json()
    assert body["total"] == 1
    assert body["hasMore"] is False
    entry = body["logs"][0]
    assert entry["action"] == "create"
    assert entry["resource"] == "specials"
    assert entry["resourceId"] == special["id"]
    assert entry["userEmail"] == "manager@testrestaurant.com"
    assert entry["changes"]["name"] == "Taco Tuesday"
    assert entry["changes"]["start_date"] == date.today().isoformat()
    assert entry["metadata"]["original_price_cents"] == 1399


async def test_end_before_start_rejected(client: AsyncClient, manager_headers):
    today = date.today()
    response = await client.post(
        "/admin/specials",
        json=_special_payload(startDate=today.isoformat(), endDate=(today - timedelta(days=1)).isoformat()),
        headers=manager_headers,
    )

    assert response.status_code == 400
    assert any("End date cannot be before start date" in d for d in response.json()["details"])


async def test_price_is_optional(client: AsyncClient, manager_headers):
    response = await client.post(
        "/admin/specials",
        json=_special_payload(price=None, originalPrice=""),
        headers=manager_headers,
    )

    assert response.status_code == 201
    assert response.json()["priceCents"] is None
    assert response.json()["originalPriceCents"] is None


async def test_filter_by_active(client: AsyncClient, manager_headers):
    await client.post("/admin/specials", json=_special_payload(name="Active"), headers=manager_headers)
    await client.post("/admin/specials", json=_special_payload(name="Paused", isActive=False), headers=manager_headers)

    response = await client.get("/admin/specials?is_active=false", headers=manager_headers)

    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Paused"]


async def test_update_special_logs_previous_values(client: AsyncClient, manager_headers, owner_headers):
    created = (await client.post("/admin/specials", json=_special_payload(), headers=manager_headers)).json()

    response = await client.put(
        f"/admin/specials/{created['id']}",
        json={"price": "8.50", "isActive": False},
        headers=manager_headers,
    )

    assert response.status_code == 200
    assert response.json()["priceCents"] == 850

    feed = (await client.get("/admin/activity?category=specials", headers=owner_headers)).json()
    update = feed["logs"][0]
    assert update["action"] == "update"
    assert update["changes"] == {"price_cents": 850, "is_active": False}
    assert update["previousValues"] == {"price_cents": 999, "is_active": True}


async def test_update_cannot_invert_dates(client: AsyncClient, manager_headers):
    created = (await client.post("/admin/specials", json=_special_payload(), headers=manager_headers)).json()

    response = await client.put(
        f"/admin/specials/{created['id']}",
        json={"endDate": (date.today() - timedelta(days=3)).isoformat()},
        headers=manager_headers,
    )

    assert response.status_code == 400


async def test_staff_reads_but_cannot_delete(client: AsyncClient, manager_headers, staff_headers):
    created = (await client.post("/admin/specials", json=_special_payload(), headers=manager_headers)).json()

    assert (await client.get(f"/admin/specials/{created['id']}", headers=staff_headers)).status_code == 200
    assert (await client.delete(f"/admin/specials/{created['id']}", headers=staff_headers)).status_code == 403


async def test_delete_special(client: AsyncClient, manager_headers):
    created = (await client.post("/admin/specials", json=_special_payload(), headers=manager_headers)).json()

    response = await client.delete(f"/admin/specials/{created['id']}", headers=manager_headers)

    assert response.status_code == 200
    assert (await client.get(f"/admin/specials/{created['id']}", headers=manager_headers)).status_code == 404

"""Tests for dashboard user management"""

from httpx import AsyncClient
from sqlalchemy import select

from app.models.audit import AuditLog
from app.models.user import User, UserRole


async def test_owner_creates_manager(client: AsyncClient, test_db, test_tenant, owner_headers):
    response = await client.post(
        "/admin/users",
        json={"email": "New.Manager@TestRestaurant.com", "password": "longenough", "fullName": "Nia Newhire", "role": "MANAGER"},
        headers=owner_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new.manager@testrestaurant.com"
    assert data["role"] == "MANAGER"
    assert data["tenantId"] == str(test_tenant.id)
    assert "hashedPassword" not in data

    entry = (await test_db.execute(select(AuditLog).where(AuditLog.resource == "users"))).scalar_one()
    assert "password" not in entry.changes
    assert entry.changes["role"] == "MANAGER"


async def test_new_user_joins_callers_tenant(client: AsyncClient, test_tenant, other_tenant, owner_headers):
    response = await client.post(
        "/admin/users",
        json={"email": "host@testrestaurant.com", "password": "longenough", "tenantId": str(other_tenant.id)},
        headers=owner_headers,
    )

    assert response.status_code == 201
    assert response.json()["tenantId"] == str(test_tenant.id)


async def test_superadmin_role_cannot_be_assigned(client: AsyncClient, test_tenant, superadmin_headers):
    response = await client.post(
        f"/admin/users?tenantId={test_tenant.id}",
        json={"email": "root@testrestaurant.com", "password": "longenough", "role": "SUPERADMIN"},
        headers=superadmin_headers,
    )

    assert response.status_code == 403


async def test_owner_cannot_create_owner(client: AsyncClient, owner_headers):
    response = await client.post(
        "/admin/users",
        json={"email": "second.owner@testrestaurant.com", "password": "longenough", "role": "OWNER"},
        headers=owner_headers,
    )

    assert response.status_code == 403


async def test_duplicate_email_conflicts(client: AsyncClient, staff_user, owner_headers):
    response = await client.post(
        "/admin/users",
        json={"email": "STAFF@testrestaurant.com", "password": "longenough"},
        headers=owner_headers,
    )

    assert response.status_code == 409


async def test_invalid_user_payload(client: AsyncClient, owner_headers):
    response = await client.post(
        "/admin/users",
        json={"email": "not-an-email", "password": "short", "fullName": "R2-D2"},
        headers=owner_headers,
    )

    assert response.status_code == 400
    fields = {detail.split(":")[0] for detail in response.json()["details"]}
    assert fields == {"email", "password", "fullName"}


async def test_manager_cannot_list_users(client: AsyncClient, manager_headers):
    response = await client.get("/admin/users", headers=manager_headers)

    assert response.status_code == 403


async def test_assignable_roles(client: AsyncClient, owner_headers):
    response = await client.get("/admin/users/assignable-roles", headers=owner_headers)

    assert response.json() == ["MANAGER", "STAFF"]


async def test_disable_user_records_who_and_why(client: AsyncClient, test_db, owner_user, staff_user, owner_headers):
    response = await client.put(
        f"/admin/users/{staff_user.id}",
        json={"isActive": False, "disabledReason": "Left the company"},
        headers=owner_headers,
    )

    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert response.json()["disabledReason"] == "Left the company"

    stored = (
        await test_db.execute(
            select(User).where(User.id == staff_user.id).execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert stored.disabled_by == owner_user.id
    assert stored.disabled_at is not None


async def test_disabled_user_token_rejected(client: AsyncClient, staff_user, staff_headers, owner_headers):
    await client.put(f"/admin/users/{staff_user.id}", json={"isActive": False}, headers=owner_headers)

    response = await client.get("/admin/menu/items", headers=staff_headers)

    assert response.status_code == 401


async def test_cannot_change_own_role(client: AsyncClient, owner_user, owner_headers):
    response = await client.put(
        f"/admin/users/{owner_user.id}",
        json={"role": "STAFF"},
        headers=owner_headers,
    )

    assert response.status_code == 403


async def test_can_change_own_name(client: AsyncClient, owner_user, owner_headers):
    response = await client.put(
        f"/admin/users/{owner_user.id}",
        json={"fullName": "Olivia O'Brien"},
        headers=owner_headers,
    )

    assert response.status_code == 200
    assert response.json()["fullName"] == "Olivia O'Brien"


async def test_password_change_is_masked(client: AsyncClient, test_db, staff_user, owner_headers):
    response = await client.put(
        f"/admin/users/{staff_user.id}",
        json={"password": "a-new-password"},
        headers=owner_headers,
    )

    assert response.status_code == 200
    entry = (await test_db.execute(select(AuditLog).where(AuditLog.resource == "users"))).scalar_one()
    assert entry.changes == {"password": "[changed]"}


async def test_cannot_delete_self(client: AsyncClient, owner_user, owner_headers):
    response = await client.delete(f"/admin/users/{owner_user.id}", headers=owner_headers)

    assert response.status_code == 400


async def test_delete_user(client: AsyncClient, staff_user, owner_headers):
    response = await client.delete(f"/admin/users/{staff_user.id}", headers=owner_headers)

    assert response.status_code == 200
    listing = await client.get("/admin/users", headers=owner_headers)
    assert str(staff_user.id) not in {user["id"] for user in listing.json()}


async def test_user_in_other_tenant_not_found(client: AsyncClient, test_db, other_tenant, owner_headers):
    outsider = User(
        tenant_id=other_tenant.id,
        email="outsider@otherrestaurant.com",
        hashed_password="x",
        role=UserRole.STAFF,
    )
    test_db.add(outsider)
    await test_db.commit()

    response = await client.delete(f"/admin/users/{outsider.id}", headers=owner_headers)

    assert response.status_code == 404

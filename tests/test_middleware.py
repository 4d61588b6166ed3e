"""Tests for platform host routing"""

from httpx import AsyncClient

from app.middleware import normalize_host


def test_normalize_host():
    assert normalize_host("WWW.Example.COM:8443") == "www.example.com"
    assert normalize_host("  pedalsbbq.com ") == "pedalsbbq.com"
    assert normalize_host("[::1]:8000") == "[::1]"
    assert normalize_host("") == ""


async def test_admin_path_on_custom_domain_redirects(client: AsyncClient):
    response = await client.get(
        "/resto-admin/menu?tab=items",
        headers={"Host": "pedalsbbq.com"},
        follow_redirects=False,
    )

    assert response.status_code == 307
    assert response.headers["location"] == "https://www.byte-by-bite.com/resto-admin/menu?tab=items"


async def test_platform_root_goes_to_login(client: AsyncClient):
    response = await client.get("/", headers={"Host": "www.byte-by-bite.com"}, follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/login"


async def test_admin_path_on_platform_host_passes_through(client: AsyncClient):
    response = await client.get("/resto-admin", headers={"Host": "WWW.BYTE-BY-BITE.COM:443"}, follow_redirects=False)

    assert response.status_code == 404


async def test_lookalike_path_is_not_admin(client: AsyncClient):
    response = await client.get("/resto-administrator", headers={"Host": "pedalsbbq.com"}, follow_redirects=False)

    assert response.status_code == 404


async def test_api_routes_unaffected(client: AsyncClient):
    response = await client.get("/health", headers={"Host": "pedalsbbq.com"})

    assert response.status_code == 200

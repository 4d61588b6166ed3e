"""Test configuration and fixtures"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from app.main import app
from app.database import Base, get_db
from app.models.tenant import Tenant, Domain, DomainStatus
from app.models.user import User, UserRole
from app.models.menu import MenuCategory, MenuItem
from app.api.auth import create_access_token, get_password_hash


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# bcrypt is slow; every fixture user shares one hash
TEST_PASSWORD = "testpass123"
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """One in-memory database shared by the test and the app"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory):
    """Session used by tests to seed and inspect data"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_tenant(test_db):
    """Create a test tenant with one active domain"""
    tenant = Tenant(
        id=uuid4(),
        name="Test Restaurant",
        slug="test-restaurant",
        timezone="America/Denver",
        home_team_id="7",
    )
    test_db.add(tenant)
    await test_db.flush()

    test_db.add(Domain(
        tenant_id=tenant.id,
        hostname="testrestaurant.com",
        status=DomainStatus.ACTIVE,
        is_primary=True,
    ))
    await test_db.commit()

    return tenant


@pytest.fixture
async def other_tenant(test_db):
    tenant = Tenant(
        id=uuid4(),
        name="Other Restaurant",
        slug="other-restaurant",
        timezone="America/Los_Angeles",
    )
    test_db.add(tenant)
    await test_db.commit()
    return tenant


async def _make_user(db, email, role, tenant_id=None, full_name=None):
    user = User(
        id=uuid4(),
        tenant_id=tenant_id,
        email=email,
        hashed_password=TEST_PASSWORD_HASH,
        full_name=full_name,
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def owner_user(test_db, test_tenant):
    return await _make_user(test_db, "owner@testrestaurant.com", UserRole.OWNER, test_tenant.id, "Olivia Owner")


@pytest.fixture
async def manager_user(test_db, test_tenant):
    return await _make_user(test_db, "manager@testrestaurant.com", UserRole.MANAGER, test_tenant.id, "Manny Manager")


@pytest.fixture
async def staff_user(test_db, test_tenant):
    return await _make_user(test_db, "staff@testrestaurant.com", UserRole.STAFF, test_tenant.id, "Stacy Staff")


@pytest.fixture
async def superadmin_user(test_db):
    return await _make_user(test_db, "admin@byte-by-bite.com", UserRole.SUPERADMIN, None, "Platform Admin")


@pytest.fixture
async def test_categories(test_db, test_tenant):
    categories = [
        MenuCategory(tenant_id=test_tenant.id, name="Starters", sort_order=0),
        MenuCategory(tenant_id=test_tenant.id, name="Mains", sort_order=1),
    ]
    for category in categories:
        test_db.add(category)
    await test_db.commit()
    return categories


@pytest.fixture
async def test_menu_items(test_db, test_tenant, test_categories):
    """Create test menu items"""
    items = [
        MenuItem(
            tenant_id=test_tenant.id,
            name="Smoked Wings",
            description="Dry rubbed",
            price_cents=1299,
            category="Starters",
            sort_order=0,
        ),
        MenuItem(
            tenant_id=test_tenant.id,
            name="Brisket Nachos",
            description="Chopped brisket and queso",
            price_cents=1399,
            category="Starters",
            sort_order=1,
        ),
        MenuItem(
            tenant_id=test_tenant.id,
            name="Burnt Ends",
            description="Half pound",
            price_cents=1899,
            category="Mains",
            sort_order=0,
        ),
    ]

    for item in items:
        test_db.add(item)

    await test_db.commit()
    return items


@pytest.fixture
async def client(session_factory):
    """Create test client with a fresh database session per request"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def owner_headers(owner_user):
    return auth_headers(owner_user)


@pytest.fixture
def manager_headers(manager_user):
    return auth_headers(manager_user)


@pytest.fixture
def staff_headers(staff_user):
    return auth_headers(staff_user)


@pytest.fixture
def superadmin_headers(superadmin_user):
    return auth_headers(superadmin_user)

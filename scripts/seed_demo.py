#!/usr/bin/env python3
"""
Seed script to create a demo restaurant site with menu, specials and events
"""

import asyncio
import uuid
from datetime import date, datetime, timedelta

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from app.database import SessionLocal, engine, Base
    from app.models.tenant import Tenant, Domain, DomainStatus, BusinessHours
    from app.models.menu import MenuCategory, MenuItem
    from app.models.special import Special
    from app.models.event import EventType, Event
    from app.models.user import User, UserRole
    from app.api.tenants import DEFAULT_HOURS

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo tenant already exists
        from sqlalchemy import select
        result = await db.execute(
            select(Tenant).where(Tenant.slug == "pedals-bbq")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo site...")

        tenant = Tenant(
            id=uuid.uuid4(),
            name="Pedals BBQ & Taproom",
            slug="pedals-bbq",
            description="Smoked meats, local beer and every game on the big screen",
            address="1450 Larimer St, Denver, CO 80202",
            phone="(303) 555-0142",
            email="hello@pedalsbbq.com",
            timezone="America/Denver",
            theme_id="classic-green",
            home_team_id="7",  # Denver Broncos
        )
        db.add(tenant)
        await db.flush()

        print(f"Created site: {tenant.name} (ID: {tenant.id})")

        db.add(Domain(tenant_id=tenant.id, hostname="pedalsbbq.com", status=DomainStatus.ACTIVE, is_primary=True))
        db.add(Domain(tenant_id=tenant.id, hostname="www.pedalsbbq.com", status=DomainStatus.ACTIVE))

        for day, (open_time, close_time) in DEFAULT_HOURS.items():
            db.add(BusinessHours(tenant_id=tenant.id, day_of_week=day, open_time=open_time, close_time=close_time))

        # Create super admin user
        db.add(User(
            id=uuid.uuid4(),
            email="admin@byte-by-bite.com",
            hashed_password=pwd_context.hash("admin123"),
            full_name="Platform Admin",
            role=UserRole.SUPERADMIN,
        ))

        # Create site owner and a staff account
        db.add(User(
            id=uuid.uuid4(),
            tenant_id=tenant.id,
            email="owner@pedalsbbq.com",
            hashed_password=pwd_context.hash("owner123"),
            full_name="Dana Pedal",
            role=UserRole.OWNER,
        ))
        db.add(User(
            id=uuid.uuid4(),
            tenant_id=tenant.id,
            email="staff@pedalsbbq.com",
            hashed_password=pwd_context.hash("staff123"),
            full_name="Sam Server",
            role=UserRole.STAFF,
        ))

        print("Creating menu...")

        categories = ["Starters", "Smoked Meats", "Sides", "Drinks"]
        for position, name in enumerate(categories):
            db.add(MenuCategory(tenant_id=tenant.id, name=name, sort_order=position))

        menu_items = [
            {"name": "Smoked Wings", "description": "Dry rubbed, hickory smoked", "price_cents": 1299, "category": "Starters"},
            {"name": "Brisket Nachos", "description": "Chopped brisket, queso, pickled jalapenos", "price_cents": 1399, "category": "Starters"},
            {"name": "Burnt Ends", "description": "Half pound of caramelized point", "price_cents": 1899, "category": "Smoked Meats"},
            {"name": "Pulled Pork Plate", "description": "With two sides and cornbread", "price_cents": 1699, "category": "Smoked Meats"},
            {"name": "St. Louis Ribs", "description": "Half rack, house sauce", "price_cents": 2199, "category": "Smoked Meats"},
            {"name": "Mac & Cheese", "description": "Three cheese, breadcrumb top", "price_cents": 599, "category": "Sides"},
            {"name": "Collard Greens", "description": "Braised with smoked turkey", "price_cents": 499, "category": "Sides"},
            {"name": "Local Draft", "description": "Ask about today's taps", "price_cents": 700, "category": "Drinks"},
        ]

        for position, item_data in enumerate(menu_items):
            db.add(MenuItem(tenant_id=tenant.id, sort_order=position, **item_data))

        today = date.today()
        db.add(Special(
            tenant_id=tenant.id,
            name="Taco Tuesday Brisket Tacos",
            description="Three brisket tacos with salsa verde",
            price_cents=999,
            original_price_cents=1399,
            start_date=today,
            end_date=today + timedelta(days=30),
        ))

        trivia = EventType(tenant_id=tenant.id, name="Trivia", color="#7c3aed", icon="brain")
        db.add(trivia)
        await db.flush()

        next_week = datetime.combine(today + timedelta(days=7), datetime.min.time())
        db.add(Event(
            tenant_id=tenant.id,
            event_type_id=trivia.id,
            name="Thursday Trivia Night",
            description="Teams of up to six, prizes for the top three",
            start_date=next_week,
            end_date=next_week,
            start_time="19:00",
            end_time="21:00",
            location=tenant.name,
            price="Free",
        ))

        await db.commit()

        print(f"""
Demo data created successfully!

Site: Pedals BBQ & Taproom
  ID: {tenant.id}
  Public: /public/menu?site=pedals-bbq

Users:
  Super Admin:
    Email: admin@byte-by-bite.com
    Password: admin123

  Owner:
    Email: owner@pedalsbbq.com
    Password: owner123

  Staff:
    Email: staff@pedalsbbq.com
    Password: staff123

Menu: {len(menu_items)} items in {len(categories)} categories
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())

"""Public read endpoints for tenant websites (no authentication)"""

from collections import defaultdict
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import NotFound
from app.middleware import normalize_host
from app.models.event import Event
from app.models.menu import MenuCategory, MenuItem
from app.models.special import Special, SpecialDay
from app.models.tenant import Domain, DomainStatus, Tenant
from app.schemas.base import format_price
from app.schemas.event import EventResponse
from app.schemas.menu import PublicMenuCategory, PublicMenuItem
from app.schemas.special import SpecialDayResponse, SpecialResponse

router = APIRouter()


async def resolve_tenant(
    request: Request,
    site: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
) -> Tenant:
    """Tenant from ?site=<slug>, else from the Host header of an active domain"""
    if site:
        query = select(Tenant).where(Tenant.slug == site.lower())
    else:
        hostname = normalize_host(request.headers.get("host", ""))
        query = (
            select(Tenant)
            .join(Domain, Domain.tenant_id == Tenant.id)
            .where(Domain.hostname == hostname, Domain.status == DomainStatus.ACTIVE)
        )

    result = await db.execute(query.where(Tenant.is_active == True))
    tenant = result.scalars().first()
    if not tenant:
        raise NotFound("Site not found")
    return tenant


@router.get("/menu", response_model=List[PublicMenuCategory])
async def public_menu(
    tenant: Tenant = Depends(resolve_tenant),
    db: AsyncSession = Depends(get_db),
):
    """Categories in display order with their available items"""
    categories = (
        await db.execute(
            select(MenuCategory)
            .where(MenuCategory.tenant_id == tenant.id)
            .order_by(MenuCategory.sort_order, MenuCategory.name)
        )
    ).scalars().all()

    items = (
        await db.execute(
            select(MenuItem)
            .where(MenuItem.tenant_id == tenant.id, MenuItem.is_available == True)
            .order_by(MenuItem.sort_order, MenuItem.name)
        )
    ).scalars().all()

    by_category = defaultdict(list)
    for item in items:
        by_category[item.category].append(
            PublicMenuItem(
                id=item.id,
                name=item.name,
                description=item.description,
                price=format_price(item.price_cents),
                image_url=item.image_url,
            )
        )

    return [
        PublicMenuCategory(
            name=category.name,
            description=category.description,
            items=by_category.get(category.name, []),
        )
        for category in categories
    ]


@router.get("/specials", response_model=List[SpecialResponse])
async def public_specials(
    limit: int = Query(default=20, ge=1, le=100),
    tenant: Tenant = Depends(resolve_tenant),
    db: AsyncSession = Depends(get_db),
):
    """Active specials that have not ended"""
    result = await db.execute(
        select(Special)
        .where(
            Special.tenant_id == tenant.id,
            Special.is_active == True,
            Special.end_date >= date.today(),
        )
        .order_by(Special.start_date)
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/events", response_model=List[EventResponse])
async def public_events(
    limit: int = Query(default=20, ge=1, le=100),
    tenant: Tenant = Depends(resolve_tenant),
    db: AsyncSession = Depends(get_db),
):
    """Active upcoming events"""
    today_start = datetime.combine(date.today(), datetime.min.time())
    result = await db.execute(
        select(Event)
        .where(
            Event.tenant_id == tenant.id,
            Event.is_active == True,
            Event.end_date >= today_start,
        )
        .order_by(Event.start_date)
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/special-days", response_model=List[SpecialDayResponse])
async def public_special_days(
    tenant: Tenant = Depends(resolve_tenant),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(SpecialDay)
        .where(SpecialDay.tenant_id == tenant.id, SpecialDay.date >= date.today())
        .order_by(SpecialDay.date)
    )
    return result.scalars().all()

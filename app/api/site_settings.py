"""Site profile, theme and business hours API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import NotFound, ValidationFailed
from app.models.tenant import BusinessHours, Tenant
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.tenant import (
    BusinessHoursEntry,
    BusinessHoursUpdate,
    SiteSettingsResponse,
    SiteSettingsUpdate,
    ThemeResponse,
    ThemeUpdate,
)
from app.services.audit_log import AuditAction, diff_fields, record_audit_event
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()

THEMES = (
    "classic-green",
    "midnight",
    "sunset",
    "harbor-blue",
    "rustic",
    "minimal-light",
)


async def _get_tenant(db: AsyncSession, tenant_id: UUID) -> Tenant:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise NotFound("Site not found")
    return tenant


async def _get_hours(db: AsyncSession, tenant_id: UUID) -> List[BusinessHours]:
    result = await db.execute(
        select(BusinessHours).where(BusinessHours.tenant_id == tenant_id).order_by(BusinessHours.day_of_week)
    )
    return result.scalars().all()


@router.get("/site-settings", response_model=SiteSettingsResponse)
async def get_site_settings(
    current_user: User = Depends(require_permission(Resource.SETTINGS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    return await _get_tenant(db, tenant_id)


@router.put("/site-settings", response_model=SiteSettingsResponse)
async def update_site_settings(
    settings_data: SiteSettingsUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.SETTINGS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    tenant = await _get_tenant(db, tenant_id)

    updates = settings_data.model_dump(exclude_unset=True, exclude_none=True)
    changes, previous = diff_fields(tenant, updates)
    for field, value in changes.items():
        setattr(tenant, field, value)

    await db.commit()

    response = SiteSettingsResponse.model_validate(tenant)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "site_settings",
            tenant_id,
            changes=changes,
            previous_values=previous,
            tenant_id=tenant_id,
            request=request,
        )
    return response


@router.get("/theme")
async def get_theme(
    current_user: User = Depends(require_permission(Resource.SETTINGS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    tenant = await _get_tenant(db, tenant_id)
    return {"themeId": tenant.theme_id, "available": list(THEMES)}


@router.put("/theme", response_model=ThemeResponse)
async def update_theme(
    theme_data: ThemeUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.SETTINGS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    if theme_data.theme_id not in THEMES:
        raise ValidationFailed("Validation failed", [f"themeId: must be one of {', '.join(THEMES)}"])

    tenant = await _get_tenant(db, tenant_id)
    previous = tenant.theme_id
    tenant.theme_id = theme_data.theme_id
    await db.commit()

    if previous != theme_data.theme_id:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "theme",
            tenant_id,
            changes={"theme_id": theme_data.theme_id},
            previous_values={"theme_id": previous},
            tenant_id=tenant_id,
            request=request,
        )
    return ThemeResponse(theme_id=theme_data.theme_id)


@router.get("/business-hours", response_model=List[BusinessHoursEntry])
async def get_business_hours(
    current_user: User = Depends(require_permission(Resource.HOURS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    return await _get_hours(db, tenant_id)


@router.put("/business-hours", response_model=List[BusinessHoursEntry])
async def update_business_hours(
    hours_data: BusinessHoursUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.HOURS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Upsert the submitted weekdays; days not submitted are left alone"""
    existing = {row.day_of_week: row for row in await _get_hours(db, tenant_id)}

    changes = {}
    previous = {}
    for entry in hours_data.hours:
        values = entry.model_dump(exclude={"day_of_week"})
        if entry.is_closed:
            values.update(open_time=None, close_time=None)

        row = existing.get(entry.day_of_week)
        if row is None:
            db.add(BusinessHours(tenant_id=tenant_id, day_of_week=entry.day_of_week, **values))
            changes[str(entry.day_of_week)] = values
            continue

        day_changes, day_previous = diff_fields(row, values)
        for field, value in day_changes.items():
            setattr(row, field, value)
        if day_changes:
            changes[str(entry.day_of_week)] = day_changes
            previous[str(entry.day_of_week)] = day_previous

    await db.commit()

    response = [BusinessHoursEntry.model_validate(row) for row in await _get_hours(db, tenant_id)]
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "business_hours",
            tenant_id,
            changes=changes,
            previous_values=previous or None,
            tenant_id=tenant_id,
            request=request,
        )
    return response

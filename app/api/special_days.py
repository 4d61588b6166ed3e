"""Special days (holiday closures, altered hours) API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import Conflict, NotFound
from app.models.special import SpecialDay
from app.models.tenant import Tenant
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.special import SpecialDayCreate, SpecialDayResponse
from app.services.audit_log import AuditAction, record_audit_event
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()


@router.get("", response_model=List[SpecialDayResponse])
async def list_special_days(
    current_user: User = Depends(require_permission(Resource.HOURS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(SpecialDay).where(SpecialDay.tenant_id == tenant_id).order_by(SpecialDay.date)
    )
    return result.scalars().all()


@router.post("", response_model=SpecialDayResponse, status_code=201)
async def create_special_day(
    day_data: SpecialDayCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.HOURS, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Create a closure or altered-hours entry for one future date"""
    existing = await db.execute(
        select(SpecialDay.id).where(SpecialDay.tenant_id == tenant_id, SpecialDay.date == day_data.date)
    )
    if existing.first() is not None:
        raise Conflict("A special day already exists for this date")

    tenant_name = await db.scalar(select(Tenant.name).where(Tenant.id == tenant_id))

    special_day = SpecialDay(tenant_id=tenant_id, **day_data.model_dump())
    db.add(special_day)
    await db.commit()

    response = SpecialDayResponse.model_validate(special_day)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "special_day",
        response.id,
        changes=day_data.model_dump(),
        metadata={"tenant_name": tenant_name},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.delete("/{day_id}")
async def delete_special_day(
    day_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.HOURS, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(SpecialDay).where(SpecialDay.id == day_id, SpecialDay.tenant_id == tenant_id)
    )
    special_day = result.scalar_one_or_none()
    if not special_day:
        raise NotFound("Special day not found")

    snapshot = SpecialDayResponse.model_validate(special_day).model_dump(
        include={"date", "reason", "closed", "open_time", "close_time"}
    )
    await db.delete(special_day)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "special_day",
        day_id,
        previous_values=snapshot,
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}

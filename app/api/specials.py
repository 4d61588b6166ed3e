"""Specials management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import NotFound, ValidationFailed
from app.models.special import Special
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.special import SpecialCreate, SpecialResponse, SpecialUpdate
from app.services.audit_log import AuditAction, diff_fields, record_audit_event
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()

_FIELD_MAP = {"price": "price_cents", "original_price": "original_price_cents"}


async def _get_special(db: AsyncSession, tenant_id: UUID, special_id: UUID) -> Special:
    result = await db.execute(
        select(Special).where(Special.id == special_id, Special.tenant_id == tenant_id)
    )
    special = result.scalar_one_or_none()
    if not special:
        raise NotFound("Special not found")
    return special


@router.get("", response_model=List[SpecialResponse])
async def list_specials(
    is_active: Optional[bool] = None,
    current_user: User = Depends(require_permission(Resource.SPECIALS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """List specials, newest first"""
    query = select(Special).where(Special.tenant_id == tenant_id)
    if is_active is not None:
        query = query.where(Special.is_active == is_active)
    result = await db.execute(query.order_by(Special.created_at.desc()))
    return result.scalars().all()


@router.post("", response_model=SpecialResponse, status_code=201)
async def create_special(
    special_data: SpecialCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.SPECIALS, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Create a new special"""
    special = Special(
        tenant_id=tenant_id,
        name=special_data.name,
        description=special_data.description or "",
        price_cents=special_data.price,
        original_price_cents=special_data.original_price,
        start_date=special_data.start_date,
        end_date=special_data.end_date,
        is_active=special_data.is_active,
        image_url=special_data.image_url,
    )
    db.add(special)
    await db.commit()

    response = SpecialResponse.model_validate(special)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "specials",
        response.id,
        changes={
            "name": special_data.name,
            "start_date": special_data.start_date,
            "end_date": special_data.end_date,
            "price_cents": special_data.price,
        },
        metadata={
            "description": special_data.description,
            "original_price_cents": special_data.original_price,
            "is_active": special_data.is_active,
            "image_url": special_data.image_url,
        },
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.get("/{special_id}", response_model=SpecialResponse)
async def get_special(
    special_id: UUID,
    current_user: User = Depends(require_permission(Resource.SPECIALS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    return await _get_special(db, tenant_id, special_id)


@router.put("/{special_id}", response_model=SpecialResponse)
async def update_special(
    special_id: UUID,
    special_data: SpecialUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.SPECIALS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Update a special"""
    special = await _get_special(db, tenant_id, special_id)

    updates = {
        _FIELD_MAP.get(field, field): value
        for field, value in special_data.model_dump(exclude_unset=True).items()
        if value is not None or field in _FIELD_MAP or field == "image_url"
    }

    start = updates.get("start_date", special.start_date)
    end = updates.get("end_date", special.end_date)
    if end < start:
        raise ValidationFailed("Validation failed", ["endDate: End date cannot be before start date"])

    changes, previous = diff_fields(special, updates)
    for field, value in changes.items():
        setattr(special, field, value)

    await db.commit()

    response = SpecialResponse.model_validate(special)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "specials",
            special_id,
            changes=changes,
            previous_values=previous,
            metadata={"name": response.name},
            tenant_id=tenant_id,
            request=request,
        )
    return response


@router.delete("/{special_id}")
async def delete_special(
    special_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.SPECIALS, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Delete a special"""
    special = await _get_special(db, tenant_id, special_id)
    snapshot = SpecialResponse.model_validate(special).model_dump(
        include={"name", "description", "price_cents", "start_date", "end_date", "is_active"}
    )

    await db.delete(special)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "specials",
        special_id,
        previous_values=snapshot,
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}

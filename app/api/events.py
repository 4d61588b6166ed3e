"""Events and event types API endpoints"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import NotFound, ValidationFailed
from app.models.event import Event, EventType
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.event import (
    EventCreate,
    EventResponse,
    EventTypeCreate,
    EventTypeResponse,
    EventTypeUpdate,
    EventUpdate,
)
from app.services.audit_log import AuditAction, diff_fields, record_audit_event
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()
types_router = APIRouter()

_NULLABLE_EVENT_FIELDS = {"start_time", "end_time", "location", "price", "image_url", "event_type_id"}


async def _get_event(db: AsyncSession, tenant_id: UUID, event_id: UUID) -> Event:
    result = await db.execute(
        select(Event).where(Event.id == event_id, Event.tenant_id == tenant_id)
    )
    event = result.scalar_one_or_none()
    if not event:
        raise NotFound("Event not found")
    return event


async def _get_event_type(db: AsyncSession, tenant_id: UUID, type_id: UUID) -> EventType:
    result = await db.execute(
        select(EventType).where(EventType.id == type_id, EventType.tenant_id == tenant_id)
    )
    event_type = result.scalar_one_or_none()
    if not event_type:
        raise NotFound("Event type not found")
    return event_type


@router.get("", response_model=List[EventResponse])
async def list_events(
    upcoming: bool = False,
    event_type_id: Optional[UUID] = None,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """List events in start order"""
    query = select(Event).where(Event.tenant_id == tenant_id)
    if upcoming:
        query = query.where(Event.end_date >= datetime.combine(datetime.utcnow().date(), datetime.min.time()))
    if event_type_id:
        query = query.where(Event.event_type_id == event_type_id)
    result = await db.execute(query.order_by(Event.start_date))
    return result.scalars().all()


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Create a new event"""
    if event_data.event_type_id:
        await _get_event_type(db, tenant_id, event_data.event_type_id)

    values = event_data.model_dump()
    event = Event(tenant_id=tenant_id, **values)
    db.add(event)
    await db.commit()

    response = EventResponse.model_validate(event)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "events",
        response.id,
        changes={k: v for k, v in values.items() if v is not None},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: UUID,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    return await _get_event(db, tenant_id, event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    event_data: EventUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Update an event"""
    event = await _get_event(db, tenant_id, event_id)

    updates = {
        field: value
        for field, value in event_data.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_EVENT_FIELDS
    }
    if updates.get("event_type_id"):
        await _get_event_type(db, tenant_id, updates["event_type_id"])

    start = updates.get("start_date", event.start_date)
    end = updates.get("end_date", event.end_date)
    if end < start:
        raise ValidationFailed("Validation failed", ["endDate: End date cannot be before start date"])

    changes, previous = diff_fields(event, updates)
    for field, value in changes.items():
        setattr(event, field, value)

    await db.commit()

    response = EventResponse.model_validate(event)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "events",
            event_id,
            changes=changes,
            previous_values=previous,
            metadata={"name": response.name},
            tenant_id=tenant_id,
            request=request,
        )
    return response


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event"""
    event = await _get_event(db, tenant_id, event_id)
    snapshot = EventResponse.model_validate(event).model_dump(
        include={"name", "start_date", "end_date", "location", "external_id"}
    )

    await db.delete(event)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "events",
        event_id,
        previous_values=snapshot,
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}


# Event types

@types_router.get("", response_model=List[EventTypeResponse])
async def list_event_types(
    include_inactive: bool = False,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    query = select(EventType).where(EventType.tenant_id == tenant_id)
    if not include_inactive:
        query = query.where(EventType.is_active == True)
    result = await db.execute(query.order_by(EventType.name))
    return result.scalars().all()


@types_router.post("", response_model=EventTypeResponse, status_code=201)
async def create_event_type(
    type_data: EventTypeCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    values = type_data.model_dump()
    event_type = EventType(tenant_id=tenant_id, is_active=True, **values)
    db.add(event_type)
    await db.commit()

    response = EventTypeResponse.model_validate(event_type)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "event_types",
        response.id,
        changes={k: v for k, v in values.items() if v is not None},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@types_router.put("/{type_id}", response_model=EventTypeResponse)
async def update_event_type(
    type_id: UUID,
    type_data: EventTypeUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    event_type = await _get_event_type(db, tenant_id, type_id)

    updates = type_data.model_dump(exclude_unset=True, exclude_none=True)
    changes, previous = diff_fields(event_type, updates)
    for field, value in changes.items():
        setattr(event_type, field, value)

    await db.commit()

    response = EventTypeResponse.model_validate(event_type)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "event_types",
            type_id,
            changes=changes,
            previous_values=previous,
            tenant_id=tenant_id,
            request=request,
        )
    return response


@types_router.delete("/{type_id}")
async def delete_event_type(
    type_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate an event type; its events keep their reference"""
    event_type = await _get_event_type(db, tenant_id, type_id)
    name = event_type.name

    event_type.is_active = False
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "event_types",
        type_id,
        changes={"is_active": False},
        previous_values={"name": name, "is_active": True},
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}

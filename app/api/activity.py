"""Activity feed (audit log read side)"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.audit import ActivityListResponse, ActivityStatsResponse, AuditEntryResponse
from app.services.audit_log import audit_stats, list_audit_entries
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()


@router.get("", response_model=ActivityListResponse)
async def list_activity(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    category: Optional[str] = None,
    current_user: User = Depends(require_permission(Resource.AUDIT, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Successful admin changes, newest first"""
    entries, total = await list_audit_entries(db, tenant_id, category, limit, offset)
    return ActivityListResponse(
        logs=[AuditEntryResponse.model_validate(entry) for entry in entries],
        total=total,
        has_more=offset + len(entries) < total,
    )


@router.get("/stats", response_model=ActivityStatsResponse)
async def activity_stats(
    current_user: User = Depends(require_permission(Resource.AUDIT, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    return ActivityStatsResponse(**await audit_stats(db, tenant_id))

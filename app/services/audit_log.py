"""
Audit recorder.

Every admin mutation writes one entry here after its own commit. Writes are
best effort: a failure is logged and reported as ``False`` but never raised,
so an audit problem cannot undo or block the change it describes.
"""

import enum
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.errors import ValidationFailed
from app.models.audit import AuditLog
from app.models.user import User

logger = structlog.get_logger()


class AuditAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REORDER = "reorder"


# Activity feed filters -> audit resource names
ACTIVITY_CATEGORIES = {
    "company": ("site_settings", "business_hours", "theme"),
    "menu": ("menu", "menu_category"),
    "specials": ("specials",),
    "events": ("events", "event_types", "events_sync"),
    "special_days": ("special_day",),
    "users": ("users",),
}


def _encode(value: Any) -> Any:
    if value is None:
        return None
    return jsonable_encoder(value)


async def record_audit_event(
    db: AsyncSession,
    actor: Optional[User],
    action: AuditAction,
    resource: str,
    resource_id: Any,
    changes: Optional[Dict[str, Any]] = None,
    previous_values: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None,
    tenant_id: Optional[UUID] = None,
    request: Optional[Request] = None,
) -> bool:
    """Persist one audit entry. Returns False instead of raising on failure."""
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    try:
        entry = AuditLog(
            tenant_id=tenant_id if tenant_id is not None else getattr(actor, "tenant_id", None),
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else "SYSTEM",
            user_email=actor.email if actor else None,
            user_name=actor.display_name if actor else "system",
            action=action_value,
            resource=resource,
            resource_id=str(resource_id) if resource_id is not None else None,
            changes=_encode(changes),
            previous_values=_encode(previous_values),
            metadata_=_encode(metadata),
            success=True,
        )
        if request is not None:
            entry.ip_address = request.client.host if request.client else None
            entry.user_agent = request.headers.get("user-agent")

        db.add(entry)
        await db.commit()
        return True
    except Exception as e:
        await db.rollback()
        logger.error(
            "audit_write_failed",
            action=action_value,
            resource=resource,
            resource_id=str(resource_id),
            error=str(e),
            exc_info=True,
        )
        return False


def diff_fields(obj: Any, updates: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Split an update into (new values, previous values) for fields that change"""
    changes = {}
    previous = {}
    for field, value in updates.items():
        current = getattr(obj, field, None)
        if current != value:
            changes[field] = value
            previous[field] = current
    return changes, previous


def resources_for_category(category: Optional[str]) -> Optional[Iterable[str]]:
    """Resolve a feed filter; None means no filtering"""
    if not category or category == "all":
        return None
    if category not in ACTIVITY_CATEGORIES:
        valid = ", ".join(["all", *ACTIVITY_CATEGORIES])
        raise ValidationFailed("Invalid category", [f"category: must be one of {valid}"])
    return ACTIVITY_CATEGORIES[category]


async def list_audit_entries(
    db: AsyncSession,
    tenant_id: Optional[UUID],
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[AuditLog], int]:
    """Successful entries, newest first, with the unpaginated total"""
    resources = resources_for_category(category)

    filters = [AuditLog.success == True]
    if tenant_id is not None:
        filters.append(AuditLog.tenant_id == tenant_id)
    if resources is not None:
        filters.append(AuditLog.resource.in_(resources))

    total = await db.scalar(select(func.count()).select_from(AuditLog).where(*filters))

    result = await db.execute(
        select(AuditLog)
        .where(*filters)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return result.scalars().all(), total or 0


async def audit_stats(db: AsyncSession, tenant_id: Optional[UUID]) -> Dict[str, Any]:
    """Entry counts by action and resource plus the success rate"""
    filters = []
    if tenant_id is not None:
        filters.append(AuditLog.tenant_id == tenant_id)

    by_action = await db.execute(
        select(AuditLog.action, func.count()).where(*filters).group_by(AuditLog.action)
    )
    by_resource = await db.execute(
        select(AuditLog.resource, func.count()).where(*filters).group_by(AuditLog.resource)
    )
    totals = await db.execute(
        select(func.count(), func.count().filter(AuditLog.success == True)).where(*filters)
    )
    total, successful = totals.one()

    return {
        "total_entries": total,
        "by_action": {action: count for action, count in by_action.all()},
        "by_resource": {resource: count for resource, count in by_resource.all()},
        "success_rate": round(successful / total * 100, 2) if total else 100.0,
    }

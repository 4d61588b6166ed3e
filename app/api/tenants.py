"""Tenant and domain management API endpoints"""

from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import Conflict, Forbidden, NotFound
from app.models.tenant import BusinessHours, Domain, DomainStatus, Tenant
from app.models.user import User, UserRole
from app.permissions import Action, Resource
from app.schemas.tenant import (
    DomainCreate,
    DomainResponse,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
)
from app.services.audit_log import AuditAction, diff_fields, record_audit_event
from app.api.auth import require_permission

router = APIRouter()

# day_of_week (0 = Sunday) -> (open, close)
DEFAULT_HOURS = {
    0: ("12:00", "21:00"),
    1: ("11:00", "22:00"),
    2: ("11:00", "22:00"),
    3: ("11:00", "22:00"),
    4: ("11:00", "22:00"),
    5: ("11:00", "23:00"),
    6: ("11:00", "23:00"),
}


def verify_tenant_access(tenant_id: UUID, current_user: User) -> None:
    """Verify user has access to the specified tenant"""
    if current_user.role == UserRole.SUPERADMIN:
        return
    if current_user.tenant_id != tenant_id:
        raise Forbidden("Access denied to this tenant")


async def _get_tenant(db: AsyncSession, tenant_id: UUID) -> Tenant:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise NotFound("Tenant not found")
    return tenant


@router.get("", response_model=List[TenantResponse])
async def list_tenants(
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(require_permission(Resource.DOMAINS, Action.READ)),
    db: AsyncSession = Depends(get_db),
):
    """List all tenants (SuperAdmin only)"""
    result = await db.execute(
        select(Tenant)
        .where(Tenant.is_active == True)
        .order_by(Tenant.name)
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    tenant_data: TenantCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.DOMAINS, Action.CREATE)),
    db: AsyncSession = Depends(get_db),
):
    """Create a new tenant with default business hours (SuperAdmin only)"""
    taken = await db.scalar(select(func.count(Tenant.id)).where(Tenant.slug == tenant_data.slug))
    if taken:
        raise Conflict("A site with this slug already exists")

    tenant = Tenant(**tenant_data.model_dump())
    db.add(tenant)
    await db.flush()

    for day, (open_time, close_time) in DEFAULT_HOURS.items():
        db.add(BusinessHours(tenant_id=tenant.id, day_of_week=day, open_time=open_time, close_time=close_time))

    await db.commit()

    response = TenantResponse.model_validate(tenant)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "site_settings",
        response.id,
        changes=tenant_data.model_dump(),
        tenant_id=response.id,
        request=request,
    )
    return response


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: UUID,
    current_user: User = Depends(require_permission(Resource.SITE, Action.READ)),
    db: AsyncSession = Depends(get_db),
):
    """Get tenant details"""
    verify_tenant_access(tenant_id, current_user)
    return await _get_tenant(db, tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    tenant_data: TenantUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.SITE, Action.UPDATE)),
    db: AsyncSession = Depends(get_db),
):
    """Update tenant"""
    verify_tenant_access(tenant_id, current_user)
    tenant = await _get_tenant(db, tenant_id)

    updates = tenant_data.model_dump(exclude_unset=True, exclude_none=True)
    if "is_active" in updates and current_user.role != UserRole.SUPERADMIN:
        raise Forbidden("Only a superadmin can change site status")

    changes, previous = diff_fields(tenant, updates)
    for field, value in changes.items():
        setattr(tenant, field, value)

    await db.commit()

    response = TenantResponse.model_validate(tenant)
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


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.DOMAINS, Action.DELETE)),
    db: AsyncSession = Depends(get_db),
):
    """Delete tenant (soft delete - SuperAdmin only)"""
    tenant = await _get_tenant(db, tenant_id)
    tenant.is_active = False
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "site_settings",
        tenant_id,
        changes={"is_active": False},
        tenant_id=tenant_id,
        request=request,
    )


@router.get("/{tenant_id}/domains", response_model=List[DomainResponse])
async def list_domains(
    tenant_id: UUID,
    current_user: User = Depends(require_permission(Resource.SITE, Action.READ)),
    db: AsyncSession = Depends(get_db),
):
    verify_tenant_access(tenant_id, current_user)
    result = await db.execute(
        select(Domain).where(Domain.tenant_id == tenant_id).order_by(Domain.is_primary.desc(), Domain.hostname)
    )
    return result.scalars().all()


@router.post("/{tenant_id}/domains", response_model=DomainResponse, status_code=status.HTTP_201_CREATED)
async def add_domain(
    tenant_id: UUID,
    domain_data: DomainCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.DOMAINS, Action.CREATE)),
    db: AsyncSession = Depends(get_db),
):
    """Attach a hostname to a tenant. It stays PENDING until verified."""
    await _get_tenant(db, tenant_id)

    taken = await db.scalar(select(func.count(Domain.id)).where(Domain.hostname == domain_data.hostname))
    if taken:
        raise Conflict("This domain is already in use")

    if domain_data.is_primary:
        result = await db.execute(select(Domain).where(Domain.tenant_id == tenant_id, Domain.is_primary == True))
        for other in result.scalars().all():
            other.is_primary = False

    domain = Domain(tenant_id=tenant_id, **domain_data.model_dump())
    db.add(domain)
    await db.commit()

    response = DomainResponse.model_validate(domain)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "site_settings",
        response.id,
        changes={"hostname": response.hostname, "is_primary": response.is_primary},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.post("/{tenant_id}/domains/{domain_id}/verify", response_model=DomainResponse)
async def verify_domain(
    tenant_id: UUID,
    domain_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.DOMAINS, Action.UPDATE)),
    db: AsyncSession = Depends(get_db),
):
    """Mark a domain as verified by hand so it serves the public site and gets health checks"""
    result = await db.execute(select(Domain).where(Domain.id == domain_id, Domain.tenant_id == tenant_id))
    domain = result.scalar_one_or_none()
    if not domain:
        raise NotFound("Domain not found")

    previous_status = domain.status
    domain.status = DomainStatus.ACTIVE
    domain.verified_at = datetime.utcnow()
    await db.commit()

    response = DomainResponse.model_validate(domain)
    await record_audit_event(
        db,
        current_user,
        AuditAction.UPDATE,
        "site_settings",
        domain_id,
        changes={"hostname": response.hostname, "status": DomainStatus.ACTIVE, "method": "manual"},
        previous_values={"status": previous_status},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.delete("/{tenant_id}/domains/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_domain(
    tenant_id: UUID,
    domain_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.DOMAINS, Action.DELETE)),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Domain).where(Domain.id == domain_id, Domain.tenant_id == tenant_id))
    domain = result.scalar_one_or_none()
    if not domain:
        raise NotFound("Domain not found")

    hostname = domain.hostname
    await db.delete(domain)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "site_settings",
        domain_id,
        previous_values={"hostname": hostname},
        tenant_id=tenant_id,
        request=request,
    )

"""Dashboard user management API endpoints"""

from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import Conflict, Forbidden, NotFound, ValidationFailed
from app.models.user import User, UserRole
from app.permissions import Action, Resource, can_manage_role, get_assignable_roles
from app.schemas.auth import UserCreate, UserResponse, UserUpdate
from app.services.audit_log import AuditAction, diff_fields, record_audit_event
from app.api.auth import get_password_hash, get_tenant_scope, require_permission

router = APIRouter()


async def _get_user(db: AsyncSession, tenant_id: UUID, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id, User.tenant_id == tenant_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user


def _snapshot(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(
        include={"email", "full_name", "role", "is_active", "disabled_reason"}
    )


@router.get("", response_model=List[UserResponse])
async def list_users(
    current_user: User = Depends(require_permission(Resource.USERS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(User).where(User.tenant_id == tenant_id).order_by(User.created_at.desc())
    )
    return result.scalars().all()


@router.get("/assignable-roles", response_model=List[UserRole])
async def assignable_roles(
    current_user: User = Depends(require_permission(Resource.USERS, Action.READ)),
):
    """Roles the caller may grant"""
    return get_assignable_roles(current_user.role)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.USERS, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Create a user in the caller's tenant with a strictly lower role"""
    if not can_manage_role(current_user.role, user_data.role):
        raise Forbidden(f"You cannot assign the {user_data.role.value} role")

    email = user_data.email.lower()
    taken = await db.scalar(select(func.count(User.id)).where(func.lower(User.email) == email))
    if taken:
        raise Conflict("A user with this email already exists")

    user = User(
        tenant_id=tenant_id,
        email=email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        role=user_data.role,
        is_active=True,
    )
    db.add(user)
    await db.commit()

    response = UserResponse.model_validate(user)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "users",
        response.id,
        changes={"email": email, "full_name": user_data.full_name, "role": user_data.role.value},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    user_data: UserUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.USERS, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """
    Update profile, role or active state.

    Users may edit their own name and password but not their own role or
    status; anyone else must hold a strictly lower role.
    """
    user = await _get_user(db, tenant_id, user_id)
    actor_id = current_user.id
    is_self = user.id == actor_id

    updates = user_data.model_dump(exclude_unset=True, exclude_none=True)
    password = updates.pop("password", None)
    disabled_reason = updates.pop("disabled_reason", None)

    if is_self and ("role" in updates or "is_active" in updates):
        raise Forbidden("You cannot change your own role or status")
    if not is_self and not can_manage_role(current_user.role, user.role):
        raise Forbidden("You cannot manage a user with this role")
    if "role" in updates and not can_manage_role(current_user.role, updates["role"]):
        raise Forbidden(f"You cannot assign the {updates['role'].value} role")

    if "is_active" in updates and updates["is_active"] != user.is_active:
        if updates["is_active"]:
            updates.update(disabled_at=None, disabled_by=None, disabled_reason=None)
        else:
            updates.update(
                disabled_at=datetime.utcnow(),
                disabled_by=actor_id,
                disabled_reason=disabled_reason or "Disabled by admin",
                refresh_token=None,
            )

    previous_snapshot = _snapshot(user)
    changes, _ = diff_fields(user, updates)
    for field, value in changes.items():
        setattr(user, field, value)

    if password:
        user.hashed_password = get_password_hash(password)
        user.refresh_token = None
        changes["password"] = "[changed]"

    changes.pop("refresh_token", None)

    await db.commit()

    response = UserResponse.model_validate(user)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "users",
            user_id,
            changes=changes,
            previous_values=previous_snapshot,
            tenant_id=tenant_id,
            request=request,
        )
    return response


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.USERS, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    if user_id == current_user.id:
        raise ValidationFailed("Cannot delete your own account")

    user = await _get_user(db, tenant_id, user_id)
    if not can_manage_role(current_user.role, user.role):
        raise Forbidden("You cannot manage a user with this role")

    snapshot = _snapshot(user)
    await db.delete(user)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "users",
        user_id,
        previous_values=snapshot,
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}

"""Menu management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import Conflict, NotFound
from app.models.menu import MenuCategory, MenuItem
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.menu import (
    CategoryReorderRequest,
    ItemReorderRequest,
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
)
from app.services.audit_log import AuditAction, diff_fields, record_audit_event
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()


async def _get_item(db: AsyncSession, tenant_id: UUID, item_id: UUID) -> MenuItem:
    result = await db.execute(
        select(MenuItem).where(MenuItem.id == item_id, MenuItem.tenant_id == tenant_id)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise NotFound("Menu item not found")
    return item


async def _get_category(db: AsyncSession, tenant_id: UUID, category_id: UUID) -> MenuCategory:
    result = await db.execute(
        select(MenuCategory).where(MenuCategory.id == category_id, MenuCategory.tenant_id == tenant_id)
    )
    category = result.scalar_one_or_none()
    if not category:
        raise NotFound("Category not found")
    return category


async def _category_name_taken(db: AsyncSession, tenant_id: UUID, name: str, exclude_id: UUID = None) -> bool:
    query = select(MenuCategory.id).where(
        MenuCategory.tenant_id == tenant_id,
        func.lower(MenuCategory.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.where(MenuCategory.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


# Menu items

@router.get("/items", response_model=List[MenuItemResponse])
async def list_menu_items(
    category: Optional[str] = None,
    current_user: User = Depends(require_permission(Resource.MENU, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """List menu items for a tenant"""
    query = select(MenuItem).where(MenuItem.tenant_id == tenant_id)

    if category:
        query = query.where(MenuItem.category == category)

    query = query.order_by(MenuItem.category, MenuItem.sort_order, MenuItem.name)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/items", response_model=MenuItemResponse, status_code=201)
async def create_menu_item(
    item_data: MenuItemCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Create a new menu item"""
    values = item_data.model_dump(exclude={"price", "sort_order"})

    sort_order = item_data.sort_order
    if sort_order is None:
        # Append to the end of its category
        current_max = await db.scalar(
            select(func.max(MenuItem.sort_order)).where(
                MenuItem.tenant_id == tenant_id,
                MenuItem.category == item_data.category,
            )
        )
        sort_order = current_max + 1 if current_max is not None else 0

    item = MenuItem(tenant_id=tenant_id, price_cents=item_data.price, sort_order=sort_order, **values)
    db.add(item)
    await db.commit()

    response = MenuItemResponse.model_validate(item)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "menu",
        response.id,
        changes={**values, "price_cents": item_data.price},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.put("/items/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: UUID,
    item_data: MenuItemUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Update a menu item"""
    item = await _get_item(db, tenant_id, item_id)

    updates = item_data.model_dump(exclude_unset=True, exclude_none=True)
    if "price" in updates:
        updates["price_cents"] = updates.pop("price")

    changes, previous = diff_fields(item, updates)
    for field, value in changes.items():
        setattr(item, field, value)

    await db.commit()

    response = MenuItemResponse.model_validate(item)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "menu",
            item_id,
            changes=changes,
            previous_values=previous,
            metadata={"name": response.name},
            tenant_id=tenant_id,
            request=request,
        )
    return response


@router.delete("/items/{item_id}")
async def delete_menu_item(
    item_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Delete a menu item"""
    item = await _get_item(db, tenant_id, item_id)
    snapshot = MenuItemResponse.model_validate(item).model_dump(
        include={"name", "description", "price_cents", "category", "is_available", "sort_order"}
    )

    await db.delete(item)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "menu",
        item_id,
        previous_values=snapshot,
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}


@router.post("/items/reorder")
async def reorder_menu_items(
    reorder: ItemReorderRequest,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Persist a new item order within a category, then log the move once"""
    ids = [position.id for position in reorder.reordered_items]
    result = await db.execute(
        select(MenuItem).where(MenuItem.tenant_id == tenant_id, MenuItem.id.in_(ids))
    )
    items = {item.id: item for item in result.scalars().all()}

    missing = [str(item_id) for item_id in ids if item_id not in items]
    if missing:
        raise NotFound("Menu item not found", missing)

    for position in reorder.reordered_items:
        items[position.id].sort_order = position.sort_order

    total_in_category = await db.scalar(
        select(func.count(MenuItem.id)).where(
            MenuItem.tenant_id == tenant_id,
            MenuItem.category == reorder.category,
        )
    )
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.REORDER,
        "menu",
        reorder.moved_item_id,
        changes={
            "item_name": reorder.moved_item_name,
            "category": reorder.category,
            "old_position": reorder.old_position,
            "new_position": reorder.new_position,
            "total_items_in_category": total_in_category,
        },
        metadata={
            "reordered_items": [p.model_dump() for p in reorder.reordered_items],
        },
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}


# Menu categories

@router.get("/categories", response_model=List[MenuCategoryResponse])
async def list_menu_categories(
    current_user: User = Depends(require_permission(Resource.MENU, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(MenuCategory)
        .where(MenuCategory.tenant_id == tenant_id)
        .order_by(MenuCategory.sort_order, MenuCategory.name)
    )
    return result.scalars().all()


@router.post("/categories", response_model=MenuCategoryResponse, status_code=201)
async def create_menu_category(
    category_data: MenuCategoryCreate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    if await _category_name_taken(db, tenant_id, category_data.name):
        raise Conflict("A category with this name already exists")

    sort_order = category_data.sort_order
    if sort_order is None:
        current_max = await db.scalar(
            select(func.max(MenuCategory.sort_order)).where(MenuCategory.tenant_id == tenant_id)
        )
        sort_order = current_max + 1 if current_max is not None else 0

    category = MenuCategory(
        tenant_id=tenant_id,
        name=category_data.name,
        description=category_data.description or "",
        sort_order=sort_order,
    )
    db.add(category)
    await db.commit()

    response = MenuCategoryResponse.model_validate(category)
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "menu_category",
        response.id,
        changes={"name": response.name, "description": response.description, "sort_order": sort_order},
        tenant_id=tenant_id,
        request=request,
    )
    return response


@router.put("/categories/{category_id}", response_model=MenuCategoryResponse)
async def update_menu_category(
    category_id: UUID,
    category_data: MenuCategoryUpdate,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Update a category. Renaming also moves its items to the new name."""
    category = await _get_category(db, tenant_id, category_id)
    old_name = category.name

    updates = category_data.model_dump(exclude_unset=True, exclude_none=True)
    changes, previous = diff_fields(category, updates)

    if "name" in changes and await _category_name_taken(db, tenant_id, changes["name"], exclude_id=category_id):
        raise Conflict("A category with this name already exists")

    for field, value in changes.items():
        setattr(category, field, value)

    moved_items = 0
    if "name" in changes:
        result = await db.execute(
            update(MenuItem)
            .where(MenuItem.tenant_id == tenant_id, MenuItem.category == old_name)
            .values(category=changes["name"])
        )
        moved_items = result.rowcount

    await db.commit()

    response = MenuCategoryResponse.model_validate(category)
    if changes:
        await record_audit_event(
            db,
            current_user,
            AuditAction.UPDATE,
            "menu_category",
            category_id,
            changes=changes,
            previous_values=previous,
            metadata={"items_renamed": moved_items} if moved_items else None,
            tenant_id=tenant_id,
            request=request,
        )
    return response


@router.delete("/categories/{category_id}")
async def delete_menu_category(
    category_id: UUID,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.DELETE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """Delete a category that no menu item references"""
    category = await _get_category(db, tenant_id, category_id)

    items_count = await db.scalar(
        select(func.count(MenuItem.id)).where(
            MenuItem.tenant_id == tenant_id,
            MenuItem.category == category.name,
        )
    )
    if items_count:
        raise Conflict(
            "Cannot delete category with existing menu items. Please move or delete the items first."
        )

    snapshot = {
        "name": category.name,
        "description": category.description,
        "sort_order": category.sort_order,
    }
    await db.delete(category)
    await db.commit()

    await record_audit_event(
        db,
        current_user,
        AuditAction.DELETE,
        "menu_category",
        category_id,
        previous_values=snapshot,
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}


@router.post("/categories/reorder")
async def reorder_menu_categories(
    reorder: CategoryReorderRequest,
    request: Request,
    current_user: User = Depends(require_permission(Resource.MENU, Action.UPDATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a category move.

    The client has already saved each category's sort order through the
    update endpoint; this only writes the consolidated audit entry.
    """
    await record_audit_event(
        db,
        current_user,
        AuditAction.REORDER,
        "menu_category",
        reorder.moved_category_id,
        changes={
            "category_name": reorder.moved_category_name,
            "old_position": reorder.old_position,
            "new_position": reorder.new_position,
            "total_categories": len(reorder.reordered_categories),
        },
        previous_values={"position": reorder.old_position},
        metadata={
            "moved_category": reorder.moved_category_name,
            "from_position": reorder.old_position,
            "to_position": reorder.new_position,
            "all_categories": [p.model_dump() for p in reorder.reordered_categories],
        },
        tenant_id=tenant_id,
        request=request,
    )
    return {"success": True}

"""Menu schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import Field, field_validator

from app.schemas.base import CamelModel, parse_price_cents


class MenuItemCreate(CamelModel):
    """Create menu item request. Price is in dollars and stored as cents."""
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ""
    price: int
    category: str = Field(min_length=1, max_length=100)
    image_url: Optional[str] = None
    is_available: bool = True
    sort_order: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, value):
        cents = parse_price_cents(value)
        if cents is None:
            raise ValueError("Price is required")
        return cents


class MenuItemUpdate(CamelModel):
    """Update menu item request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[int] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, value):
        return parse_price_cents(value)


class MenuItemResponse(CamelModel):
    """Menu item response"""
    id: UUID
    tenant_id: UUID
    name: str
    description: Optional[str]
    price_cents: int
    category: str
    image_url: Optional[str]
    is_available: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class MenuCategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = ""
    sort_order: Optional[int] = None


class MenuCategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    sort_order: Optional[int] = None


class MenuCategoryResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: Optional[str]
    sort_order: int
    created_at: datetime
    updated_at: datetime


class SortPosition(CamelModel):
    id: UUID
    sort_order: int


class CategoryReorderRequest(CamelModel):
    """Summary of a drag-and-drop move; the new order is not persisted here"""
    moved_category_id: UUID
    moved_category_name: str
    old_position: int
    new_position: int
    reordered_categories: List[SortPosition] = []


class ItemReorderRequest(CamelModel):
    """New sort order for the items of one category"""
    moved_item_id: UUID
    moved_item_name: str
    category: str
    old_position: int
    new_position: int
    reordered_items: List[SortPosition] = Field(min_length=1)


class PublicMenuItem(CamelModel):
    id: UUID
    name: str
    description: Optional[str]
    price: str
    image_url: Optional[str]


class PublicMenuCategory(CamelModel):
    name: str
    description: Optional[str]
    items: List[PublicMenuItem]

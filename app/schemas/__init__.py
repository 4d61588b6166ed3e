"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    RefreshRequest,
    UserCreate,
    UserUpdate,
    UserResponse,
)
from app.schemas.tenant import (
    TenantCreate,
    TenantUpdate,
    TenantResponse,
    DomainCreate,
    DomainResponse,
    SiteSettingsUpdate,
    SiteSettingsResponse,
    ThemeUpdate,
    ThemeResponse,
    BusinessHoursEntry,
    BusinessHoursUpdate,
)
from app.schemas.menu import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    MenuCategoryCreate,
    MenuCategoryUpdate,
    MenuCategoryResponse,
    CategoryReorderRequest,
    ItemReorderRequest,
)
from app.schemas.special import (
    SpecialCreate,
    SpecialUpdate,
    SpecialResponse,
    SpecialDayCreate,
    SpecialDayResponse,
)
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventTypeCreate,
    EventTypeUpdate,
    EventTypeResponse,
)
from app.schemas.audit import (
    AuditEntryResponse,
    ActivityListResponse,
    ActivityStatsResponse,
)
from app.schemas.schedule import (
    ScheduledGame,
    ScheduleSyncResponse,
)
from app.schemas.health import (
    PingRequest,
    PingResult,
    DashboardStats,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "TenantCreate",
    "TenantUpdate",
    "TenantResponse",
    "DomainCreate",
    "DomainResponse",
    "SiteSettingsUpdate",
    "SiteSettingsResponse",
    "ThemeUpdate",
    "ThemeResponse",
    "BusinessHoursEntry",
    "BusinessHoursUpdate",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemResponse",
    "MenuCategoryCreate",
    "MenuCategoryUpdate",
    "MenuCategoryResponse",
    "CategoryReorderRequest",
    "ItemReorderRequest",
    "SpecialCreate",
    "SpecialUpdate",
    "SpecialResponse",
    "SpecialDayCreate",
    "SpecialDayResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventTypeCreate",
    "EventTypeUpdate",
    "EventTypeResponse",
    "AuditEntryResponse",
    "ActivityListResponse",
    "ActivityStatsResponse",
    "ScheduledGame",
    "ScheduleSyncResponse",
    "PingRequest",
    "PingResult",
    "DashboardStats",
]

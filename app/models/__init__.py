"""Database models"""

from app.models.tenant import Tenant, Domain, DomainStatus, BusinessHours
from app.models.user import User, UserRole
from app.models.menu import MenuCategory, MenuItem
from app.models.special import Special, SpecialDay
from app.models.event import Event, EventType
from app.models.audit import AuditLog
from app.models.health import HealthPing

__all__ = [
    "Tenant",
    "Domain",
    "DomainStatus",
    "BusinessHours",
    "User",
    "UserRole",
    "MenuCategory",
    "MenuItem",
    "Special",
    "SpecialDay",
    "Event",
    "EventType",
    "AuditLog",
    "HealthPing",
]

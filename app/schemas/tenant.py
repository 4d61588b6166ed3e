"""Tenant, domain and site settings schemas"""

import re
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from zoneinfo import available_timezones
from pydantic import Field, field_validator

from app.schemas.base import CamelModel, validate_time

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
HOSTNAME_PATTERN = re.compile(r"^(?=.{1,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$")


def _check_timezone(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in available_timezones():
        raise ValueError(f"Unknown timezone: {value}")
    return value


class TenantCreate(CamelModel):
    """Create tenant request"""
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=100)
    timezone: str = "America/Denver"
    theme_id: str = "classic-green"
    home_team_id: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, value: str):
        value = value.strip().lower()
        if not SLUG_PATTERN.match(value):
            raise ValueError("Slug may only contain lowercase letters, digits and hyphens")
        return value

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value):
        return _check_timezone(value)


class TenantUpdate(CamelModel):
    """Update tenant request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    timezone: Optional[str] = None
    home_team_id: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value):
        return _check_timezone(value)


class TenantResponse(CamelModel):
    """Tenant response"""
    id: UUID
    name: str
    slug: str
    timezone: str
    theme_id: str
    home_team_id: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class DomainCreate(CamelModel):
    hostname: str
    is_primary: bool = False

    @field_validator("hostname")
    @classmethod
    def normalize_hostname(cls, value: str):
        value = value.strip().lower().rstrip(".")
        if not HOSTNAME_PATTERN.match(value):
            raise ValueError("Invalid hostname")
        return value


class DomainResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    hostname: str
    status: str
    is_primary: bool
    verified_at: Optional[datetime] = None
    created_at: datetime


class SiteSettingsUpdate(CamelModel):
    """Restaurant profile shown on the public site"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    timezone: Optional[str] = None
    home_team_id: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value):
        return _check_timezone(value)


class SiteSettingsResponse(CamelModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str]
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    timezone: str
    home_team_id: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    updated_at: datetime


class ThemeUpdate(CamelModel):
    theme_id: str = Field(min_length=1, max_length=100)


class ThemeResponse(CamelModel):
    theme_id: str


class BusinessHoursEntry(CamelModel):
    day_of_week: int = Field(ge=0, le=6)
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    is_closed: bool = False

    @field_validator("open_time", "close_time")
    @classmethod
    def check_time(cls, value):
        return validate_time(value)


class BusinessHoursUpdate(CamelModel):
    hours: List[BusinessHoursEntry] = Field(min_length=1, max_length=7)

    @field_validator("hours")
    @classmethod
    def unique_days(cls, value: List[BusinessHoursEntry]):
        days = [entry.day_of_week for entry in value]
        if len(days) != len(set(days)):
            raise ValueError("Each day of the week may appear only once")
        return value

"""Event and event type schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import Field, field_validator, model_validator

from app.schemas.base import CamelModel, validate_time


class EventCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ""
    start_date: datetime
    end_date: datetime
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None
    event_type_id: Optional[UUID] = None
    is_active: bool = True

    @field_validator("start_date", "end_date")
    @classmethod
    def local_time(cls, value):
        # stored as tenant-local wall time
        if value is not None and value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, value):
        return validate_time(value)

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class EventUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None
    event_type_id: Optional[UUID] = None
    is_active: Optional[bool] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def local_time(cls, value):
        # stored as tenant-local wall time
        if value is not None and value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, value):
        return validate_time(value)


class EventResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    event_type_id: Optional[UUID]
    name: str
    description: Optional[str]
    start_date: datetime
    end_date: datetime
    start_time: Optional[str]
    end_time: Optional[str]
    location: Optional[str]
    price: Optional[str]
    image_url: Optional[str]
    is_active: bool
    external_id: Optional[str]
    created_at: datetime
    updated_at: datetime


class EventTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class EventTypeUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None


class EventTypeResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: Optional[str]
    color: Optional[str]
    icon: Optional[str]
    is_active: bool
    created_at: datetime

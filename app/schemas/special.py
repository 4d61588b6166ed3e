"""Special and special day schemas"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import Field, field_validator, model_validator

from app.schemas.base import CamelModel, parse_price_cents, validate_time


class SpecialCreate(CamelModel):
    """Create special request. Prices are in dollars."""
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ""
    price: Optional[int] = None
    original_price: Optional[int] = None
    start_date: date
    end_date: date
    is_active: bool = True
    image_url: Optional[str] = None

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def parse_prices(cls, value, info):
        label = "Original price" if info.field_name == "original_price" else "Price"
        return parse_price_cents(value, label)

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class SpecialUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[int] = None
    original_price: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None
    image_url: Optional[str] = None

    @field_validator("price", "original_price", mode="before")
    @classmethod
    def parse_prices(cls, value, info):
        label = "Original price" if info.field_name == "original_price" else "Price"
        return parse_price_cents(value, label)


class SpecialResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: Optional[str]
    price_cents: Optional[int]
    original_price_cents: Optional[int]
    start_date: date
    end_date: date
    is_active: bool
    image_url: Optional[str]
    created_at: datetime
    updated_at: datetime


class SpecialDayCreate(CamelModel):
    """Closure or altered hours for one date"""
    date: date
    reason: str = Field(min_length=3, max_length=200)
    closed: bool = True
    open_time: Optional[str] = None
    close_time: Optional[str] = None

    @field_validator("date")
    @classmethod
    def not_in_past(cls, value: date):
        if value < date.today():
            raise ValueError("Date cannot be in the past")
        return value

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, value: str):
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Reason must be at least 3 characters")
        return value

    @field_validator("open_time", "close_time")
    @classmethod
    def check_time(cls, value, info):
        # closed days discard their times below
        if info.data.get("closed", True):
            return value
        return validate_time(value)

    @model_validator(mode="after")
    def drop_times_when_closed(self):
        if self.closed:
            self.open_time = None
            self.close_time = None
        return self


class SpecialDayResponse(CamelModel):
    id: UUID
    tenant_id: UUID
    date: date
    reason: str
    closed: bool
    open_time: Optional[str]
    close_time: Optional[str]
    created_at: datetime

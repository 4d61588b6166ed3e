"""Shared schema base and field parsers"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys, serializes as camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def parse_price_cents(value, field: str = "Price") -> Optional[int]:
    """Turn "$12.99", "1,200" or 12.5 into cents"""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a valid number")
    if isinstance(value, (int, float)):
        raw = str(value)
    else:
        raw = str(value).strip().replace("$", "").replace(",", "")
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{field} must be a valid number")
    if not amount.is_finite():
        raise ValueError(f"{field} must be a valid number")
    if amount < 0:
        raise ValueError(f"{field} cannot be negative")
    return int((amount * 100).quantize(Decimal("1")))


def validate_time(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def format_price(cents: Optional[int]) -> Optional[str]:
    if cents is None:
        return None
    return f"${cents / 100:.2f}"

"""Uptime and dashboard stats schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import Field

from app.schemas.base import CamelModel


class PingRequest(CamelModel):
    url: str = Field(min_length=1, max_length=500)


class PingResult(CamelModel):
    tenant_id: UUID
    url: str
    status_code: int
    response_time_ms: Optional[int]
    error: Optional[str] = None
    created_at: Optional[datetime] = None


class UptimeStats(CamelModel):
    total_checks: int
    successful_checks: int
    uptime_percent: Optional[float]
    average_response_ms: Optional[float]


class DashboardStats(CamelModel):
    uptime: UptimeStats
    edits_last_7_days: int
    active_specials: int
    events_this_week: int

"""Activity feed schemas"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field

from app.schemas.base import CamelModel


class AuditEntryResponse(CamelModel):
    id: UUID
    tenant_id: Optional[UUID]
    user_id: Optional[UUID]
    user_role: Optional[str]
    user_email: Optional[str]
    user_name: Optional[str]
    action: str
    resource: str
    resource_id: Optional[str]
    changes: Optional[Any]
    previous_values: Optional[Any]
    metadata: Optional[Any] = Field(default=None, validation_alias="metadata_")
    success: bool
    created_at: datetime


class ActivityListResponse(CamelModel):
    logs: List[AuditEntryResponse]
    total: int
    has_more: bool


class ActivityStatsResponse(CamelModel):
    total_entries: int
    by_action: Dict[str, int]
    by_resource: Dict[str, int]
    success_rate: float

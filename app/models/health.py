"""Uptime ping results"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class HealthPing(Base):
    """One availability check of a tenant's public URL"""
    __tablename__ = "health_pings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False)
    url = Column(String(500), nullable=False)
    status_code = Column(Integer, nullable=False)
    response_time_ms = Column(Integer)  # null when the request never completed
    error = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

"""Audit log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Text
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class AuditLog(Base):
    """Audit trail for admin mutations. Rows are never updated or deleted."""
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"))

    # Actor snapshot at the time of the action
    user_id = Column(UUID(as_uuid=True))
    user_role = Column(String(20))
    user_email = Column(String(255))
    user_name = Column(String(255))

    # Action details
    action = Column(String(50), nullable=False)  # create, update, delete, reorder
    resource = Column(String(50), nullable=False)  # menu, specials, events_sync, ...
    resource_id = Column(String(100))  # no FK, the resource may be gone

    # Change data
    changes = Column(JSON)
    previous_values = Column(JSON)
    metadata_ = Column("metadata", JSON)

    success = Column(Boolean, default=True)
    error_message = Column(Text)

    # Request context
    ip_address = Column(String(50))
    user_agent = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

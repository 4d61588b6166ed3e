"""Event models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class EventType(Base):
    """Event category (Sports, Trivia, Live Music...). Deleted by deactivation."""
    __tablename__ = "event_types"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    color = Column(String(20))
    icon = Column(String(50))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    events = relationship("Event", back_populates="event_type")


class Event(Base):
    """Calendar event shown on the public site"""
    __tablename__ = "events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False)
    event_type_id = Column(UUID(as_uuid=True), ForeignKey("event_types.id"))
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    start_date = Column(DateTime, nullable=False)  # tenant-local
    end_date = Column(DateTime, nullable=False)
    start_time = Column(String(5))  # "HH:MM"
    end_time = Column(String(5))
    location = Column(String(255))
    price = Column(String(50))  # free text: "$5 cover", "Free"
    image_url = Column(String(500))
    is_active = Column(Boolean, default=True)
    external_id = Column(String(100))  # e.g. "espn-401671789" for synced games
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event_type = relationship("EventType", back_populates="events")

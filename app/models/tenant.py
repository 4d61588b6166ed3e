"""Tenant-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class DomainStatus:
    """Domain lifecycle states"""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


class Tenant(Base):
    """Restaurant site"""
    __tablename__ = "tenants"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False)
    description = Column(Text, default="")
    address = Column(Text, default="")
    phone = Column(String(50), default="")
    email = Column(String(255), default="")
    timezone = Column(String(50), default="America/Denver")
    theme_id = Column(String(100), default="classic-green")
    home_team_id = Column(String(20))  # ESPN team id used for schedule sync
    latitude = Column(Float)
    longitude = Column(Float)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    domains = relationship("Domain", back_populates="tenant", cascade="all, delete-orphan")
    business_hours = relationship("BusinessHours", back_populates="tenant", cascade="all, delete-orphan")
    users = relationship("User", back_populates="tenant")


class Domain(Base):
    """Hostnames serving a tenant's public site"""
    __tablename__ = "domains"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False)
    hostname = Column(String(255), unique=True, nullable=False)
    status = Column(String(20), default=DomainStatus.PENDING)
    is_primary = Column(Boolean, default=False)
    verified_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="domains")


class BusinessHours(Base):
    """Regular opening hours, one row per weekday"""
    __tablename__ = "business_hours"
    __table_args__ = (UniqueConstraint("tenant_id", "day_of_week"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey("tenants.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    open_time = Column(String(5))  # "HH:MM"
    close_time = Column(String(5))
    is_closed = Column(Boolean, default=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="business_hours")

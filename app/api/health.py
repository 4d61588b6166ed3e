"""Liveness, readiness, uptime pings and dashboard stats"""

from uuid import UUID

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.health import DashboardStats, PingRequest, PingResult
from app.services.health_check import dashboard_stats, ping_url
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()
logger = structlog.get_logger()

VERSION = "1.0.0"


async def get_http_client():
    """Outbound client for uptime checks"""
    async with httpx.AsyncClient(timeout=settings.health_check_timeout_seconds) as client:
        yield client


@router.get("")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": VERSION}


@router.get("/ready")
async def ready(db: AsyncSession = Depends(get_db)):
    """Readiness check with dependency verification"""
    checks = {}

    # Check database
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        logger.warning("Readiness database check failed", error=str(e))
        checks["database"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


@router.post("/ping", response_model=PingResult)
async def ping(
    ping_data: PingRequest,
    current_user: User = Depends(require_permission(Resource.ANALYTICS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """Check one url now and record the result"""
    return await ping_url(db, http_client, tenant_id, ping_data.url)


@router.get("/stats", response_model=DashboardStats)
async def stats(
    current_user: User = Depends(require_permission(Resource.ANALYTICS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    return DashboardStats(**await dashboard_stats(db, tenant_id))

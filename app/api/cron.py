"""Scheduler-triggered jobs, authenticated with the shared cron secret"""

import secrets
from datetime import datetime
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.database import get_db
from app.errors import AppError, Unauthorized
from app.models.tenant import Tenant
from app.services.espn import ScheduleCache
from app.services.health_check import run_health_sweep
from app.api.health import get_http_client
from app.api.schedule import get_schedule_cache

router = APIRouter()
logger = structlog.get_logger()


async def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Bearer token must equal the configured secret; open when none is set"""
    if not settings.cron_secret:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.encode(), settings.cron_secret.encode()):
        raise Unauthorized()


async def refresh_team_schedules(db: AsyncSession, cache: ScheduleCache) -> dict:
    """Refresh the cache for every home team in use"""
    result = await db.execute(
        select(Tenant.home_team_id, Tenant.timezone)
        .where(Tenant.is_active == True, Tenant.home_team_id.isnot(None))
        .distinct()
    )
    refreshed = []
    failed = []
    for team_id, timezone in result.all():
        try:
            games = await cache.refresh(team_id, timezone)
            refreshed.append({"team_id": team_id, "games": len(games)})
        except AppError as e:
            logger.error("Schedule refresh failed", team_id=team_id, error=e.message)
            failed.append({"team_id": team_id, "error": e.message})
    return {"refreshed": refreshed, "failed": failed}


@router.post("/health-check", dependencies=[Depends(verify_cron_secret)])
async def cron_health_check(
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    results = await run_health_sweep(db, http_client)
    return {
        "success": True,
        "timestamp": datetime.utcnow().isoformat(),
        "results": results,
        "totalDomains": len(results),
    }


@router.post("/schedule-refresh", dependencies=[Depends(verify_cron_secret)])
async def cron_schedule_refresh(
    db: AsyncSession = Depends(get_db),
    cache: ScheduleCache = Depends(get_schedule_cache),
):
    outcome = await refresh_team_schedules(db, cache)
    return {"success": not outcome["failed"], "timestamp": datetime.utcnow().isoformat(), **outcome}

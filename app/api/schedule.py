"""Sports schedule sync API endpoints"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.errors import NotFound, ValidationFailed
from app.models.tenant import Tenant
from app.models.user import User
from app.permissions import Action, Resource
from app.schemas.schedule import ScheduleGamesResponse, ScheduleSyncResponse
from app.services.audit_log import AuditAction, record_audit_event
from app.services.espn import EspnScheduleClient, ScheduleCache
from app.services.schedule_sync import sync_games_to_events
from app.api.auth import get_tenant_scope, require_permission

router = APIRouter()


def get_schedule_cache(request: Request) -> ScheduleCache:
    """The app-wide cache, created on first use if startup did not"""
    cache = getattr(request.app.state, "schedule_cache", None)
    if cache is None:
        cache = ScheduleCache(EspnScheduleClient(), ttl=settings.schedule_cache_ttl_seconds)
        request.app.state.schedule_cache = cache
    return cache


async def _get_tenant(db: AsyncSession, tenant_id: UUID) -> Tenant:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise NotFound("Site not found")
    return tenant


@router.get("/games", response_model=ScheduleGamesResponse)
async def list_games(
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.READ)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
    cache: ScheduleCache = Depends(get_schedule_cache),
):
    """Home team schedule from the cache, refreshed when stale"""
    tenant = await _get_tenant(db, tenant_id)
    if not tenant.home_team_id:
        raise ValidationFailed("No home team selected", ["Please select a home team in site settings first"])

    games = await cache.get_games(tenant.home_team_id, tenant.timezone)
    age = cache.age(tenant.home_team_id, tenant.timezone)
    return ScheduleGamesResponse(
        team_id=tenant.home_team_id,
        games=games,
        cache_age_seconds=int(age) if age is not None else None,
    )


@router.post("/sync", response_model=ScheduleSyncResponse)
async def sync_schedule(
    request: Request,
    current_user: User = Depends(require_permission(Resource.EVENTS, Action.CREATE)),
    tenant_id: UUID = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
    cache: ScheduleCache = Depends(get_schedule_cache),
):
    """Create calendar events for home team games not yet listed"""
    tenant = await _get_tenant(db, tenant_id)
    home_team_id = tenant.home_team_id
    if not home_team_id:
        raise ValidationFailed("No home team selected", ["Please select a home team in site settings first"])

    games = await cache.get_games(home_team_id, tenant.timezone)
    if not games:
        raise NotFound("No games found", ["No games were found for the selected team"])

    report = await sync_games_to_events(db, tenant, games)
    if report.failed:
        # per-game rollbacks expire loaded instances
        await db.refresh(current_user)

    response = ScheduleSyncResponse(
        success=True,
        message=f"Successfully synced {len(report.synced)} games to events calendar",
        synced_games=report.synced,
        skipped_games=report.skipped,
        failed_games=report.failed,
        total_games=len(games),
    )
    await record_audit_event(
        db,
        current_user,
        AuditAction.CREATE,
        "events_sync",
        tenant_id,
        changes={
            "synced_games": len(report.synced),
            "skipped_games": len(report.skipped),
            "failed_games": len(report.failed),
            "home_team": home_team_id,
        },
        metadata={
            "description": response.message,
            "games": [g.name for g in report.synced],
        },
        tenant_id=tenant_id,
        request=request,
    )
    return response

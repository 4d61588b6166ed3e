"""Merge a team's game schedule into a tenant's events calendar"""

from datetime import datetime, time, timedelta
from typing import List
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.models.event import Event, EventType
from app.models.tenant import Tenant
from app.schemas.schedule import GameSyncResult, ScheduledGame

logger = structlog.get_logger()

SPORTS_EVENT_TYPE = "Sports"


class SyncReport(BaseModel):
    synced: List[GameSyncResult] = []
    skipped: List[GameSyncResult] = []
    failed: List[GameSyncResult] = []

    @property
    def total(self) -> int:
        return len(self.synced) + len(self.skipped) + len(self.failed)


async def get_or_create_sports_type(db: AsyncSession, tenant_id: UUID) -> UUID:
    result = await db.execute(
        select(EventType).where(
            EventType.tenant_id == tenant_id,
            EventType.name == SPORTS_EVENT_TYPE,
        )
    )
    event_type = result.scalars().first()
    if event_type is None:
        event_type = EventType(
            tenant_id=tenant_id,
            name=SPORTS_EVENT_TYPE,
            description="Sports events and watch parties",
            icon="Sports",
            color="#1f2937",
            is_active=True,
        )
        db.add(event_type)
        await db.commit()
        logger.info("Created sports event type", tenant_id=str(tenant_id))
    return event_type.id


async def game_already_listed(db: AsyncSession, tenant_id: UUID, game: ScheduledGame) -> bool:
    """An event naming the opponent already starts on the game's calendar day"""
    day_start = datetime.combine(game.game_date, time.min)
    result = await db.execute(
        select(Event.id).where(
            Event.tenant_id == tenant_id,
            Event.name.ilike(f"%{game.opponent}%"),
            Event.start_date >= day_start,
            Event.start_date < day_start + timedelta(days=1),
        ).limit(1)
    )
    return result.first() is not None


def build_game_event(tenant_id: UUID, tenant_name: str, event_type_id: UUID, game: ScheduledGame) -> Event:
    kickoff = datetime.strptime(game.kickoff, "%H:%M").time() if game.kickoff else time.min
    starts = datetime.combine(game.game_date, kickoff)
    where = "at home" if game.is_home else "on the road"
    kickoff_text = f" Kickoff at {game.kickoff}." if game.kickoff else ""

    return Event(
        tenant_id=tenant_id,
        event_type_id=event_type_id,
        name=game.name or f"Game vs {game.opponent}",
        description=f"Watch the game against the {game.opponent} {where}.{kickoff_text}",
        start_date=starts,
        end_date=starts,
        start_time=game.kickoff,
        end_time="23:59",
        location=tenant_name if game.is_home else f"Watch party at {tenant_name}",
        is_active=True,
        external_id=game.id,
    )


async def sync_games_to_events(db: AsyncSession, tenant: Tenant, games: List[ScheduledGame]) -> SyncReport:
    """
    Create one event per game that is not already on the calendar.

    Each game is committed on its own; a failure is rolled back, reported,
    and the remaining games are still processed. Re-running with the same
    games creates nothing new.
    """
    tenant_id = tenant.id
    tenant_name = tenant.name
    report = SyncReport()

    event_type_id = await get_or_create_sports_type(db, tenant_id)

    for game in games:
        label = f"{game.opponent} ({game.game_date.isoformat()})"
        try:
            if await game_already_listed(db, tenant_id, game):
                report.skipped.append(
                    GameSyncResult(game_id=game.id, name=label, reason="Event already exists")
                )
                continue

            event = build_game_event(tenant_id, tenant_name, event_type_id, game)
            db.add(event)
            await db.commit()
            report.synced.append(GameSyncResult(game_id=game.id, name=label, event_id=str(event.id)))
        except Exception as e:
            await db.rollback()
            logger.error("Game sync failed", tenant_id=str(tenant_id), game_id=game.id, error=str(e))
            report.failed.append(GameSyncResult(game_id=game.id, name=label, reason=str(e)))

    logger.info(
        "Schedule sync finished",
        tenant_id=str(tenant_id),
        synced=len(report.synced),
        skipped=len(report.skipped),
        failed=len(report.failed),
    )
    return report

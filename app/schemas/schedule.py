"""Sports schedule schemas"""

from datetime import date
from typing import List, Optional

from app.schemas.base import CamelModel


class ScheduledGame(CamelModel):
    """One game parsed from the ESPN team schedule, in tenant-local time"""
    id: str
    name: str
    game_date: date
    kickoff: Optional[str] = None  # "HH:MM", None when TBD
    opponent: str
    is_home: bool
    venue: Optional[str] = None
    status: str = "scheduled"  # scheduled, live, finished
    week: Optional[int] = None


class GameSyncResult(CamelModel):
    game_id: str
    name: str
    event_id: Optional[str] = None
    reason: Optional[str] = None


class ScheduleSyncResponse(CamelModel):
    success: bool
    message: str
    synced_games: List[GameSyncResult]
    skipped_games: List[GameSyncResult]
    failed_games: List[GameSyncResult]
    total_games: int


class ScheduleGamesResponse(CamelModel):
    team_id: str
    games: List[ScheduledGame]
    cache_age_seconds: Optional[int]

"""ESPN team schedule client and its in-process cache"""

import re
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

import httpx
import structlog

from app.config import settings
from app.errors import ExternalServiceError
from app.schemas.schedule import ScheduledGame

logger = structlog.get_logger()

WEEK_PATTERN = re.compile(r"week\s+(\d+)", re.IGNORECASE)


def map_game_status(status: dict) -> str:
    status_type = status.get("type") or {}
    if status_type.get("completed"):
        return "finished"
    state = (status_type.get("state") or status_type.get("name") or "").lower()
    if state in ("in", "live", "status_in_progress", "status_halftime"):
        return "live"
    if state in ("post", "final", "status_final"):
        return "finished"
    return "scheduled"


def parse_week(event: dict) -> Optional[int]:
    week = event.get("week") or {}
    if isinstance(week.get("number"), int):
        return week["number"]
    match = WEEK_PATTERN.search(event.get("name") or "")
    return int(match.group(1)) if match else None


def parse_game(event: dict, team_id: str, tz: ZoneInfo) -> Optional[ScheduledGame]:
    """Build a ScheduledGame from one ESPN schedule event, or None if malformed"""
    competitions = event.get("competitions") or []
    if not competitions:
        return None
    competition = competitions[0]
    competitors = competition.get("competitors") or []

    teams = [(c, c.get("team")) for c in competitors if isinstance(c, dict)]
    ours = next((c for c, team in teams if isinstance(team, dict) and str(team.get("id")) == team_id), None)
    theirs = next((team for c, team in teams if c is not ours), None)
    if ours is None or not isinstance(theirs, dict):
        return None

    raw_date = competition.get("date") or event.get("date")
    if not raw_date:
        return None
    try:
        kickoff_utc = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
    except ValueError:
        return None
    local = kickoff_utc.astimezone(tz)

    # ESPN marks unannounced kickoffs with timeValid=false
    kickoff = local.strftime("%H:%M") if competition.get("timeValid", True) else None

    return ScheduledGame(
        id=f"espn-{event.get('id')}",
        name=event.get("name") or "",
        game_date=local.date(),
        kickoff=kickoff,
        opponent=theirs.get("displayName") or theirs.get("name") or "TBD",
        is_home=ours.get("homeAway") == "home",
        venue=(competition.get("venue") or {}).get("fullName"),
        status=map_game_status(competition.get("status") or {}),
        week=parse_week(event),
    )


class EspnScheduleClient:
    """Fetches a team's season schedule from the public ESPN site API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.espn_base_url).rstrip("/")
        self.http_client = http_client
        self.timeout = timeout or settings.espn_timeout_seconds

    async def _get(self, url: str) -> httpx.Response:
        if self.http_client is not None:
            return await self.http_client.get(url, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url)

    async def fetch_team_schedule(self, team_id: str, timezone: str = "America/Denver") -> List[ScheduledGame]:
        url = f"{self.base_url}/teams/{team_id}/schedule"
        logger.debug("ESPN schedule request", team_id=team_id, url=url)

        try:
            response = await self._get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("ESPN schedule request failed", team_id=team_id, error=str(e))
            raise ExternalServiceError("Failed to fetch schedule from ESPN") from e

        tz = ZoneInfo(timezone)
        games = []
        for event in data.get("events") or []:
            try:
                game = parse_game(event, str(team_id), tz)
            except (KeyError, TypeError, AttributeError):
                game = None
            if game is None:
                logger.warning("Skipping malformed ESPN event", team_id=team_id, event_id=event.get("id"))
                continue
            games.append(game)

        logger.info("ESPN schedule fetched", team_id=team_id, games=len(games))
        return games


class ScheduleCache:
    """
    Per-team schedule cache with a time-to-live.

    There is no lock: concurrent refreshes of a stale slot each fetch and the
    last one wins, which is harmless because a refresh only overwrites.
    """

    def __init__(
        self,
        client: EspnScheduleClient,
        ttl: float = 1800,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.ttl = ttl
        self.clock = clock
        self._slots: Dict[Tuple[str, str], Tuple[float, List[ScheduledGame]]] = {}

    def is_stale(self, team_id: str, timezone: str = "America/Denver") -> bool:
        slot = self._slots.get((str(team_id), timezone))
        if slot is None:
            return True
        fetched_at, _ = slot
        return self.clock() - fetched_at >= self.ttl

    def age(self, team_id: str, timezone: str = "America/Denver") -> Optional[float]:
        slot = self._slots.get((str(team_id), timezone))
        if slot is None:
            return None
        return self.clock() - slot[0]

    async def refresh(self, team_id: str, timezone: str = "America/Denver") -> List[ScheduledGame]:
        """Fetch now. On failure keep whatever is cached, or raise if nothing is."""
        key = (str(team_id), timezone)
        try:
            games = await self.client.fetch_team_schedule(str(team_id), timezone)
        except ExternalServiceError:
            slot = self._slots.get(key)
            if slot is None:
                raise
            logger.warning("Serving stale schedule after refresh failure", team_id=team_id)
            return slot[1]

        self._slots[key] = (self.clock(), games)
        return games

    async def get_games(self, team_id: str, timezone: str = "America/Denver") -> List[ScheduledGame]:
        if self.is_stale(team_id, timezone):
            return await self.refresh(team_id, timezone)
        return self._slots[(str(team_id), timezone)][1]

    def clear(self) -> None:
        self._slots.clear()

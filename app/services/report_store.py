"""Report store.

Holds the currently loaded FF Logs report and fetches the combat events of a
single fight for analysis.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

from .combat_events import CombatEvent
from .errors import ReportError, ReportNotFoundError, UnknownApiError
from .fflogs_client import FFLogsClient
from .fflogs_events import normalize_fflogs_events


logger = logging.getLogger(__name__)

REPORT_NOT_FOUND_MESSAGE = "This report does not exist or is private."


@dataclass
class Fight:
    """A single pull within a report."""
    id: int
    start_time: int
    end_time: int
    name: str = ""
    boss: int = 0
    kill: Optional[bool] = None

    @property
    def duration_ms(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ReportActor:
    """A friendly actor appearing in a report."""
    id: int
    name: str
    type: str  # job name, e.g. 'BlackMage'
    fight_ids: List[int] = field(default_factory=list)


@dataclass
class UnloadedReport:
    loading: bool = True


@dataclass
class Report:
    """A loaded report's fights and friendly actors."""
    code: str
    title: str
    fights: List[Fight]
    friendlies: List[ReportActor]
    loading: bool = False

    @classmethod
    def from_response(cls, code: str, data: Dict[str, Any]) -> "Report":
        fights = [
            Fight(
                id=f["id"],
                start_time=f["start_time"],
                end_time=f["end_time"],
                name=f.get("name", ""),
                boss=f.get("boss", 0),
                kill=f.get("kill"),
            )
            for f in data.get("fights", [])
        ]
        friendlies = [
            ReportActor(
                id=a["id"],
                name=a.get("name", ""),
                type=a.get("type", ""),
                fight_ids=[f["id"] for f in a.get("fights", [])],
            )
            for a in data.get("friendlies", [])
        ]
        return cls(code=code, title=data.get("title", ""), fights=fights, friendlies=friendlies)

    def get_fight(self, fight_id: int) -> Optional[Fight]:
        return next((f for f in self.fights if f.id == fight_id), None)

    def get_actor(self, actor_id: int) -> Optional[ReportActor]:
        return next((a for a in self.friendlies if a.id == actor_id), None)


PossiblyLoadedReport = Union[UnloadedReport, Report]


def _error_for(code: str, exc: httpx.HTTPError) -> ReportError:
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        message = body.get("error") if isinstance(body, dict) else None
        if message == REPORT_NOT_FOUND_MESSAGE:
            return ReportNotFoundError(code)
    return UnknownApiError(str(exc))


class ReportStore:
    """Loads one report at a time and remembers the last failure."""

    def __init__(self, client: Optional[FFLogsClient] = None):
        self.client = client or FFLogsClient()
        self.report: Optional[PossiblyLoadedReport] = None
        self.error: Optional[ReportError] = None

    def clear_report(self) -> None:
        self.report = None

    async def _fetch_report(self, code: str, bypass_cache: bool = False) -> Optional[Report]:
        self.report = UnloadedReport()
        self.error = None

        try:
            data = await self.client.get_report_fights(code, bypass_cache=bypass_cache)
        except httpx.HTTPError as e:
            # Clear report status, then record the error for the caller
            self.report = None
            self.error = _error_for(code, e)
            logger.error(f"Failed to fetch report {code}: {e}")
            return None

        self.report = Report.from_response(code, data)
        return self.report

    async def fetch_report_if_needed(self, code: str) -> Optional[Report]:
        """Fetch `code` unless it is already loading or loaded."""
        if self.report is not None:
            if self.report.loading:
                return None
            if self.report.code == code:
                return self.report
        return await self._fetch_report(code)

    async def refresh_report(self) -> Optional[Report]:
        """Re-fetch the loaded report, bypassing the API's cache."""
        if self.report is None or self.report.loading:
            return None
        return await self._fetch_report(self.report.code, bypass_cache=True)

    async def fetch_fight_events(self, fight: Fight, actor_id: int) -> List[CombatEvent]:
        """Cast events by `actor_id` and buff events on them, relative to fight start.

        Raises:
            ReportError: if the report is not loaded or the API request fails.
        """
        if not isinstance(self.report, Report):
            raise UnknownApiError("No report loaded")
        code = self.report.code

        try:
            casts = await self.client.get_events(
                code, "casts", fight.start_time, fight.end_time, source_id=actor_id
            )
            buffs = await self.client.get_events(
                code, "buffs", fight.start_time, fight.end_time, target_id=actor_id
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch events for fight {fight.id} of report {code}: {e}")
            raise _error_for(code, e) from e

        return normalize_fflogs_events(buffs + casts, fight_start=fight.start_time)

"""Caster tax analyser.

Wires the cast correlator, caster tax estimator and spell speed search together
for one player in one encounter, and publishes the result once the event stream
completes.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config import Settings, get_settings
from .cast_correlator import CastCorrelator, CastRecord
from .caster_tax import CasterTaxEstimator, SpsEvaluation
from .combat_events import ActorStatusTracker, CombatEvent, EventType
from .errors import InsufficientDataError
from .game_data import GameData
from .spell_speed_search import SpellSpeedSearch, TimingInfo, minimum_spell_speed
from .statistics import SimpleStatistic, Statistics, format_duration


logger = logging.getLogger(__name__)

CASTER_TAX_TITLE = "Estimated Caster Tax"
SPELL_SPEED_TITLE = "Estimated Spell Speed"


@dataclass(frozen=True)
class TimingReport:
    """Everything the analyser learned, for callers that want more than TimingInfo."""
    timing: Optional[TimingInfo]
    evaluation: Optional[SpsEvaluation]
    record_count: int
    used_record_count: int
    spell_speed_floor: Optional[int]
    insufficient_data_reason: Optional[str] = None


class CasterTaxAnalyser:
    """Estimates spell speed and caster tax from one player's casts."""

    handle = "casterTax"
    title = "Caster Tax"

    def __init__(
        self,
        actor_id: int,
        game_data: GameData,
        status_tracker: ActorStatusTracker,
        statistics: Statistics,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.actor_id = actor_id
        self.game_data = game_data
        self.statistics = statistics
        self.base_gcd_ms = settings.base_gcd_ms

        self.correlator = CastCorrelator(
            game_data,
            status_tracker,
            buff_status_id=game_data.get_status("CIRCLE_OF_POWER").status_id,
        )
        self.estimator = CasterTaxEstimator(
            game_data,
            base_gcd_ms=settings.base_gcd_ms,
            variance_window_ms=settings.max_queue_variance_ms,
        )
        self.search = SpellSpeedSearch(
            self.estimator,
            speed_min=settings.spell_speed_min,
            speed_max=settings.spell_speed_max,
            speed_step=settings.spell_speed_step,
            strategy=settings.sps_search_strategy,
        )

        self.report: Optional[TimingReport] = None

    def on_event(self, event: CombatEvent) -> None:
        if event.type == EventType.COMPLETE:
            self.on_complete()
        elif event.source_id == self.actor_id:
            self.correlator.handle(event)

    @property
    def records(self) -> List[CastRecord]:
        return self.correlator.records

    def spell_speed_floor(self) -> Optional[int]:
        """Highest per-cast lower bound on spell speed, if any casts are usable."""
        floors = [
            minimum_spell_speed(
                record, action, self.base_gcd_ms,
                lo=self.search.grid.start, hi=self.search.grid.stop,
            )
            for record, action in self.estimator.usable_records(self.records)
        ]
        return max(floors) if floors else None

    def on_complete(self) -> None:
        if self.report is not None:
            return

        records = self.records
        used = len(self.estimator.usable_records(records))
        floor = self.spell_speed_floor()

        try:
            evaluation = self.search.search(records)
        except InsufficientDataError as e:
            logger.warning(f"Caster tax not estimated for actor {self.actor_id}: {e}")
            self.report = TimingReport(
                timing=None,
                evaluation=None,
                record_count=len(records),
                used_record_count=used,
                spell_speed_floor=floor,
                insufficient_data_reason=str(e),
            )
            return

        timing = self.search.timing_for(evaluation)
        self.report = TimingReport(
            timing=timing,
            evaluation=evaluation,
            record_count=len(records),
            used_record_count=used,
            spell_speed_floor=floor,
        )
        logger.info(
            f"Actor {self.actor_id}: spell speed {timing.spell_speed}, "
            f"caster tax {timing.caster_tax:.1f}ms from {evaluation.queued_count} casts"
        )
        if floor is not None and floor > timing.spell_speed:
            logger.warning(
                f"Actor {self.actor_id}: a cast window needs at least {floor} spell speed, "
                f"above the estimate of {timing.spell_speed}"
            )

        self.statistics.add(SimpleStatistic(
            title=CASTER_TAX_TITLE,
            value=format_duration(timing.caster_tax, 3),
        ))
        self.statistics.add(SimpleStatistic(
            title=SPELL_SPEED_TITLE,
            value=timing.spell_speed,
        ))

    def get_timing(self) -> Optional[TimingInfo]:
        """Final estimate, or None before completion or with insufficient data."""
        if self.report is None:
            return None
        return self.report.timing

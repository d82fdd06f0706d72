"""Spell speed search.

The best estimate of the player's spell speed is the smallest hypothesis whose
mean GCD-bound leftover is positive: anything lower would require the engine to
have finished casts faster than it can.

Raising the hypothesis never lengthens a predicted duration, but the queue
variance window is relative to the smallest leftover, and buffed and unbuffed
GCDs shrink by different amounts per step. Casts can move in and out of the
window, so the mean is not monotone and the predicate can flip back to false.
The sweep is therefore the reference. Binary search only narrows the range,
and every hypothesis below its candidate is still checked.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .cast_correlator import CastRecord
from .caster_tax import CasterTaxEstimator, SpsEvaluation
from .duration_model import expected_duration
from .errors import InsufficientDataError
from .game_data import ActionMeta


logger = logging.getLogger(__name__)

SPELL_SPEED_MIN = 400
SPELL_SPEED_MAX = 3000
SPELL_SPEED_STEP = 10


@dataclass(frozen=True)
class TimingInfo:
    """Final timing estimate for one player in one encounter."""
    spell_speed: int
    caster_tax: float


def minimum_spell_speed(
    record: CastRecord,
    action: ActionMeta,
    base_gcd_ms: int,
    lo: int = SPELL_SPEED_MIN,
    hi: int = SPELL_SPEED_MAX,
) -> int:
    """Smallest spell speed whose predicted duration fits inside one cast window.

    The true spell speed can never be lower than this, since the engine cannot
    finish a cast before the model says it ends.
    """
    if action.cast_time_ms < base_gcd_ms or record.is_instant:
        base_duration = base_gcd_ms
    else:
        base_duration = action.cast_time_ms
    while lo < hi:
        mid = (lo + hi) // 2
        if expected_duration(mid, base_duration, record.in_buff_window) < record.elapsed_ms:
            hi = mid
        else:
            lo = mid + 1
    return lo


class SpellSpeedSearch:
    """Finds the spell speed and caster tax that best explain a set of casts."""

    STRATEGIES = ("binary", "linear")

    def __init__(
        self,
        estimator: CasterTaxEstimator,
        speed_min: int = SPELL_SPEED_MIN,
        speed_max: int = SPELL_SPEED_MAX,
        speed_step: int = SPELL_SPEED_STEP,
        strategy: str = "linear",
    ):
        if strategy not in self.STRATEGIES:
            raise ValueError(f"Unknown search strategy: {strategy}")
        self.estimator = estimator
        self.grid = range(speed_min, speed_max, speed_step)
        self.strategy = strategy

    def search(self, records: Iterable[CastRecord]) -> SpsEvaluation:
        """Evaluation at the smallest hypothesis with a positive mean leftover.

        Raises:
            InsufficientDataError: if there are no GCD-bound casts to measure
                against, no hypothesis in the grid explains the casts, or the
                winning hypothesis leaves no taxed casts after filtering.
        """
        usable = self.estimator.usable_records(records)
        if not any(not self.estimator.has_caster_tax(r, a) for r, a in usable):
            raise InsufficientDataError("No GCD-bound casts to estimate spell speed from")

        if self.strategy == "binary":
            evaluation = self._binary_search(usable)
        else:
            evaluation = self._linear_sweep(usable)

        if evaluation is None:
            raise InsufficientDataError(
                f"No spell speed in [{self.grid.start}, {self.grid.stop}) explains the observed casts"
            )
        if evaluation.caster_tax is None:
            raise InsufficientDataError(
                f"No taxed casts left after filtering at spell speed {evaluation.speed_stat}"
            )
        return evaluation

    def solve(self, records: Iterable[CastRecord]) -> TimingInfo:
        return self.timing_for(self.search(records))

    @staticmethod
    def timing_for(evaluation: SpsEvaluation) -> TimingInfo:
        return TimingInfo(spell_speed=evaluation.speed_stat, caster_tax=evaluation.caster_tax)

    @staticmethod
    def _explains(evaluation: SpsEvaluation) -> bool:
        return evaluation.leftover_mean is not None and evaluation.leftover_mean > 0

    def _linear_sweep(self, usable: List[Tuple[CastRecord, ActionMeta]]):
        for speed_stat in self.grid:
            evaluation = self.estimator.evaluate_usable(speed_stat, usable)
            if self._explains(evaluation):
                return evaluation
        return None

    def _binary_search(self, usable: List[Tuple[CastRecord, ActionMeta]]):
        cache: Dict[int, SpsEvaluation] = {}

        def evaluate(index: int) -> SpsEvaluation:
            if index not in cache:
                cache[index] = self.estimator.evaluate_usable(self.grid[index], usable)
            return cache[index]

        lo, hi = 0, len(self.grid)
        while lo < hi:
            mid = (lo + hi) // 2
            if self._explains(evaluate(mid)):
                hi = mid
            else:
                lo = mid + 1

        # The predicate can flip back to false, so an earlier hypothesis may still explain the casts
        for index in range(lo):
            if self._explains(evaluate(index)):
                logger.debug(f"Grid index {index} explains the casts below the bisection result")
                lo = index
                break

        if lo == len(self.grid):
            return None
        logger.debug(f"Binary search settled on {self.grid[lo]} after {len(cache)} evaluations")
        return evaluate(lo)

"""Caster tax estimation.

For a given spell speed hypothesis, every closed cast window is compared with
the duration the model predicts for it. The remainder ("leftover") is what the
engine spent on top of the nominal duration plus whatever the player added by
queueing late. True engine windows cluster tightly just above the minimum
leftover; anything further out is input delay and is filtered before averaging.

Casts that were hard-cast (confirmed after a preparation window) with a cast
time of at least one GCD pay the caster tax on top of their cast time. All
other casts are GCD-bound and should show no tax at the correct spell speed.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

import numpy as np

from .cast_correlator import CastRecord
from .duration_model import expected_duration
from .game_data import ActionMeta, GameData

BASE_GCD_MS = 2500
MAX_QUEUE_VARIANCE_MS = 150

# Minimum used for the taxed bucket when no taxed leftover is positive
NO_POSITIVE_MINIMUM = 1_000_000


@dataclass(frozen=True)
class SpsEvaluation:
    """Leftover statistics for one spell speed hypothesis."""
    speed_stat: int
    caster_tax: Optional[float]      # mean leftover of taxed casts
    leftover_mean: Optional[float]   # mean leftover of GCD-bound casts
    queued_count: int                # samples kept after filtering

    @property
    def insufficient_data(self) -> bool:
        return self.caster_tax is None or self.leftover_mean is None


def _filtered_mean(values: List[int], floor: Optional[int], ceiling: int) -> Tuple[Optional[float], int]:
    data = np.asarray(values, dtype=np.int64)
    mask = data <= ceiling
    if floor is not None:
        mask &= data >= floor
    kept = data[mask]
    if kept.size == 0:
        return None, 0
    return float(kept.mean()), int(kept.size)


class CasterTaxEstimator:
    """Computes per-hypothesis leftover means over a fixed set of cast records."""

    def __init__(
        self,
        game_data: GameData,
        base_gcd_ms: int = BASE_GCD_MS,
        variance_window_ms: int = MAX_QUEUE_VARIANCE_MS,
        excluded_action_ids: Optional[Iterable[int]] = None,
    ):
        self.game_data = game_data
        self.base_gcd_ms = base_gcd_ms
        self.variance_window_ms = variance_window_ms
        if excluded_action_ids is None:
            excluded_action_ids = game_data.dual_cast_length_ids
        self.excluded_action_ids: FrozenSet[int] = frozenset(excluded_action_ids)

    def usable_records(self, records: Iterable[CastRecord]) -> List[Tuple[CastRecord, ActionMeta]]:
        """Pair records with their action, dropping excluded and unknown ones."""
        usable = []
        for record in records:
            if record.action_id in self.excluded_action_ids:
                continue
            action = self.game_data.get_action(record.action_id)
            if action is None:
                continue
            usable.append((record, action))
        return usable

    def has_caster_tax(self, record: CastRecord, action: ActionMeta) -> bool:
        return not record.is_instant and action.cast_time_ms >= self.base_gcd_ms

    def leftover(self, speed_stat: int, record: CastRecord, action: ActionMeta) -> Tuple[int, bool]:
        """Leftover time of one cast and whether it is a taxed cast."""
        taxed = self.has_caster_tax(record, action)
        base_duration = action.cast_time_ms if taxed else self.base_gcd_ms
        expected = expected_duration(speed_stat, base_duration, record.in_buff_window)
        return record.elapsed_ms - expected, taxed

    def evaluate(self, speed_stat: int, records: Iterable[CastRecord]) -> SpsEvaluation:
        """Mean filtered leftovers of taxed and GCD-bound casts at `speed_stat`."""
        return self.evaluate_usable(speed_stat, self.usable_records(records))

    def evaluate_usable(
        self,
        speed_stat: int,
        usable: List[Tuple[CastRecord, ActionMeta]],
    ) -> SpsEvaluation:
        leftovers: List[int] = []
        taxed_leftovers: List[int] = []
        for record, action in usable:
            value, taxed = self.leftover(speed_stat, record, action)
            if taxed:
                taxed_leftovers.append(value)
            else:
                leftovers.append(value)

        # Taxed casts landing at or under the model are most likely a buff
        # window ending unnoticed, so they cannot set the minimum
        taxed_minimum = min((x for x in taxed_leftovers if x > 0), default=NO_POSITIVE_MINIMUM)

        leftover_mean, leftover_count = (None, 0)
        if leftovers:
            leftover_mean, leftover_count = _filtered_mean(
                leftovers, None, min(leftovers) + self.variance_window_ms
            )
        caster_tax, taxed_count = _filtered_mean(
            taxed_leftovers, 0, taxed_minimum + self.variance_window_ms
        )

        return SpsEvaluation(
            speed_stat=speed_stat,
            caster_tax=caster_tax,
            leftover_mean=leftover_mean,
            queued_count=leftover_count + taxed_count,
        )

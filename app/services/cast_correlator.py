"""Cast correlation.

Turns a player's prepare / interrupt / action events into closed cast records,
each spanning from the moment a GCD cast began to the moment the next GCD
began. Only the elapsed window of a record is observable; the duration model
and caster tax estimator work out how much of it the engine spent.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .combat_events import ActorStatusTracker, CombatEvent, EventType
from .game_data import ActionMeta, GameData


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CastRecord:
    """A closed cast window."""
    action_id: Optional[int]  # None if the cast never confirmed
    prepare_timestamp: int
    cast_confirm_timestamp: Optional[int]
    next_action_timestamp: int
    in_buff_window: bool

    @property
    def elapsed_ms(self) -> int:
        return self.next_action_timestamp - self.prepare_timestamp

    @property
    def is_instant(self) -> bool:
        """Confirmed at the moment it began, with no preparation window."""
        return self.cast_confirm_timestamp == self.prepare_timestamp


@dataclass
class OpenCast:
    """A cast still waiting for the next GCD to close it."""
    prepare_timestamp: int
    in_buff_window: bool
    action_id: Optional[int] = None
    cast_confirm_timestamp: Optional[int] = None

    def close(self, next_action_timestamp: int) -> CastRecord:
        return CastRecord(
            action_id=self.action_id,
            prepare_timestamp=self.prepare_timestamp,
            cast_confirm_timestamp=self.cast_confirm_timestamp,
            next_action_timestamp=next_action_timestamp,
            in_buff_window=self.in_buff_window,
        )


class CastCorrelator:
    """State machine over one optional open cast and the closed cast list.

    A cast still open when the stream completes is dropped rather than
    flushed, since its true window end is unknown.
    """

    def __init__(
        self,
        game_data: GameData,
        status_tracker: ActorStatusTracker,
        buff_status_id: int,
    ):
        self.game_data = game_data
        self.status_tracker = status_tracker
        self.buff_status_id = buff_status_id
        self.current: Optional[OpenCast] = None
        self.records: List[CastRecord] = []

    def handle(self, event: CombatEvent) -> None:
        """Dispatch a single event to its handler."""
        if event.type == EventType.PREPARE:
            self.on_prepare(event)
        elif event.type == EventType.INTERRUPT:
            self.on_interrupt(event)
        elif event.type == EventType.ACTION:
            self.on_action(event)

    def _gcd_action(self, action_id: Optional[int]) -> Optional[ActionMeta]:
        action = self.game_data.get_action(action_id)
        if action is None:
            logger.debug(f"Ignoring event for unknown action {action_id}")
            return None
        if action.auto_attack or not action.on_gcd:
            return None
        return action

    def _open(self, timestamp: int) -> OpenCast:
        return OpenCast(
            prepare_timestamp=timestamp,
            in_buff_window=self.status_tracker.has_status(self.buff_status_id),
        )

    def _close_current(self, timestamp: int) -> None:
        record = self.current.close(timestamp)
        self.current = None
        if record.elapsed_ms <= 0:
            logger.debug(f"Dropping zero-length cast window at {timestamp}ms")
            return
        self.records.append(record)

    def on_prepare(self, event: CombatEvent) -> None:
        if self._gcd_action(event.action_id) is None:
            return
        if self.current is not None:
            self._close_current(event.timestamp)
        self.current = self._open(event.timestamp)

    def on_interrupt(self, event: CombatEvent) -> None:
        if self._gcd_action(event.action_id) is None:
            return
        self.current = None

    def on_action(self, event: CombatEvent) -> None:
        if self._gcd_action(event.action_id) is None:
            return

        if self.current is not None and self.current.cast_confirm_timestamp is not None:
            self._close_current(event.timestamp)

        if self.current is None:
            # Instant or already-queued cast: zero-length preparation window
            self.current = self._open(event.timestamp)

        self.current.cast_confirm_timestamp = event.timestamp
        self.current.action_id = event.action_id

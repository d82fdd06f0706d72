"""Combat log events and per-actor status tracking."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set


class EventType(Enum):
    PREPARE = "prepare"          # Began casting
    INTERRUPT = "interrupt"      # Cast was cancelled
    ACTION = "action"            # Cast confirmed / instant action used
    COMPLETE = "complete"        # End of the event stream
    STATUS_APPLY = "statusApply"
    STATUS_REMOVE = "statusRemove"


@dataclass(frozen=True)
class CombatEvent:
    """A single timestamped event from a combat log."""
    type: EventType
    timestamp: int  # ms from fight start
    source_id: Optional[int] = None
    target_id: Optional[int] = None
    action_id: Optional[int] = None
    status_id: Optional[int] = None


class ActorStatusTracker:
    """Tracks which statuses are currently active on one actor.

    Status events must be fed in timestamp order; `has_status` answers for the
    time of the most recently applied event.
    """

    def __init__(self, actor_id: int):
        self.actor_id = actor_id
        self._active: Set[int] = set()

    def handle(self, event: CombatEvent) -> None:
        if event.target_id != self.actor_id or event.status_id is None:
            return
        if event.type == EventType.STATUS_APPLY:
            self._active.add(event.status_id)
        elif event.type == EventType.STATUS_REMOVE:
            self._active.discard(event.status_id)

    def has_status(self, status_id: int) -> bool:
        return status_id in self._active


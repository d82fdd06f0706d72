"""Conversion of FF Logs v1 event payloads into combat events."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .combat_events import CombatEvent, EventType


logger = logging.getLogger(__name__)

FFLOGS_EVENT_TYPES = {
    "begincast": EventType.PREPARE,
    "cast": EventType.ACTION,
    "interrupt": EventType.INTERRUPT,
    "applybuff": EventType.STATUS_APPLY,
    "refreshbuff": EventType.STATUS_APPLY,
    "removebuff": EventType.STATUS_REMOVE,
}

# FF Logs offsets buff ids into their own range
FFLOGS_STATUS_OFFSET = 1_000_000


def _ability_id(raw: Dict[str, Any]) -> Optional[int]:
    ability = raw.get("ability")
    if isinstance(ability, dict) and "guid" in ability:
        return int(ability["guid"])
    if "abilityGameID" in raw:
        return int(raw["abilityGameID"])
    return None


def normalize_fflogs_event(raw: Dict[str, Any], fight_start: int = 0) -> Optional[CombatEvent]:
    """Convert one raw FF Logs event, or return None for unhandled types."""
    event_type = FFLOGS_EVENT_TYPES.get(raw.get("type", ""))
    if event_type is None:
        return None

    ability_id = _ability_id(raw)
    action_id = None
    status_id = None
    if event_type in (EventType.STATUS_APPLY, EventType.STATUS_REMOVE):
        if ability_id is not None and ability_id >= FFLOGS_STATUS_OFFSET:
            ability_id -= FFLOGS_STATUS_OFFSET
        status_id = ability_id
    else:
        action_id = ability_id

    return CombatEvent(
        type=event_type,
        timestamp=int(raw["timestamp"]) - fight_start,
        source_id=raw.get("sourceID"),
        target_id=raw.get("targetID"),
        action_id=action_id,
        status_id=status_id,
    )


def normalize_fflogs_events(raw_events: Iterable[Dict[str, Any]], fight_start: int = 0) -> List[CombatEvent]:
    """Convert raw FF Logs events, dropping unhandled types, sorted by timestamp."""
    events = []
    skipped = 0
    for raw in raw_events:
        event = normalize_fflogs_event(raw, fight_start)
        if event is None:
            skipped += 1
            continue
        events.append(event)

    if skipped:
        logger.debug(f"Skipped {skipped} events of unhandled types")

    # sorted() is stable, so same-timestamp events keep log order
    return sorted(events, key=lambda e: e.timestamp)

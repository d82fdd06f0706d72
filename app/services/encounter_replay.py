"""Replays an encounter's events through the caster tax analyser."""

from typing import Iterable, Optional

from ..config import Settings
from .caster_tax_analyser import CasterTaxAnalyser
from .combat_events import ActorStatusTracker, CombatEvent, EventType
from .errors import EventOrderError
from .game_data import GameData, get_game_data
from .statistics import Statistics


def replay_encounter(
    events: Iterable[CombatEvent],
    actor_id: int,
    game_data: Optional[GameData] = None,
    settings: Optional[Settings] = None,
    statistics: Optional[Statistics] = None,
) -> CasterTaxAnalyser:
    """Run one actor's encounter through a fresh analyser.

    Status events update the actor's status tracker in stream order, so the
    buff state sampled for a cast reflects every status event preceding it.
    Events after a complete signal are ignored, and one is emitted at the end
    of the stream if the stream did not carry one.

    Raises:
        EventOrderError: if timestamps go backwards.
    """
    game_data = game_data or get_game_data()
    tracker = ActorStatusTracker(actor_id)
    analyser = CasterTaxAnalyser(
        actor_id,
        game_data,
        tracker,
        statistics if statistics is not None else Statistics(),
        settings=settings,
    )

    last_timestamp = None
    for event in events:
        if last_timestamp is not None and event.timestamp < last_timestamp:
            raise EventOrderError(last_timestamp, event.timestamp)
        last_timestamp = event.timestamp

        if event.type in (EventType.STATUS_APPLY, EventType.STATUS_REMOVE):
            tracker.handle(event)
            continue
        analyser.on_event(event)
        if event.type == EventType.COMPLETE:
            break
    else:
        analyser.on_complete()

    return analyser

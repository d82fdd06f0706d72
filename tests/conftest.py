"""Shared fixtures: synthetic Black Mage rotations with known timing."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app.config import Settings
from app.services.combat_events import CombatEvent, EventType
from app.services.duration_model import expected_duration
from app.services.game_data import GameData

ACTOR_ID = 1
FIRE_III = 152
FIRE_IV = 3577
DESPAIR = 16505
PARADOX = 25797
XENOGLOSSY = 16507
CIRCLE_OF_POWER = 738

# (action_id, hard_cast, in_buff, jitter_ms)
ROTATION = [
    (FIRE_III, True, False, 30),
    (FIRE_IV, True, False, 3),
    (XENOGLOSSY, False, False, 2),
    (FIRE_IV, True, False, 11),
    (XENOGLOSSY, False, False, 6),
    (DESPAIR, True, False, 7),
    (XENOGLOSSY, False, False, 400),  # player was late
    (FIRE_IV, True, True, 15),
    (XENOGLOSSY, False, False, 8),
    (FIRE_IV, True, True, 5),
    (XENOGLOSSY, False, False, 4),
    (PARADOX, True, False, 9),
    (XENOGLOSSY, False, False, 3),
    (FIRE_IV, True, False, 600),  # player was late
    (XENOGLOSSY, False, False, 5),
]

# Jitters that survive the queue variance filter
GCD_JITTERS = [2, 6, 8, 4, 3, 5]
TAXED_JITTERS = [3, 11, 7, 15, 5, 9]


def plateau_start(gcd_ms: int) -> int:
    """Smallest grid spell speed whose unbuffed GCD is at most `gcd_ms`."""
    return next(s for s in range(400, 3000, 10) if expected_duration(s, 2500, False) <= gcd_ms)


def build_rotation_events(speed_stat: int, caster_tax: int, start: int = 1000):
    """Events an engine with the given spell speed and caster tax would log for ROTATION."""
    game_data = GameData()
    events = []
    t = start
    for action_id, hard_cast, in_buff, jitter in ROTATION:
        action = game_data.get_action(action_id)
        if hard_cast:
            duration = expected_duration(speed_stat, action.cast_time_ms, in_buff)
            if in_buff:
                events.append(CombatEvent(EventType.STATUS_APPLY, t, target_id=ACTOR_ID, status_id=CIRCLE_OF_POWER))
            events.append(CombatEvent(EventType.PREPARE, t, source_id=ACTOR_ID, action_id=action_id))
            if in_buff:
                events.append(CombatEvent(EventType.STATUS_REMOVE, t, target_id=ACTOR_ID, status_id=CIRCLE_OF_POWER))
            events.append(CombatEvent(EventType.ACTION, t + duration, source_id=ACTOR_ID, action_id=action_id))
            t += duration + caster_tax + jitter
        else:
            events.append(CombatEvent(EventType.ACTION, t, source_id=ACTOR_ID, action_id=action_id))
            t += expected_duration(speed_stat, 2500, in_buff) + jitter

    # Closes the last rotation step; stays open itself
    events.append(CombatEvent(EventType.ACTION, t, source_id=ACTOR_ID, action_id=XENOGLOSSY))
    events.append(CombatEvent(EventType.COMPLETE, t + 500))
    return events


@pytest.fixture
def game_data():
    return GameData()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def true_speed():
    return plateau_start(2400)


@pytest.fixture
def true_tax():
    return 100


@pytest.fixture
def rotation_events(true_speed, true_tax):
    return build_rotation_events(true_speed, true_tax)

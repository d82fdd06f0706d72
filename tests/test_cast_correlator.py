"""Tests for cast_correlator.py"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app.services.cast_correlator import CastCorrelator, CastRecord
from app.services.combat_events import ActorStatusTracker, CombatEvent, EventType

ACTOR = 1
FIRE_IV = 3577
XENOGLOSSY = 16507
LEY_LINES = 3573
ATTACK = 7
CIRCLE_OF_POWER = 738


def prepare(t, action_id=FIRE_IV):
    return CombatEvent(EventType.PREPARE, t, source_id=ACTOR, action_id=action_id)


def action(t, action_id=FIRE_IV):
    return CombatEvent(EventType.ACTION, t, source_id=ACTOR, action_id=action_id)


def interrupt(t, action_id=FIRE_IV):
    return CombatEvent(EventType.INTERRUPT, t, source_id=ACTOR, action_id=action_id)


@pytest.fixture
def tracker():
    return ActorStatusTracker(ACTOR)


@pytest.fixture
def correlator(game_data, tracker):
    return CastCorrelator(game_data, tracker, buff_status_id=CIRCLE_OF_POWER)


def feed(correlator, events):
    for event in events:
        correlator.handle(event)
    return correlator.records


class TestCastWindows:
    """Tests for opening and closing cast records."""

    def test_hard_cast_closed_by_next_prepare(self, correlator):
        """prepare -> confirm -> prepare yields one record spanning both prepares."""
        records = feed(correlator, [prepare(100), action(2900), prepare(3120)])

        assert records == [CastRecord(
            action_id=FIRE_IV,
            prepare_timestamp=100,
            cast_confirm_timestamp=2900,
            next_action_timestamp=3120,
            in_buff_window=False,
        )]
        assert records[0].elapsed_ms == 3020
        assert not records[0].is_instant

    def test_instant_cast_has_zero_preparation(self, correlator):
        """A confirm with no preceding prepare starts and confirms at once."""
        records = feed(correlator, [action(500, XENOGLOSSY), action(2900, XENOGLOSSY)])

        assert len(records) == 1
        assert records[0].prepare_timestamp == records[0].cast_confirm_timestamp == 500
        assert records[0].next_action_timestamp == 2900
        assert records[0].is_instant

    def test_confirm_closes_previous_confirmed_cast(self, correlator):
        """A second confirm starts a new cast and closes the first."""
        records = feed(correlator, [prepare(0), action(2800), action(2900, XENOGLOSSY)])

        assert len(records) == 1
        assert records[0].next_action_timestamp == 2900
        assert correlator.current.action_id == XENOGLOSSY
        assert correlator.current.prepare_timestamp == 2900

    def test_records_stay_ordered(self, correlator):
        events = [
            prepare(0), action(2800),
            action(2900, XENOGLOSSY),
            prepare(5300), action(8100),
            prepare(8200),
        ]
        records = feed(correlator, events)

        assert [r.prepare_timestamp for r in records] == [0, 2900, 5300]
        for record in records:
            assert record.next_action_timestamp > record.prepare_timestamp

    def test_trailing_cast_is_dropped(self, correlator):
        """A cast still open when the stream ends produces no record."""
        records = feed(correlator, [prepare(0), action(2800)])

        assert records == []
        assert correlator.current is not None

    def test_prepare_without_confirm_has_no_action(self, correlator):
        records = feed(correlator, [prepare(0), prepare(1500)])

        assert len(records) == 1
        assert records[0].action_id is None


class TestInterrupts:
    """Tests for interrupted casts."""

    def test_interrupt_discards_open_cast(self, correlator):
        records = feed(correlator, [prepare(0), interrupt(1200)])

        assert records == []
        assert correlator.current is None

    def test_cast_after_interrupt_starts_fresh(self, correlator):
        records = feed(correlator, [
            prepare(0), interrupt(1200),
            prepare(1500), action(4300), prepare(4400),
        ])

        assert len(records) == 1
        assert records[0].prepare_timestamp == 1500


class TestIgnoredEvents:
    """Events outside the GCD class never touch state."""

    def test_off_gcd_action_ignored(self, correlator):
        records = feed(correlator, [prepare(0), action(2800), action(2850, LEY_LINES), prepare(3000)])

        assert len(records) == 1
        assert records[0].next_action_timestamp == 3000

    def test_auto_attack_ignored(self, correlator):
        feed(correlator, [action(100, ATTACK)])
        assert correlator.current is None

    def test_unknown_action_ignored(self, correlator):
        feed(correlator, [prepare(0), action(100, 999999), interrupt(200, 999999)])

        assert correlator.current.prepare_timestamp == 0
        assert correlator.current.cast_confirm_timestamp is None

    def test_missing_action_id_ignored(self, correlator):
        feed(correlator, [CombatEvent(EventType.PREPARE, 0, source_id=ACTOR)])
        assert correlator.current is None


class TestBuffSampling:
    """Buff state is sampled when the cast window opens."""

    def test_buff_active_at_prepare(self, correlator, tracker):
        tracker.handle(CombatEvent(EventType.STATUS_APPLY, 0, target_id=ACTOR, status_id=CIRCLE_OF_POWER))
        feed(correlator, [prepare(0)])
        tracker.handle(CombatEvent(EventType.STATUS_REMOVE, 100, target_id=ACTOR, status_id=CIRCLE_OF_POWER))
        records = feed(correlator, [action(2400), prepare(2500)])

        assert records[0].in_buff_window is True
        assert correlator.current.in_buff_window is False

    def test_buff_on_other_actor_ignored(self, correlator, tracker):
        tracker.handle(CombatEvent(EventType.STATUS_APPLY, 0, target_id=2, status_id=CIRCLE_OF_POWER))
        feed(correlator, [action(0, XENOGLOSSY)])

        assert correlator.current.in_buff_window is False

    def test_buff_status_from_game_data(self, game_data):
        assert game_data.get_status("CIRCLE_OF_POWER").status_id == CIRCLE_OF_POWER

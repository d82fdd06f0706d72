# Core modules (no network dependencies)
from .duration_model import expected_duration
from .combat_events import CombatEvent, EventType, ActorStatusTracker
from .game_data import GameData, ActionMeta, StatusMeta, get_game_data
from .cast_correlator import CastCorrelator, CastRecord
from .caster_tax import CasterTaxEstimator, SpsEvaluation
from .spell_speed_search import SpellSpeedSearch, TimingInfo, minimum_spell_speed
from .caster_tax_analyser import CasterTaxAnalyser, TimingReport
from .encounter_replay import replay_encounter
from .statistics import SimpleStatistic, Statistics, format_duration
from .errors import (
    TimingEstimationError, InsufficientDataError, EventOrderError,
    ReportError, ReportNotFoundError, UnknownApiError,
)

__all__ = [
    "expected_duration",
    "CombatEvent",
    "EventType",
    "ActorStatusTracker",
    "GameData",
    "ActionMeta",
    "StatusMeta",
    "get_game_data",
    "CastCorrelator",
    "CastRecord",
    "CasterTaxEstimator",
    "SpsEvaluation",
    "SpellSpeedSearch",
    "TimingInfo",
    "minimum_spell_speed",
    "CasterTaxAnalyser",
    "TimingReport",
    "replay_encounter",
    "SimpleStatistic",
    "Statistics",
    "format_duration",
    "TimingEstimationError",
    "InsufficientDataError",
    "EventOrderError",
    "ReportError",
    "ReportNotFoundError",
    "UnknownApiError",
]

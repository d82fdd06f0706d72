"""Action and status data for Black Mage cast timing analysis.

Cast times are the base (unbuffed, 400 spell speed) values in milliseconds.
Only the global-cooldown class matters to the cast correlator, but off-GCD
actions are listed so that lookups on them resolve instead of falling through
as unknown ids.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional


@dataclass(frozen=True)
class ActionMeta:
    """Static metadata for a single action."""
    action_id: int
    name: str
    cast_time_ms: int = 0  # 0 for instant actions
    on_gcd: bool = False
    auto_attack: bool = False
    # Cast time is halved under Astral Fire / Umbral Ice, which the duration
    # model does not account for
    dual_cast_length: bool = False


@dataclass(frozen=True)
class StatusMeta:
    """Static metadata for a status effect."""
    status_id: int
    name: str


class GameData:
    """Lookup tables for actions and statuses."""

    ACTIONS: Dict[int, ActionMeta] = {
        # Auto attack
        7: ActionMeta(7, "Attack", auto_attack=True),

        # Fire spells
        141: ActionMeta(141, "Fire", cast_time_ms=2500, on_gcd=True),
        147: ActionMeta(147, "Fire II", cast_time_ms=3000, on_gcd=True),
        152: ActionMeta(152, "Fire III", cast_time_ms=3500, on_gcd=True, dual_cast_length=True),
        3577: ActionMeta(3577, "Fire IV", cast_time_ms=2800, on_gcd=True),
        162: ActionMeta(162, "Flare", cast_time_ms=4000, on_gcd=True),
        16505: ActionMeta(16505, "Despair", cast_time_ms=3000, on_gcd=True),

        # Ice spells
        142: ActionMeta(142, "Blizzard", cast_time_ms=2500, on_gcd=True),
        25795: ActionMeta(25795, "High Blizzard II", cast_time_ms=3000, on_gcd=True),
        154: ActionMeta(154, "Blizzard III", cast_time_ms=3500, on_gcd=True, dual_cast_length=True),
        3576: ActionMeta(3576, "Blizzard IV", cast_time_ms=2500, on_gcd=True),
        159: ActionMeta(159, "Freeze", cast_time_ms=2800, on_gcd=True),
        16506: ActionMeta(16506, "Umbral Soul", on_gcd=True),

        # Thunder and polyglot
        153: ActionMeta(153, "Thunder III", cast_time_ms=2500, on_gcd=True),
        7420: ActionMeta(7420, "Thunder IV", cast_time_ms=2500, on_gcd=True),
        16507: ActionMeta(16507, "Xenoglossy", on_gcd=True),
        7422: ActionMeta(7422, "Foul", on_gcd=True),
        25797: ActionMeta(25797, "Paradox", cast_time_ms=2500, on_gcd=True),
        156: ActionMeta(156, "Scathe", on_gcd=True),

        # Off-GCD
        149: ActionMeta(149, "Transpose"),
        155: ActionMeta(155, "Aetherial Manipulation"),
        157: ActionMeta(157, "Manaward"),
        158: ActionMeta(158, "Manafont"),
        3573: ActionMeta(3573, "Ley Lines"),
        3574: ActionMeta(3574, "Sharpcast"),
        7419: ActionMeta(7419, "Between the Lines"),
        7421: ActionMeta(7421, "Triplecast"),
        25796: ActionMeta(25796, "Amplifier"),
        7559: ActionMeta(7559, "Surecast"),
        7560: ActionMeta(7560, "Addle"),
        7561: ActionMeta(7561, "Swiftcast"),
        7562: ActionMeta(7562, "Lucid Dreaming"),
    }

    STATUSES: Dict[str, StatusMeta] = {
        # Reduces cast and recast times; see BUFF_MULTIPLIER in duration_model
        "CIRCLE_OF_POWER": StatusMeta(738, "Circle of Power"),
    }

    def get_action(self, action_id: Optional[int]) -> Optional[ActionMeta]:
        """Look up an action, returning None for missing or unknown ids."""
        if action_id is None:
            return None
        return self.ACTIONS.get(action_id)

    def get_status(self, key: str) -> StatusMeta:
        return self.STATUSES[key]

    @property
    def dual_cast_length_ids(self) -> FrozenSet[int]:
        return frozenset(a.action_id for a in self.ACTIONS.values() if a.dual_cast_length)


_game_data: Optional[GameData] = None


def get_game_data() -> GameData:
    """Get the global GameData instance."""
    global _game_data
    if _game_data is None:
        _game_data = GameData()
    return _game_data

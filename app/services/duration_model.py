"""Cast duration model.

Reproduces the engine's speed-adjusted cast time formula. The engine floors at
three separate stages (stat reduction to thousandths, adjusted duration to whole
milliseconds, final result to centiseconds), and the stages must be applied in
that order: fusing them changes the output at stat boundaries.
"""

import math

BASE_SPEED_STAT = 400
SPEED_STAT_DIVISOR = 1900
SPEED_STAT_COEFFICIENT = 130

BUFF_MULTIPLIER = 85
NO_BUFF_MULTIPLIER = 100


def stat_reduction(speed_stat: int) -> float:
    """Fractional duration reduction granted by a speed stat, in thousandths."""
    return math.floor(SPEED_STAT_COEFFICIENT * (speed_stat - BASE_SPEED_STAT) / SPEED_STAT_DIVISOR) / 1000


def expected_duration(speed_stat: int, base_duration_ms: int, buff_active: bool) -> int:
    """Predicted duration in milliseconds of a cast or GCD.

    Args:
        speed_stat: Spell speed hypothesis
        base_duration_ms: Unmodified duration at base speed
        buff_active: Whether the 15% cast time reduction buff applies

    Returns:
        Duration in milliseconds, always a multiple of 10
    """
    multiplier = BUFF_MULTIPLIER if buff_active else NO_BUFF_MULTIPLIER
    adjusted_seconds = math.floor(base_duration_ms * (1 - stat_reduction(speed_stat))) / 1000
    # multiplier / 100 gives seconds, * 1000 gives ms
    return math.floor(multiplier * adjusted_seconds) * 10

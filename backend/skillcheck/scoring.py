"""
Score arithmetic shared by the test, skill and progress aggregators.

All stored scores are integers in [0, 100]. Rounding is half-up, so a
blended 62.5 becomes 63 rather than Python's banker's 62.

Key formulas:
    Attempt score:   score = round(100 * correct / total)        (0 when total == 0)
    Blend:           new   = round(old * 0.3 + incoming * 0.7)   (incoming when old is absent)
    Position decay:  c_i   = max(score - 5i, score * (1 - 0.1i))

Where:
    i = position of a skill inside its category's skill list (0 = most central)
"""

import math
from typing import Iterable, Optional

MIN_SCORE = 0
MAX_SCORE = 100

HISTORY_WEIGHT = 0.3
INCOMING_WEIGHT = 0.7


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int = MIN_SCORE, high: int = MAX_SCORE) -> int:
    return max(low, min(high, value))


def round_score(value: float) -> int:
    """Round a raw score and clamp it into [0, 100]."""
    return clamp(round_half_up(value))


def attempt_score(correct: int, total: int) -> int:
    """Percentage of correct answers as an integer score.

    Raises:
        ValueError: If counts are negative or correct exceeds total.
    """
    if correct < 0 or total < 0:
        raise ValueError("Answer counts must be non-negative")
    if correct > total:
        raise ValueError("Correct answers cannot exceed total questions")
    if total == 0:
        return 0
    return round_score(100 * correct / total)


def blend(old: Optional[float], incoming: float) -> int:
    """Blend an incoming score into a historical one.

    Args:
        old: The existing score, or None when nothing is recorded yet.
        incoming: The new observation.

    Returns:
        round(old * 0.3 + incoming * 0.7), or round(incoming) when old is None.
        The result always lies between old and incoming.
    """
    if old is None:
        return round_score(incoming)
    return round_score(old * HISTORY_WEIGHT + incoming * INCOMING_WEIGHT)


def position_contribution(score: float, index: int) -> float:
    """Share of an attempt score credited to the skill at `index`.

    Skills listed first for a category are treated as more central and
    decay less. The value is never negative for index < 10.
    """
    if index < 0:
        raise ValueError("Skill position must be non-negative")
    return max(score - index * 5, score * (1 - index * 0.1))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)

"""
Interval and Ease Factor Updates

Implements the SM-2 formulas used by the scheduler.

Key principles:
- The first two successes use fixed intervals (1 day, then 6 days)
- After that, intervals grow multiplicatively by the ease factor
- Any failure resets the card to a 1-day interval
- Ease factor changes quadratically with (5 - quality), floored at 1.3
"""

from __future__ import annotations
import math
from typing import Optional

from recall.sm2.constants import (
    EASE_BONUS,
    EASE_LINEAR,
    EASE_QUADRATIC,
    FAILED_INTERVAL,
    FIRST_INTERVAL,
    MIN_EASE_FACTOR,
    QUALITY_MAX,
    SECOND_INTERVAL,
)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded up.

    Same rule as JavaScript Math.round for positive values, which existing
    schedules were computed with. Python's round() uses banker's rounding
    and would turn 2.5 into 2.
    """
    return int(math.floor(value + 0.5))


def next_interval(
    interval: int,
    repetitions: int,
    ease_factor: float,
    success: bool,
    max_interval: Optional[int] = None
) -> int:
    """
    Compute the interval (days) after a review.

    Formula:
        failure:                 1
        success, repetitions=0:  1
        success, repetitions=1:  6
        success, repetitions>=2: round_half_up(interval * ease_factor)

    Args:
        interval: Interval before this review
        repetitions: Consecutive successes before this review
        ease_factor: Ease factor before this review
        success: Whether quality reached the success threshold
        max_interval: Optional cap in days (None = uncapped)

    Returns:
        New interval in days (always >= 1)
    """
    if not success:
        new_interval = FAILED_INTERVAL
    elif repetitions == 0:
        new_interval = FIRST_INTERVAL
    elif repetitions == 1:
        new_interval = SECOND_INTERVAL
    else:
        new_interval = round_half_up(interval * ease_factor)

    if max_interval is not None:
        new_interval = min(new_interval, max_interval)

    return max(1, new_interval)


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """
    Update ease factor from the quality just received.

    Formula:
        EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))

    q=5 adds 0.1, q=4 leaves EF unchanged, q=3 subtracts 0.14 and q=0
    subtracts 0.8.
    """
    miss = QUALITY_MAX - quality
    new_ease = ease_factor + (EASE_BONUS - miss * (EASE_LINEAR + miss * EASE_QUADRATIC))
    return max(new_ease, MIN_EASE_FACTOR)

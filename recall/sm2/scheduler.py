"""
Scheduler - SM-2 Algorithm Logic

Pure SM-2 scheduling and state updates (no database calls).

Main workflow:
1. Load card state (caller's responsibility)
2. Classify the learner's response into a quality (0-5)
3. Compute the new interval, repetitions and ease factor
4. Derive the review dates from the injected timestamp
5. Return updated card (+ event data dict for process_review)

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple, Union

from recall.errors import InvalidState
from recall.sm2 import classifier, intervals
from recall.sm2.card_state import CardState, as_utc, validate_card
from recall.sm2.constants import QUALITY_MAX, QUALITY_MIN, Response


def schedule(
    card: CardState,
    quality: int,
    now: datetime,
    max_interval: Optional[int] = None
) -> CardState:
    """
    Apply one review to a card and return its new state.

    Deterministic given its inputs: the only notion of time is `now`.
    The input card is never modified.

    Args:
        card: Current card state
        quality: Recall quality, integer in [0, 5]
        now: Review timestamp (naive values are treated as UTC)
        max_interval: Optional interval cap in days (None = uncapped)

    Returns:
        New CardState with updated SM-2 parameters and review dates

    Raises:
        InvalidState: if quality, the card state, or the cap is malformed
    """
    _validate_quality(quality)
    validate_card(card)
    if not isinstance(now, datetime):
        raise InvalidState(f"now must be a datetime, got {type(now).__name__}")
    if max_interval is not None and (
        isinstance(max_interval, bool)
        or not isinstance(max_interval, int)
        or max_interval < 1
    ):
        raise InvalidState(f"max_interval must be a positive integer, got {max_interval!r}")

    success = classifier.is_success(quality)

    # Both updates read the pre-review values
    new_interval = intervals.next_interval(
        interval=card.interval,
        repetitions=card.repetitions,
        ease_factor=card.ease_factor,
        success=success,
        max_interval=max_interval
    )
    new_ease = intervals.update_ease_factor(card.ease_factor, quality)
    new_repetitions = card.repetitions + 1 if success else 0

    reviewed_at = as_utc(now)

    return replace(
        card,
        ease_factor=new_ease,
        interval=new_interval,
        repetitions=new_repetitions,
        last_review_date=reviewed_at,
        next_review_date=reviewed_at + timedelta(days=new_interval),
    )


def process_review(
    card: CardState,
    response: Union[Response, str],
    timestamp: Optional[datetime] = None,
    max_interval: Optional[int] = None
) -> Tuple[CardState, dict]:
    """
    Process a review and return updated card state + event data.

    Caller is responsible for:
    1. Loading the card
    2. Saving the card after review
    3. Persisting the event

    Args:
        card: CardState to update (may be new or existing)
        response: Learner response (FORGOT, HARD, GOOD, EASY or its string value)
        timestamp: Review timestamp (defaults to now)
        max_interval: Optional interval cap in days

    Returns:
        Tuple of (updated_card, event_data_dict)
        event_data_dict is ready to pass to database.log_review_event()

    Raises:
        InvalidInput: if the response is not recognized
        InvalidState: if the card state is malformed
    """
    parsed = classifier.parse_response(response)
    quality = classifier.classify(parsed)

    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    updated = schedule(card, quality, timestamp, max_interval=max_interval)

    event_data = {
        'card_id': card.card_id,
        'user_id': card.user_id,
        'timestamp': updated.last_review_date,
        'response': parsed.value,
        'quality': quality,
        'was_new': card.is_new,
        'ease_factor_before': card.ease_factor,
        'interval_before': card.interval,
        'repetitions_before': card.repetitions,
        'ease_factor_after': updated.ease_factor,
        'interval_after': updated.interval,
        'repetitions_after': updated.repetitions,
        'next_review_date': updated.next_review_date,
    }

    return updated, event_data


def _validate_quality(quality: int) -> None:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidState(f"quality must be an integer, got {quality!r}")
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        raise InvalidState(
            f"quality must be in [{QUALITY_MIN}, {QUALITY_MAX}], got {quality}"
        )

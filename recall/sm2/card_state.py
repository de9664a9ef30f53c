"""
Card State - SM-2 scheduling state for a single card

Key concepts:
- Ease factor: multiplier controlling how fast intervals grow (>= 1.3)
- Interval: days until the next review
- Repetitions: consecutive successful reviews since the last failure
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import math

from recall.errors import InvalidState
from recall.sm2.constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_TOPIC,
    MIN_EASE_FACTOR,
)


@dataclass(frozen=True)
class CardState:
    """
    Scheduling state for a single card.

    Instances are immutable; the scheduler returns a new CardState for every
    review instead of modifying the one it was given.
    """
    front: str
    back: str

    # SM-2 parameters
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0  # days
    repetitions: int = 0

    # Review tracking
    next_review_date: Optional[datetime] = None  # last_review_date + interval days
    last_review_date: Optional[datetime] = None  # None until the first review

    # Ownership and metadata (opaque to the scheduler)
    card_id: Optional[str] = None
    user_id: Optional[str] = None
    topic_slug: str = DEFAULT_TOPIC
    created_at: Optional[datetime] = None

    # Optimistic lock counter, owned by the persistence layer
    version: int = 0

    @property
    def is_new(self) -> bool:
        """True until the card has been reviewed once."""
        return self.last_review_date is None

    @property
    def due_at(self) -> Optional[datetime]:
        """When the card is next due (None for new cards, which are always due)."""
        return self.next_review_date


def new_card(
    front: str,
    back: str,
    user_id: Optional[str] = None,
    topic_slug: str = DEFAULT_TOPIC,
    card_id: Optional[str] = None,
    created_at: Optional[datetime] = None
) -> CardState:
    """
    Initialize state for a freshly authored card (never reviewed).

    Args:
        front: Prompt text
        back: Answer text
        user_id: Owning learner
        topic_slug: Grouping label
        card_id: Persistence id, if already assigned
        created_at: Authoring timestamp

    Returns:
        CardState with default SM-2 parameters
    """
    return CardState(
        front=front,
        back=back,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval=0,
        repetitions=0,
        next_review_date=None,
        last_review_date=None,
        card_id=card_id,
        user_id=user_id,
        topic_slug=topic_slug,
        created_at=created_at,
    )


def validate_card(card: CardState) -> None:
    """
    Check that a card state satisfies the scheduler's input invariants.

    The floor on ease factor is enforced on output by the scheduler; a stored
    value already below it means the row was corrupted, so it is rejected
    rather than repaired.

    Raises:
        InvalidState: if any invariant is violated
    """
    if isinstance(card.interval, bool) or not isinstance(card.interval, int):
        raise InvalidState(f"interval must be an integer, got {card.interval!r}")
    if card.interval < 0:
        raise InvalidState(f"interval must be >= 0, got {card.interval}")

    if isinstance(card.repetitions, bool) or not isinstance(card.repetitions, int):
        raise InvalidState(f"repetitions must be an integer, got {card.repetitions!r}")
    if card.repetitions < 0:
        raise InvalidState(f"repetitions must be >= 0, got {card.repetitions}")

    if isinstance(card.ease_factor, bool) or not isinstance(card.ease_factor, (int, float)):
        raise InvalidState(f"ease_factor must be a number, got {card.ease_factor!r}")
    if not math.isfinite(card.ease_factor):
        raise InvalidState(f"ease_factor must be finite, got {card.ease_factor}")
    if card.ease_factor < MIN_EASE_FACTOR:
        raise InvalidState(
            f"ease_factor must be >= {MIN_EASE_FACTOR}, got {card.ease_factor}"
        )


def as_utc(timestamp: datetime) -> datetime:
    """Treat naive datetimes as UTC so due-date comparisons never mix kinds."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp

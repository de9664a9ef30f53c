"""
Due-Set Selection

Decides which of a learner's cards should be offered for review right now.

Priority order (default):
1. New cards (never reviewed), in authoring order
2. Due cards (next_review_date <= now), most overdue first

Cards with equal due dates keep their original order so review sessions are
deterministic. This is a filter + sort over caller-supplied cards; efficient
retrieval at scale is the storage layer's job.
"""

from __future__ import annotations
from datetime import datetime, time, timezone
from typing import Iterable, Iterator, Optional

from recall.sm2.card_state import CardState, as_utc

# Sort position for reviewed cards that somehow lost their due date
_OVERDUE = datetime.min.replace(tzinfo=timezone.utc)


def is_due(card: CardState, now: datetime) -> bool:
    """New cards are always due; reviewed cards once their due date has passed."""
    if card.is_new or card.next_review_date is None:
        return True
    return as_utc(card.next_review_date) <= as_utc(now)


class DueCards:
    """
    Lazy, restartable view over the cards due at a given time.

    The caller's collection is copied on construction; filtering and sorting
    run again on every iteration, so the view can be iterated any number of
    times and always yields the same sequence.
    """

    def __init__(
        self,
        cards: Iterable[CardState],
        now: datetime,
        new_first: bool = True,
        max_new: Optional[int] = None
    ):
        if max_new is not None and max_new < 0:
            raise ValueError(f"max_new must be >= 0, got {max_new}")
        self._cards = list(cards)
        self.now = as_utc(now)
        self.new_first = new_first
        self.max_new = max_new

    def __iter__(self) -> Iterator[CardState]:
        new_cards = []
        review_cards = []
        for position, card in enumerate(self._cards):
            if not is_due(card, self.now):
                continue
            if card.is_new:
                new_cards.append(card)
            else:
                review_cards.append((position, card))

        if self.max_new is not None:
            new_cards = new_cards[:self.max_new]

        # Position keeps equal due dates in insertion order
        review_cards.sort(key=lambda item: (_due_key(item[1]), item[0]))
        reviews = [card for _, card in review_cards]

        ordered = new_cards + reviews if self.new_first else reviews + new_cards
        return iter(ordered)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"<DueCards(now={self.now.isoformat()}, candidates={len(self._cards)})>"


def due_cards(
    cards: Iterable[CardState],
    now: datetime,
    new_first: bool = True,
    max_new: Optional[int] = None
) -> DueCards:
    """
    Get the cards eligible for review at `now`.

    Args:
        cards: Candidate cards, in insertion order
        now: Current time (injected)
        new_first: Offer never-reviewed cards before due reviews
        max_new: Maximum number of new cards to offer (None = no limit)

    Returns:
        DueCards sequence (new first, then most overdue first)
    """
    return DueCards(cards, now, new_first=new_first, max_new=max_new)


def end_of_day(now: datetime) -> datetime:
    """Last representable instant of `now`'s calendar day, in `now`'s timezone."""
    now = as_utc(now)
    return datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)


def due_today(
    cards: Iterable[CardState],
    now: datetime,
    new_first: bool = True,
    max_new: Optional[int] = None
) -> DueCards:
    """
    Get every card that becomes due at any point during today.

    Same ordering as due_cards(), with the end of the current day as cutoff,
    so a daily session also includes cards due later this evening. The day
    is taken in `now`'s timezone, so pass the learner's local time.
    """
    return DueCards(cards, end_of_day(now), new_first=new_first, max_new=max_new)


def _due_key(card: CardState) -> datetime:
    if card.next_review_date is None:
        return _OVERDUE
    return as_utc(card.next_review_date)

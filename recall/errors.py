"""
Exceptions raised by the review engine.

Every error is scoped to a single review submission; none of them is fatal
to the process.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review engine errors."""


class InvalidInput(ReviewError, ValueError):
    """The classifier received a response tag it does not recognize."""


class InvalidState(ReviewError, ValueError):
    """A card state or quality value violates the scheduler's invariants."""


class Conflict(ReviewError):
    """A card was written concurrently; the save was based on a stale read."""

    def __init__(self, card_id: str, expected_version: int, actual_version=None):
        self.card_id = card_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Card {card_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )


class CardNotFound(ReviewError, LookupError):
    """No card with this id exists for the requesting user."""

"""
Pydantic models for authored cards and the card view handed to the UI.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field, field_validator

from recall.sm2.constants import DEFAULT_TOPIC

if TYPE_CHECKING:
    from recall.sm2.card_state import CardState


class CardCreate(BaseModel):
    """A new card as authored by the user (or generated for them)."""
    front: str = Field(..., min_length=1, description="Prompt or term")
    back: str = Field(..., min_length=1, description="Answer or definition")
    topic_slug: str = Field(default=DEFAULT_TOPIC, description="Topic the card belongs to")

    @field_validator("front", "back")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("topic_slug")
    @classmethod
    def _slugify(cls, value: str) -> str:
        # "Linear Algebra" -> "linear-algebra"
        slug = "-".join(value.strip().lower().split())
        return slug or DEFAULT_TOPIC


class CardView(BaseModel):
    """Read-only snapshot of a card's content and schedule."""
    id: Optional[str] = None
    front: str
    back: str
    topic_slug: str
    ease_factor: float
    interval: int
    repetitions: int
    next_review_date: Optional[datetime] = None
    last_review_date: Optional[datetime] = None
    is_new: bool

    @classmethod
    def from_state(cls, card: CardState) -> "CardView":
        return cls(
            id=card.card_id,
            front=card.front,
            back=card.back,
            topic_slug=card.topic_slug,
            ease_factor=card.ease_factor,
            interval=card.interval,
            repetitions=card.repetitions,
            next_review_date=card.next_review_date,
            last_review_date=card.last_review_date,
            is_new=card.is_new,
        )

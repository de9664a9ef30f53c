"""
Review Service - Main API for Review Management

Ties the classifier, scheduler and database together.

Main workflow:
1. User rates a card ("forgot" / "hard" / "good" / "easy")
2. Response is classified into a quality (rejected if unknown)
3. Card is loaded, rescheduled and saved
4. If the save hit a concurrent write, the whole submission is redone
5. Review event is logged
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union

from recall import config, schemas
from recall.errors import CardNotFound, Conflict
from recall.sm2 import classifier, database, scheduler, selection
from recall.sm2.card_state import CardState
from recall.sm2.constants import Response

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


@dataclass
class ReviewQueue:
    """Cards a user should review today, plus counts for the dashboard."""
    cards: list[CardState] = field(default_factory=list)
    due_count: int = 0
    total_count: int = 0

    def as_payload(self) -> dict:
        """Plain-dict form for the presentation layer."""
        return {
            "cards": [schemas.CardView.from_state(card).model_dump() for card in self.cards],
            "due_count": self.due_count,
            "total_count": self.total_count,
        }


def submit_review(
    card_id: str,
    user_id: str,
    response: Union[Response, str],
    now: Optional[datetime] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> CardState:
    """
    Record a review and reschedule the card.

    This is the main entry point for the review system.

    Scheduling is a pure function of the loaded state, so on Conflict the
    card is simply re-fetched and the review recomputed.

    Args:
        card_id: Card being reviewed
        user_id: Reviewing user (must own the card)
        response: Learner response (FORGOT, HARD, GOOD, EASY or its string value)
        now: Review timestamp (defaults to now)
        max_attempts: Load/schedule/save attempts before giving up on conflicts

    Returns:
        Saved CardState

    Raises:
        InvalidInput: unknown response (raised before any database access)
        InvalidState: stored card state is corrupted
        CardNotFound: card missing or owned by another user
        Conflict: card kept changing underneath us for max_attempts tries
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    # Validate up front so bad requests never touch the database
    parsed = classifier.parse_response(response)

    if now is None:
        now = datetime.now(timezone.utc)

    max_interval = config.get_max_interval()

    attempt = 0
    while True:
        attempt += 1
        card = database.load_card(card_id)
        if card.user_id != user_id:
            raise CardNotFound(f"Card {card_id} not found")

        updated, event_data = scheduler.process_review(
            card, parsed, timestamp=now, max_interval=max_interval
        )

        try:
            saved = database.save_card(card_id, updated)
        except Conflict:
            if attempt >= max_attempts:
                logger.error(
                    "Giving up on review of card %s after %d conflicting attempts",
                    card_id, attempt
                )
                raise
            logger.warning(
                "Concurrent update on card %s (attempt %d/%d), retrying",
                card_id, attempt, max_attempts
            )
            continue

        database.log_review_event(event_data)
        logger.info(
            "Reviewed card %s: %s (q=%d) -> interval %d, ease %.2f",
            card_id, parsed.value, event_data['quality'], saved.interval, saved.ease_factor
        )
        return saved


def get_review_queue(user_id: str, now: Optional[datetime] = None) -> ReviewQueue:
    """
    Build today's review queue for a user.

    "Today" ends at midnight in the timezone of `now`. Pass `now` in the
    learner's local timezone; the default is the current UTC time, which
    cuts a learner west of UTC off before their evening.

    Args:
        user_id: User identifier
        now: Current time, in the learner's timezone (defaults to UTC now)

    Returns:
        ReviewQueue with cards due by the end of today (new cards ordered
        according to SRS_NEW_FIRST, limited by SRS_MAX_NEW_CARDS)
    """
    if now is None:
        now = datetime.now(timezone.utc)

    cards = database.list_cards_for_user(user_id)
    due = selection.due_today(
        cards,
        now,
        new_first=config.get_new_cards_first(),
        max_new=config.get_max_new_cards()
    )
    due_list = list(due)

    return ReviewQueue(cards=due_list, due_count=len(due_list), total_count=len(cards))

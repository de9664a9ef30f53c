"""
SM-2 - Spaced repetition scheduler

Main API for the review system.

This package implements the classic SM-2 schedule:
- Quality 0-5 per review, derived from the learner's response
- Fixed 1-day and 6-day steps, then multiplicative interval growth
- Ease factor updated after every review, floored at 1.3
- Any failure resets the card to a 1-day interval

Quick start:
    from recall import sm2

    # Initialize database
    sm2.init_db()

    # Process a review (algorithm only, no DB calls)
    card, event_data = sm2.process_review(card, sm2.Response.GOOD, now)

    # Get due cards (pure, over cards you already loaded)
    for card in sm2.due_cards(cards, now):
        ...

    # Full round trip through the database
    sm2.submit_review(card_id, user_id, "good")
"""

# Core algorithm (pure)
from recall.sm2.classifier import classify, is_success, parse_response
from recall.sm2.scheduler import process_review, schedule
from recall.sm2.selection import DueCards, due_cards, due_today, end_of_day, is_due

# Card state
from recall.sm2.card_state import CardState, new_card, validate_card

# Database API
from recall.sm2.database import (
    init_db,
    reset_db,
    create_card,
    load_card,
    save_card,
    list_cards_for_user,
    count_cards,
    delete_card,
    log_review_event,
    get_recent_events,
    count_reviews_since
)

# Review workflow
from recall.sm2.review_service import ReviewQueue, get_review_queue, submit_review

# Constants and parameters
from recall.sm2.constants import (
    Response,
    QUALITY_BY_RESPONSE,
    SUCCESS_THRESHOLD,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    FIRST_INTERVAL,
    SECOND_INTERVAL
)


__all__ = [
    # Core algorithm
    "classify",
    "is_success",
    "parse_response",
    "schedule",
    "process_review",
    "DueCards",
    "due_cards",
    "due_today",
    "end_of_day",
    "is_due",

    # Card state
    "CardState",
    "new_card",
    "validate_card",

    # Database operations
    "init_db",
    "reset_db",
    "create_card",
    "load_card",
    "save_card",
    "list_cards_for_user",
    "count_cards",
    "delete_card",
    "log_review_event",
    "get_recent_events",
    "count_reviews_since",

    # Review workflow
    "ReviewQueue",
    "get_review_queue",
    "submit_review",

    # Enums
    "Response",

    # Parameters
    "QUALITY_BY_RESPONSE",
    "SUCCESS_THRESHOLD",
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "FIRST_INTERVAL",
    "SECOND_INTERVAL",
]

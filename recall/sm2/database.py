"""
Database - Review Card I/O Operations

Handles all database operations for review cards and review events.
Uses SQLAlchemy ORM; any backend SQLAlchemy supports works (Postgres in
production, SQLite for tests and local use).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.

Concurrent reviews of the same card are detected with an optimistic version
column: saving a state computed from a stale read raises Conflict.
"""

from __future__ import annotations
import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import create_engine, func, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError

from recall import config
from recall.errors import CardNotFound, Conflict
from recall.sm2.card_state import CardState, as_utc
from recall.sm2.constants import DEFAULT_EASE_FACTOR
from recall.sm2.models import Base, ReviewCard as ReviewCardModel, ReviewEvent as ReviewEventModel

if TYPE_CHECKING:
    # recall.schemas imports recall.sm2, so only the annotation may refer to it
    from recall.schemas import CardCreate

logger = logging.getLogger(__name__)

# One engine (and its connection pool) per database URL
_engines: dict[str, Engine] = {}
_session_factories: dict[str, sessionmaker] = {}


def get_engine() -> Engine:
    """
    Get SQLAlchemy engine for the configured database.

    Engines are cached per URL so the connection pool is reused across calls.

    Returns:
        SQLAlchemy Engine instance
    """
    db_url = config.get_database_url()
    engine = _engines.get(db_url)
    if engine is None:
        if db_url.startswith("sqlite"):
            engine = create_engine(db_url, echo=False)
        else:
            engine = create_engine(
                db_url,
                pool_size=5,           # Keep 5 connections open
                max_overflow=10,       # Allow up to 10 extra connections
                pool_pre_ping=True,    # Verify connections before use
                echo=False
            )
        _engines[db_url] = engine
        _session_factories[db_url] = sessionmaker(bind=engine, expire_on_commit=False)
    return engine


def get_session() -> Session:
    """
    Get a SQLAlchemy session for database operations.

    Returns:
        SQLAlchemy Session instance
    """
    get_engine()
    return _session_factories[config.get_database_url()]()


def dispose_engines() -> None:
    """Close all pooled connections and forget cached engines."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()
    _session_factories.clear()


def init_db():
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates tables if they don't exist.
    """
    engine = get_engine()

    existing_tables = set(inspect(engine).get_table_names())
    if {'review_cards', 'review_events'} <= existing_tables:
        return

    Base.metadata.create_all(engine)
    logger.info("Created review tables")


def reset_db():
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All cards and review history will be lost!
    """
    engine = get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("All review tables dropped")

    # Recreate tables
    init_db()


# ---- Cards ----

def create_card(
    user_id: str,
    card: CardCreate,
    now: Optional[datetime] = None
) -> CardState:
    """
    Store a freshly authored card with default scheduling state.

    Args:
        user_id: Owning learner
        card: Validated card content
        now: Creation timestamp (defaults to now)

    Returns:
        CardState of the new card (version 1)
    """
    created_at = _utc(now) if now is not None else datetime.now(timezone.utc)

    session = get_session()
    try:
        db_card = ReviewCardModel(
            id=str(uuid.uuid4()),
            user_id=user_id,
            front=card.front,
            back=card.back,
            topic_slug=card.topic_slug,
            ease_factor=DEFAULT_EASE_FACTOR,
            interval=0,
            repetitions=0,
            next_review_date=None,
            last_review_date=None,
            created_at=created_at
        )
        session.add(db_card)
        session.commit()
        logger.debug("Created card %s for user %s", db_card.id, user_id)
        return _to_state(db_card)
    finally:
        session.close()


def load_card(card_id: str) -> CardState:
    """
    Load card state from database.

    Args:
        card_id: Card identifier

    Returns:
        CardState

    Raises:
        CardNotFound: if no card has this id
    """
    session = get_session()
    try:
        db_card = session.get(ReviewCardModel, card_id)
        if db_card is None:
            raise CardNotFound(f"Card {card_id} not found")
        return _to_state(db_card)
    finally:
        session.close()


def save_card(card_id: str, card: CardState) -> CardState:
    """
    Save updated scheduling state for a card.

    The update only applies if the stored version still equals card.version,
    i.e. nobody else saved the card since it was loaded.

    Args:
        card_id: Card identifier
        card: New state, carrying the version it was computed from

    Returns:
        Saved CardState with the bumped version

    Raises:
        CardNotFound: if the card no longer exists
        Conflict: if the card was saved concurrently
    """
    session = get_session()
    try:
        db_card = session.get(ReviewCardModel, card_id)
        if db_card is None:
            raise CardNotFound(f"Card {card_id} not found")
        if db_card.version != card.version:
            raise Conflict(card_id, card.version, db_card.version)

        db_card.ease_factor = card.ease_factor
        db_card.interval = card.interval
        db_card.repetitions = card.repetitions
        db_card.next_review_date = _utc(card.next_review_date)
        db_card.last_review_date = _utc(card.last_review_date)

        try:
            session.commit()
        except StaleDataError:
            # Row changed between our read and our UPDATE
            session.rollback()
            raise Conflict(card_id, card.version) from None

        return _to_state(db_card)
    finally:
        session.close()


def list_cards_for_user(user_id: str) -> list[CardState]:
    """
    Get all cards owned by a user, oldest first.

    Args:
        user_id: User identifier

    Returns:
        List of CardState in creation order
    """
    session = get_session()
    try:
        db_cards = session.query(ReviewCardModel).filter(
            ReviewCardModel.user_id == user_id
        ).order_by(
            ReviewCardModel.created_at.asc(),
            ReviewCardModel.id.asc()
        ).all()
        return [_to_state(db_card) for db_card in db_cards]
    finally:
        session.close()


def count_cards(user_id: str) -> int:
    """Count all cards owned by a user."""
    session = get_session()
    try:
        return session.query(func.count(ReviewCardModel.id)).filter(
            ReviewCardModel.user_id == user_id
        ).scalar() or 0
    finally:
        session.close()


def delete_card(card_id: str, user_id: str) -> None:
    """
    Delete a card and its review history.

    Args:
        card_id: Card identifier
        user_id: Requesting user (must own the card)

    Raises:
        CardNotFound: if the card does not exist or belongs to another user
    """
    session = get_session()
    try:
        db_card = session.get(ReviewCardModel, card_id)
        if db_card is None or db_card.user_id != user_id:
            raise CardNotFound(f"Card {card_id} not found")

        session.query(ReviewEventModel).filter(
            ReviewEventModel.card_id == card_id
        ).delete(synchronize_session=False)
        session.delete(db_card)
        session.commit()
        logger.info("Deleted card %s for user %s", card_id, user_id)
    finally:
        session.close()


# ---- Review events ----

def log_review_event(event: dict):
    """
    Append one review event to the log.

    Args:
        event: Event dict as built by scheduler.process_review(), with keys:
            - card_id, user_id, timestamp, response, quality
            - ease_factor_before, interval_before, repetitions_before
            - ease_factor_after, interval_after, repetitions_after
            - next_review_date
    """
    session = get_session()
    try:
        review_event = ReviewEventModel(
            user_id=event['user_id'],
            card_id=event['card_id'],
            timestamp=_utc(event['timestamp']),
            response=event['response'],
            quality=int(event['quality']),
            ease_factor_before=event['ease_factor_before'],
            interval_before=event['interval_before'],
            repetitions_before=event['repetitions_before'],
            ease_factor_after=event['ease_factor_after'],
            interval_after=event['interval_after'],
            repetitions_after=event['repetitions_after'],
            next_review_date=_utc(event['next_review_date'])
        )
        session.add(review_event)
        session.commit()
    finally:
        session.close()


def get_recent_events(user_id: str, limit: int = 10) -> list[dict]:
    """
    Get recent review events.

    Args:
        user_id: User identifier for scoping review data
        limit: Maximum number of events to return

    Returns:
        List of recent events (newest first)
    """
    session = get_session()
    try:
        events = session.query(ReviewEventModel).filter(
            ReviewEventModel.user_id == user_id
        ).order_by(
            ReviewEventModel.timestamp.desc(),
            ReviewEventModel.id.desc()
        ).limit(limit).all()

        return [
            {
                "id": event.id,
                "user_id": event.user_id,
                "card_id": event.card_id,
                "timestamp": as_utc(event.timestamp),
                "response": event.response,
                "quality": event.quality,
                "ease_factor_before": event.ease_factor_before,
                "interval_before": event.interval_before,
                "repetitions_before": event.repetitions_before,
                "ease_factor_after": event.ease_factor_after,
                "interval_after": event.interval_after,
                "repetitions_after": event.repetitions_after,
                "next_review_date": as_utc(event.next_review_date),
            }
            for event in events
        ]
    finally:
        session.close()


def count_reviews_since(user_id: str, since: datetime) -> int:
    """
    Count reviews a user submitted at or after `since`.

    Used for daily activity stats ("cards reviewed today").
    """
    session = get_session()
    try:
        return session.query(func.count(ReviewEventModel.id)).filter(
            ReviewEventModel.user_id == user_id,
            ReviewEventModel.timestamp >= _utc(since)
        ).scalar() or 0
    finally:
        session.close()


# ---- Helpers ----

def _utc(timestamp: Optional[datetime]) -> Optional[datetime]:
    # Everything is stored in UTC so string-backed DateTime columns compare correctly
    if timestamp is None:
        return None
    return as_utc(timestamp).astimezone(timezone.utc)


def _to_state(db_card: ReviewCardModel) -> CardState:
    return CardState(
        card_id=db_card.id,
        user_id=db_card.user_id,
        front=db_card.front,
        back=db_card.back,
        topic_slug=db_card.topic_slug,
        ease_factor=db_card.ease_factor,
        interval=db_card.interval,
        repetitions=db_card.repetitions,
        next_review_date=as_utc(db_card.next_review_date) if db_card.next_review_date else None,
        last_review_date=as_utc(db_card.last_review_date) if db_card.last_review_date else None,
        created_at=as_utc(db_card.created_at) if db_card.created_at else None,
        version=db_card.version
    )

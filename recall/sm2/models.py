"""
SQLAlchemy ORM Models for the Review Database

Defines ReviewCard and ReviewEvent models for persistence.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewCard(Base):
    """
    Persistent SM-2 state for a single card owned by one user.

    The version column is SQLAlchemy's optimistic lock: an UPDATE based on a
    stale read matches no row and raises StaleDataError.
    """
    __tablename__ = 'review_cards'

    id = Column(String(36), primary_key=True)
    user_id = Column(String(255), nullable=False)

    # Content (opaque to the scheduler)
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    topic_slug = Column(String(255), nullable=False, default='general')

    # SM-2 parameters
    ease_factor = Column(Float, nullable=False, default=2.5)
    interval = Column(Integer, nullable=False, default=0)  # days
    repetitions = Column(Integer, nullable=False, default=0)

    # Review tracking
    next_review_date = Column(DateTime(timezone=True), nullable=True)
    last_review_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}

    __table_args__ = (
        Index('idx_review_cards_user_due', 'user_id', 'next_review_date'),
    )

    def __repr__(self):
        return f"<ReviewCard({self.id}, user={self.user_id}, v{self.version})>"


class ReviewEvent(Base):
    """
    Log entry for a single review of a card.

    Captures the SM-2 state before and after the review.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False)
    card_id = Column(String(36), nullable=False)

    # Timing and feedback
    timestamp = Column(DateTime(timezone=True), nullable=False)
    response = Column(String(16), nullable=False)  # forgot / hard / good / easy
    quality = Column(Integer, nullable=False)  # 0-5

    # State before review
    ease_factor_before = Column(Float, nullable=False)
    interval_before = Column(Integer, nullable=False)
    repetitions_before = Column(Integer, nullable=False)

    # State after review
    ease_factor_after = Column(Float, nullable=False)
    interval_after = Column(Integer, nullable=False)
    repetitions_after = Column(Integer, nullable=False)
    next_review_date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_review_events_user_time', 'user_id', 'timestamp'),
    )

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, card={self.card_id}, quality={self.quality})>"

"""
SQLAlchemy ORM Models

Defines the review-card, review-event, loan and loan-notification tables
used for Postgres persistence.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewCardRow(Base):
    """
    Persistent SM-2 state for a single flashcard, scoped to a user.
    """
    __tablename__ = 'review_cards'

    # Primary key: composite of user_id and card_id
    user_id = Column(String(255), primary_key=True, nullable=False)
    card_id = Column(String(255), primary_key=True, nullable=False)

    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)

    # Scheduling state
    interval = Column(Integer, nullable=False, default=0)
    repetitions = Column(Integer, nullable=False, default=0)
    ease_factor = Column(Float, nullable=False, default=2.5)
    next_review = Column(DateTime(timezone=True), nullable=False)
    last_grade = Column(String(20), nullable=True)  # "hard", "medium", "easy"

    def __repr__(self):
        return f"<ReviewCardRow({self.user_id}, {self.card_id})>"


class ReviewEventRow(Base):
    """
    Log entry for a single review of a card.

    Captures scheduling state before/after the review.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False)
    card_id = Column(String(255), nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    grade = Column(String(20), nullable=False)

    # State before review
    interval_before = Column(Integer, nullable=False)
    repetitions_before = Column(Integer, nullable=False)
    ease_factor_before = Column(Float, nullable=False)

    # State after review
    interval_after = Column(Integer, nullable=False)
    repetitions_after = Column(Integer, nullable=False)
    ease_factor_after = Column(Float, nullable=False)
    next_review = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ReviewEventRow(id={self.id}, {self.card_id}, grade={self.grade})>"


class LoanRow(Base):
    """
    A borrowed library item.

    status is 'returned' iff returned_at is set.
    """
    __tablename__ = 'loans'

    id = Column(String(255), primary_key=True)
    item_id = Column(String(255), nullable=False)
    borrower_id = Column(String(255), nullable=False)

    # Denormalised item details for notification text
    item_title = Column(String(500), nullable=True)
    item_author = Column(String(500), nullable=True)

    issued_at = Column(Date, nullable=False)
    due_at = Column(Date, nullable=False)
    returned_at = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default='issued')  # issued, returned, overdue

    def __repr__(self):
        return f"<LoanRow({self.id}, status={self.status})>"


class LoanNotificationRow(Base):
    """
    A reminder sent to a borrower about a loan.

    The (loan_id, kind) uniqueness constraint makes a racing duplicate
    insert fail instead of creating a second notification.
    """
    __tablename__ = 'loan_notifications'
    __table_args__ = (
        UniqueConstraint('loan_id', 'kind', name='uq_loan_notification_kind'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_id = Column(String(255), nullable=False)
    borrower_id = Column(String(255), nullable=False)
    kind = Column(String(20), nullable=False)  # due_soon, overdue

    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<LoanNotificationRow({self.loan_id}, {self.kind})>"

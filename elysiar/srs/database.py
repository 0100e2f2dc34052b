"""
Database - Review card I/O Operations

Handles all database operations for review cards and review events.

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.engine import Engine

from elysiar.database import get_default_user_id, get_session
from elysiar.errors import DataIntegrityError
from elysiar.models import ReviewCardRow, ReviewEventRow
from elysiar.srs.constants import ReviewGrade
from elysiar.srs.review_state import ReviewCard
from elysiar.srs.scheduler import select_due_cards


def _to_utc(moment: datetime) -> datetime:
    """Normalise a timestamp for storage; naive values are rejected."""
    if moment.tzinfo is None:
        raise DataIntegrityError(f"Naive timestamp cannot be stored: {moment.isoformat()}")
    return moment.astimezone(timezone.utc)


def _from_storage(moment: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _row_to_card(row: ReviewCardRow) -> ReviewCard:
    return ReviewCard(
        id=row.card_id,
        front=row.front,
        back=row.back,
        interval=row.interval,
        repetitions=row.repetitions,
        ease_factor=row.ease_factor,
        next_review=_from_storage(row.next_review),
        last_grade=ReviewGrade(row.last_grade) if row.last_grade else None,
    )


def _copy_card_to_row(card: ReviewCard, row: ReviewCardRow):
    row.front = card.front
    row.back = card.back
    row.interval = card.interval
    row.repetitions = card.repetitions
    row.ease_factor = card.ease_factor
    row.next_review = _to_utc(card.next_review)
    row.last_grade = card.last_grade.value if card.last_grade else None


def load_cards(
    user_id: Optional[str] = None,
    engine: Optional[Engine] = None
) -> list[ReviewCard]:
    """
    Load all review cards for a user.

    Args:
        user_id: User identifier (defaults to DEFAULT_USER_ID)
        engine: Optional engine override

    Returns:
        List of ReviewCard, ordered by card id
    """
    user_id = user_id or get_default_user_id()
    session = get_session(engine)
    try:
        rows = session.query(ReviewCardRow).filter(
            ReviewCardRow.user_id == user_id
        ).order_by(ReviewCardRow.card_id).all()
        return [_row_to_card(row) for row in rows]
    finally:
        session.close()


def save_card(
    card: ReviewCard,
    user_id: Optional[str] = None,
    engine: Optional[Engine] = None
):
    """Save a single card (insert or update)."""
    batch_save_cards([card], user_id=user_id, engine=engine)


def batch_save_cards(
    cards: list[ReviewCard],
    user_id: Optional[str] = None,
    engine: Optional[Engine] = None
):
    """
    Save multiple cards in a single database transaction.

    Args:
        cards: List of ReviewCard objects to save
        user_id: Owner of the cards
        engine: Optional engine override
    """
    if not cards:
        return

    user_id = user_id or get_default_user_id()
    session = get_session(engine)
    try:
        for card in cards:
            row = session.get(ReviewCardRow, (user_id, card.id))
            if row is None:
                row = ReviewCardRow(user_id=user_id, card_id=card.id)
                session.add(row)
            _copy_card_to_row(card, row)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def batch_log_review_events(
    events: list[dict],
    user_id: Optional[str] = None,
    engine: Optional[Engine] = None
):
    """
    Persist review events produced by scheduler.process_review().

    Args:
        events: List of event_data dicts
        user_id: Owner of the reviewed cards
        engine: Optional engine override
    """
    if not events:
        return

    user_id = user_id or get_default_user_id()
    session = get_session(engine)
    try:
        for event in events:
            session.add(ReviewEventRow(
                user_id=user_id,
                card_id=event['card_id'],
                timestamp=_to_utc(event['timestamp']),
                grade=event['grade'],
                interval_before=event['interval_before'],
                repetitions_before=event['repetitions_before'],
                ease_factor_before=event['ease_factor_before'],
                interval_after=event['interval_after'],
                repetitions_after=event['repetitions_after'],
                ease_factor_after=event['ease_factor_after'],
                next_review=_to_utc(event['next_review']),
            ))
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_recent_events(
    limit: int = 10,
    user_id: Optional[str] = None,
    engine: Optional[Engine] = None
) -> list[dict]:
    """
    Get recent review events (newest first).
    """
    user_id = user_id or get_default_user_id()
    session = get_session(engine)
    try:
        rows = session.query(ReviewEventRow).filter(
            ReviewEventRow.user_id == user_id
        ).order_by(ReviewEventRow.timestamp.desc(), ReviewEventRow.id.desc()).limit(limit).all()
        return [
            {
                'card_id': row.card_id,
                'timestamp': _from_storage(row.timestamp),
                'grade': row.grade,
                'interval_after': row.interval_after,
                'repetitions_after': row.repetitions_after,
                'ease_factor_after': row.ease_factor_after,
            }
            for row in rows
        ]
    finally:
        session.close()


def get_due_cards(
    now: datetime,
    user_id: Optional[str] = None,
    engine: Optional[Engine] = None
) -> list[ReviewCard]:
    """
    Get a user's cards due at `now`, earliest due first.

    A naive `now` is read as local wall-clock time.
    """
    if now.tzinfo is None:
        now = now.astimezone()
    return select_due_cards(load_cards(user_id=user_id, engine=engine), now)

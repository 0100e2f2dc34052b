"""
Database - Loan I/O Operations

Reads loan / notification snapshots and applies the transitions and
reminder requests derived by the due_status module.

This module handles ONLY database I/O.
"""

from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from elysiar.database import get_session
from elysiar.errors import DataIntegrityError
from elysiar.library.constants import LoanStatus, NotificationKind
from elysiar.library.loans import (
    BorrowerNotification,
    Loan,
    LoanNotification,
    NotificationRequest,
    StatusTransition,
)
from elysiar.models import LoanNotificationRow, LoanRow

logger = logging.getLogger(__name__)


def _row_to_loan(row: LoanRow) -> Loan:
    try:
        status = LoanStatus(row.status)
    except ValueError:
        raise DataIntegrityError(f"Loan {row.id} has unknown status {row.status!r}") from None
    return Loan(
        id=row.id,
        item_id=row.item_id,
        borrower_id=row.borrower_id,
        issued_at=row.issued_at,
        due_at=row.due_at,
        returned_at=row.returned_at,
        status=status,
        item_title=row.item_title,
        item_author=row.item_author,
    )


def _stored_utc(moment: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _row_kind(row: LoanNotificationRow) -> NotificationKind:
    try:
        return NotificationKind(row.kind)
    except ValueError:
        raise DataIntegrityError(f"Notification {row.id} has unknown kind {row.kind!r}") from None


def _row_to_notification(row: LoanNotificationRow) -> LoanNotification:
    return LoanNotification(
        loan_id=row.loan_id,
        kind=_row_kind(row),
        created_at=_stored_utc(row.created_at),
    )


def _row_to_borrower_notification(row: LoanNotificationRow) -> BorrowerNotification:
    return BorrowerNotification(
        id=row.id,
        loan_id=row.loan_id,
        borrower_id=row.borrower_id,
        kind=_row_kind(row),
        title=row.title,
        message=row.message,
        is_read=bool(row.is_read),
        created_at=_stored_utc(row.created_at),
    )


def save_loan(loan: Loan, engine: Optional[Engine] = None):
    """Insert or update a loan."""
    session = get_session(engine)
    try:
        row = session.get(LoanRow, loan.id)
        if row is None:
            row = LoanRow(id=loan.id)
            session.add(row)
        row.item_id = loan.item_id
        row.borrower_id = loan.borrower_id
        row.item_title = loan.item_title
        row.item_author = loan.item_author
        row.issued_at = loan.issued_at
        row.due_at = loan.due_at
        row.returned_at = loan.returned_at
        row.status = loan.status.value
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def load_loan(loan_id: str, engine: Optional[Engine] = None) -> Optional[Loan]:
    """Load a single loan, or None if it does not exist."""
    session = get_session(engine)
    try:
        row = session.get(LoanRow, loan_id)
        return _row_to_loan(row) if row is not None else None
    finally:
        session.close()


def load_open_loans(engine: Optional[Engine] = None) -> list[Loan]:
    """
    Load all loans that have not been returned.

    Returns:
        List of Loan ordered by due date (then id)
    """
    session = get_session(engine)
    try:
        rows = session.query(LoanRow).filter(
            LoanRow.returned_at.is_(None)
        ).order_by(LoanRow.due_at, LoanRow.id).all()
        return [_row_to_loan(row) for row in rows]
    finally:
        session.close()


def load_notifications(
    loan_ids: Optional[Iterable[str]] = None,
    engine: Optional[Engine] = None
) -> list[LoanNotification]:
    """
    Load persisted reminders, optionally limited to some loans.
    """
    session = get_session(engine)
    try:
        query = session.query(LoanNotificationRow)
        if loan_ids is not None:
            query = query.filter(LoanNotificationRow.loan_id.in_(list(loan_ids)))
        return [_row_to_notification(row) for row in query.order_by(LoanNotificationRow.id).all()]
    finally:
        session.close()


def apply_status_transitions(
    transitions: list[StatusTransition],
    engine: Optional[Engine] = None
) -> int:
    """
    Apply status transitions in one transaction.

    Loans returned in the meantime are left untouched.

    Returns:
        Number of loans updated
    """
    if not transitions:
        return 0

    session = get_session(engine)
    try:
        updated = 0
        for transition in transitions:
            updated += session.query(LoanRow).filter(
                LoanRow.id == transition.loan_id,
                LoanRow.returned_at.is_(None)
            ).update({LoanRow.status: transition.new_status.value}, synchronize_session=False)
        session.commit()
        return updated
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def insert_notification_requests(
    requests: list[NotificationRequest],
    created_at: datetime,
    engine: Optional[Engine] = None
) -> Tuple[int, int]:
    """
    Insert reminder requests, one transaction each.

    A request that collides with the (loan_id, kind) unique constraint was
    already sent by a concurrent run; it is skipped, not raised.

    Returns:
        (created, skipped_duplicates)
    """
    created = 0
    skipped = 0
    session = get_session(engine)
    try:
        for request in requests:
            session.add(LoanNotificationRow(
                loan_id=request.loan_id,
                borrower_id=request.borrower_id,
                kind=request.kind.value,
                title=request.title,
                message=request.message,
                is_read=False,
                created_at=created_at,
            ))
            try:
                session.commit()
                created += 1
            except IntegrityError:
                session.rollback()
                skipped += 1
                logger.info(
                    "Skipped duplicate %s notification for loan %s",
                    request.kind.value, request.loan_id
                )
        return created, skipped
    finally:
        session.close()


def mark_returned(
    loan_id: str,
    returned_at: date,
    engine: Optional[Engine] = None
) -> Loan:
    """
    Record the return of a loan (issued | overdue -> returned).

    Returned is terminal: returning an already-returned loan leaves its
    returned_at unchanged.

    Raises:
        KeyError: if the loan does not exist
    """
    session = get_session(engine)
    try:
        row = session.get(LoanRow, loan_id)
        if row is None:
            raise KeyError(loan_id)
        if row.returned_at is not None:
            return _row_to_loan(row)
        row.returned_at = returned_at
        row.status = LoanStatus.RETURNED.value
        session.commit()
        return _row_to_loan(row)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---- Borrower views ----

def load_loans_for_borrower(
    borrower_id: str,
    engine: Optional[Engine] = None
) -> list[Loan]:
    """
    All loans of one borrower, returned ones included, newest issue first.
    """
    session = get_session(engine)
    try:
        rows = session.query(LoanRow).filter(
            LoanRow.borrower_id == borrower_id
        ).order_by(LoanRow.issued_at.desc(), LoanRow.id).all()
        return [_row_to_loan(row) for row in rows]
    finally:
        session.close()


def load_notifications_for_borrower(
    borrower_id: str,
    engine: Optional[Engine] = None
) -> list[BorrowerNotification]:
    """
    A borrower's reminders, newest first.
    """
    session = get_session(engine)
    try:
        rows = session.query(LoanNotificationRow).filter(
            LoanNotificationRow.borrower_id == borrower_id
        ).order_by(LoanNotificationRow.created_at.desc(), LoanNotificationRow.id.desc()).all()
        return [_row_to_borrower_notification(row) for row in rows]
    finally:
        session.close()


def unread_count(borrower_id: str, engine: Optional[Engine] = None) -> int:
    """Number of unread reminders for a borrower."""
    session = get_session(engine)
    try:
        return session.query(func.count(LoanNotificationRow.id)).filter(
            LoanNotificationRow.borrower_id == borrower_id,
            LoanNotificationRow.is_read.is_(False)
        ).scalar() or 0
    finally:
        session.close()


def mark_read(notification_id: int, engine: Optional[Engine] = None) -> BorrowerNotification:
    """
    Mark a single reminder as read.

    Raises:
        KeyError: if the notification does not exist
    """
    session = get_session(engine)
    try:
        row = session.get(LoanNotificationRow, notification_id)
        if row is None:
            raise KeyError(notification_id)
        row.is_read = True
        session.commit()
        return _row_to_borrower_notification(row)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def mark_all_read(borrower_id: str, engine: Optional[Engine] = None) -> int:
    """
    Mark every unread reminder of a borrower as read.

    Returns:
        Number of reminders updated
    """
    session = get_session(engine)
    try:
        updated = session.query(LoanNotificationRow).filter(
            LoanNotificationRow.borrower_id == borrower_id,
            LoanNotificationRow.is_read.is_(False)
        ).update({LoanNotificationRow.is_read: True}, synchronize_session=False)
        session.commit()
        return updated
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

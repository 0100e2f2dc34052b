"""
Due Status - Loan classification and reminder derivation

Pure logic (no database calls). Given a snapshot of loans and the
notifications already sent, decide which loans must be marked overdue and
which reminders still need to go out.

Running derive_notifications again after its output has been persisted
produces no new notification requests.
"""

from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from elysiar.errors import DataIntegrityError
from elysiar.library.constants import (
    DUE_SOON_TITLE,
    DUE_SOON_WINDOW_DAYS,
    OVERDUE_TITLE,
    DueStatus,
    LoanStatus,
    NotificationKind,
)
from elysiar.library.loans import (
    DueStatusResult,
    Loan,
    NotificationRequest,
    StatusTransition,
)


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise DataIntegrityError(f"Expected a date, got {value!r}")
    return value


def classify(loan: Loan, today: date) -> Optional[DueStatus]:
    """
    Classify an open loan against today.

    Returns:
        None for returned loans, otherwise OVERDUE (due_at < today),
        DUE_SOON (today <= due_at <= today + 3 days) or ON_TIME
    """
    if loan.returned_at is not None:
        return None

    today = _as_date(today)
    due_at = _as_date(loan.due_at)

    if due_at < today:
        return DueStatus.OVERDUE
    if due_at <= today + timedelta(days=DUE_SOON_WINDOW_DAYS):
        return DueStatus.DUE_SOON
    return DueStatus.ON_TIME


def days_until_due(loan: Loan, today: date) -> int:
    """Whole days until the due date, never less than 1 for display."""
    return max(1, (_as_date(loan.due_at) - _as_date(today)).days)


def _describe_item(loan: Loan) -> str:
    if loan.item_title and loan.item_author:
        return f'The book "{loan.item_title}" by {loan.item_author}'
    if loan.item_title:
        return f'The book "{loan.item_title}"'
    return "Your borrowed item"


def build_due_soon_request(loan: Loan, today: date) -> NotificationRequest:
    days = days_until_due(loan, today)
    plural = "s" if days > 1 else ""
    return NotificationRequest(
        loan_id=loan.id,
        borrower_id=loan.borrower_id,
        kind=NotificationKind.DUE_SOON,
        title=DUE_SOON_TITLE,
        message=(
            f"{_describe_item(loan)} is due in {days} day{plural}. "
            "Please plan to return it on time."
        ),
        days_until_due=days,
    )


def build_overdue_request(loan: Loan) -> NotificationRequest:
    return NotificationRequest(
        loan_id=loan.id,
        borrower_id=loan.borrower_id,
        kind=NotificationKind.OVERDUE,
        title=OVERDUE_TITLE,
        message=f"{_describe_item(loan)} is overdue. Please return it as soon as possible.",
    )


def derive_notifications(
    loans: Iterable[Loan],
    existing_notifications: Iterable,
    today: date
) -> DueStatusResult:
    """
    Derive status transitions and reminder requests for open loans.

    - OVERDUE: transition to overdue unless already stored as overdue,
      plus an overdue reminder unless one exists for the loan
    - DUE_SOON: a due-soon reminder unless one exists for the loan
    - ON_TIME / returned: nothing

    Args:
        loans: Loan snapshot
        existing_notifications: Already-persisted reminders; anything with
            loan_id and kind attributes (LoanNotification or
            NotificationRequest)
        today: Current date (injected)

    Returns:
        DueStatusResult with transitions and notifications
    """
    sent = {
        (notification.loan_id, NotificationKind(notification.kind))
        for notification in existing_notifications
    }
    result = DueStatusResult()
    transitioned = set()

    for loan in loans:
        status = classify(loan, today)

        if status == DueStatus.OVERDUE:
            if loan.status != LoanStatus.OVERDUE and loan.id not in transitioned:
                result.transitions.append(
                    StatusTransition(loan_id=loan.id, new_status=LoanStatus.OVERDUE)
                )
                transitioned.add(loan.id)
            key = (loan.id, NotificationKind.OVERDUE)
            if key not in sent:
                result.notifications.append(build_overdue_request(loan))
                sent.add(key)

        elif status == DueStatus.DUE_SOON:
            key = (loan.id, NotificationKind.DUE_SOON)
            if key not in sent:
                result.notifications.append(build_due_soon_request(loan, today))
                sent.add(key)

    return result

"""
Tests for loan due-status classification and reminder derivation.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from elysiar import library
from elysiar.errors import DataIntegrityError
from elysiar.library import (
    DueStatus,
    Loan,
    LoanNotification,
    LoanStatus,
    NotificationKind,
)


TODAY = date(2026, 10, 19)


def make_loan(loan_id="L1", due_in=10, status=LoanStatus.ISSUED, returned_at=None, **kwargs):
    return Loan(
        id=loan_id,
        item_id="book-1",
        borrower_id="student-1",
        issued_at=TODAY - timedelta(days=10),
        due_at=TODAY + timedelta(days=due_in),
        returned_at=returned_at,
        status=status,
        **kwargs
    )


# ---- classify ----

@pytest.mark.parametrize("due_in,expected", [
    (-2, DueStatus.OVERDUE),
    (-1, DueStatus.OVERDUE),
    (0, DueStatus.DUE_SOON),
    (1, DueStatus.DUE_SOON),
    (3, DueStatus.DUE_SOON),
    (4, DueStatus.ON_TIME),
    (30, DueStatus.ON_TIME),
])
def test_classify_boundaries(due_in, expected):
    assert library.classify(make_loan(due_in=due_in), TODAY) == expected


def test_classify_skips_returned_loans():
    loan = make_loan(due_in=-5, status=LoanStatus.RETURNED, returned_at=TODAY)
    assert library.classify(loan, TODAY) is None


def test_classify_accepts_datetime_today():
    now = datetime(2026, 10, 19, 23, 59, tzinfo=timezone.utc)
    assert library.classify(make_loan(due_in=0), now) == DueStatus.DUE_SOON


# ---- derive_notifications ----

def test_overdue_loan_emits_transition_and_notification():
    loan = make_loan(due_in=-2)
    result = library.derive_notifications([loan], [], TODAY)

    assert len(result.transitions) == 1
    assert result.transitions[0].loan_id == "L1"
    assert result.transitions[0].new_status == LoanStatus.OVERDUE

    assert len(result.notifications) == 1
    request = result.notifications[0]
    assert request.kind == NotificationKind.OVERDUE
    assert request.loan_id == "L1"
    assert request.borrower_id == "student-1"


def test_already_overdue_status_is_not_transitioned_again():
    loan = make_loan(due_in=-2, status=LoanStatus.OVERDUE)
    result = library.derive_notifications([loan], [], TODAY)
    assert result.transitions == []
    assert [n.kind for n in result.notifications] == [NotificationKind.OVERDUE]


def test_existing_overdue_notification_suppresses_request():
    loan = make_loan(due_in=-2, status=LoanStatus.OVERDUE)
    existing = [LoanNotification("L1", NotificationKind.OVERDUE, datetime(2026, 10, 18, tzinfo=timezone.utc))]
    result = library.derive_notifications([loan], existing, TODAY)
    assert result.is_empty


def test_due_soon_reminder_does_not_block_overdue_reminder():
    loan = make_loan(due_in=-1)
    existing = [LoanNotification("L1", NotificationKind.DUE_SOON, datetime(2026, 10, 16, tzinfo=timezone.utc))]
    result = library.derive_notifications([loan], existing, TODAY)
    assert [n.kind for n in result.notifications] == [NotificationKind.OVERDUE]


def test_due_soon_loan_emits_single_reminder():
    result = library.derive_notifications([make_loan(due_in=2)], [], TODAY)
    assert result.transitions == []
    assert len(result.notifications) == 1
    assert result.notifications[0].kind == NotificationKind.DUE_SOON
    assert result.notifications[0].days_until_due == 2


def test_on_time_and_returned_loans_produce_nothing():
    loans = [
        make_loan("L1", due_in=4),
        make_loan("L2", due_in=-3, status=LoanStatus.RETURNED, returned_at=TODAY - timedelta(days=1)),
    ]
    assert library.derive_notifications(loans, [], TODAY).is_empty


def test_derive_is_idempotent():
    loans = [
        make_loan("L1", due_in=-2),
        make_loan("L2", due_in=0),
        make_loan("L3", due_in=3),
        make_loan("L4", due_in=9),
    ]
    first = library.derive_notifications(loans, [], TODAY)
    assert len(first.notifications) == 3

    second = library.derive_notifications(loans, first.notifications, TODAY)
    assert second.notifications == []


def test_duplicate_loan_in_snapshot_is_emitted_once():
    loan = make_loan(due_in=-1)
    result = library.derive_notifications([loan, loan], [], TODAY)
    assert len(result.transitions) == 1
    assert len(result.notifications) == 1


# ---- message text ----

def test_due_soon_message_text():
    loan = make_loan(due_in=3, item_title="Dune", item_author="Frank Herbert")
    request = library.derive_notifications([loan], [], TODAY).notifications[0]
    assert request.title == "Book Due Soon"
    assert request.message == (
        'The book "Dune" by Frank Herbert is due in 3 days. Please plan to return it on time.'
    )


def test_due_today_displays_one_day():
    request = library.derive_notifications([make_loan(due_in=0)], [], TODAY).notifications[0]
    assert request.days_until_due == 1
    assert "is due in 1 day." in request.message


def test_overdue_message_text():
    loan = make_loan(due_in=-4, item_title="Dune")
    request = library.derive_notifications([loan], [], TODAY).notifications[0]
    assert request.title == "Book Overdue!"
    assert request.message == 'The book "Dune" is overdue. Please return it as soon as possible.'
    assert request.days_until_due is None


def test_message_without_item_details():
    request = library.derive_notifications([make_loan(due_in=1)], [], TODAY).notifications[0]
    assert request.message.startswith("Your borrowed item is due in 1 day.")


def test_classify_rejects_non_date_due_at():
    loan = Loan("L1", "book-1", "student-1", TODAY, "2026-10-22")
    with pytest.raises(DataIntegrityError):
        library.classify(loan, TODAY)

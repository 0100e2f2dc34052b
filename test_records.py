"""
Tests for store-record validation and conversion.
"""

from datetime import date, datetime, timezone

import pytest

from elysiar.errors import DataIntegrityError
from elysiar.library import LoanStatus, NotificationKind
from elysiar.records import card_from_record, loan_from_record, notification_from_record
from elysiar.srs import ReviewGrade


LOAN_RECORD = {
    "id": "L1",
    "item_id": "book-7",
    "borrower_id": "student-3",
    "issued_at": "2026-10-01T09:15:00Z",
    "due_at": "2026-10-15",
    "returned_at": None,
    "status": "issued",
    "item_title": "Cosmos",
    "notes": "ignored column",
}


def test_loan_from_record_parses_dates():
    loan = loan_from_record(LOAN_RECORD)
    assert loan.issued_at == date(2026, 10, 1)
    assert loan.due_at == date(2026, 10, 15)
    assert loan.status == LoanStatus.ISSUED
    assert loan.item_title == "Cosmos"
    assert loan.is_open


def test_loan_with_unparsable_date_is_rejected():
    with pytest.raises(DataIntegrityError):
        loan_from_record({**LOAN_RECORD, "due_at": "next tuesday"})


def test_returned_status_requires_returned_at():
    with pytest.raises(DataIntegrityError):
        loan_from_record({**LOAN_RECORD, "status": "returned"})


def test_returned_at_requires_returned_status():
    with pytest.raises(DataIntegrityError):
        loan_from_record({**LOAN_RECORD, "status": "overdue", "returned_at": "2026-10-16"})


def test_returned_loan_record():
    loan = loan_from_record({**LOAN_RECORD, "status": "returned", "returned_at": "2026-10-14"})
    assert loan.returned_at == date(2026, 10, 14)
    assert not loan.is_open


def test_unknown_loan_status_is_rejected():
    with pytest.raises(DataIntegrityError):
        loan_from_record({**LOAN_RECORD, "status": "lost"})


def test_card_from_record():
    card = card_from_record({
        "id": "c1",
        "front": "2 + 2",
        "back": "4",
        "interval": 6,
        "repetitions": 2,
        "ease_factor": 2.6,
        "next_review": "2026-10-25T08:00:00+00:00",
        "last_grade": "easy",
    })
    assert card.next_review == datetime(2026, 10, 25, 8, 0, tzinfo=timezone.utc)
    assert card.last_grade is ReviewGrade.EASY


@pytest.mark.parametrize("overrides", [
    {"next_review": "not a date"},
    {"interval": -1},
    {"ease_factor": 1.1},
    {"last_grade": "again"},
])
def test_malformed_card_records_are_rejected(overrides):
    record = {
        "id": "c1",
        "front": "Q",
        "back": "A",
        "interval": 0,
        "repetitions": 0,
        "ease_factor": 2.5,
        "next_review": "2026-10-19T10:00:00Z",
    }
    with pytest.raises(DataIntegrityError):
        card_from_record({**record, **overrides})


def test_notification_from_record():
    notification = notification_from_record({
        "loan_id": "L1",
        "kind": "due_soon",
        "created_at": "2026-10-12T06:00:00Z",
    })
    assert notification.kind == NotificationKind.DUE_SOON
    with pytest.raises(DataIntegrityError):
        notification_from_record({"loan_id": "L1", "kind": "reminder", "created_at": "2026-10-12"})

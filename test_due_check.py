"""
End-to-end tests for the due-date check job.
"""

from datetime import date, datetime, timedelta, timezone

from elysiar.library import LoanStatus, NotificationKind
from elysiar.library import database as loan_db
from elysiar.library.due_check import run_due_date_check
from elysiar.library.loans import Loan


TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc)


def seed(engine):
    loans = [
        Loan("overdue", "b1", "s1", TODAY - timedelta(days=10), TODAY - timedelta(days=2),
             item_title="Cosmos", item_author="Carl Sagan"),
        Loan("due_soon", "b2", "s2", TODAY - timedelta(days=5), TODAY + timedelta(days=3)),
        Loan("on_time", "b3", "s3", TODAY, TODAY + timedelta(days=14)),
        Loan("returned", "b4", "s4", TODAY - timedelta(days=20), TODAY - timedelta(days=5),
             returned_at=TODAY - timedelta(days=6), status=LoanStatus.RETURNED),
    ]
    for loan in loans:
        loan_db.save_loan(loan, engine=engine)


def test_first_run_marks_overdue_and_notifies(engine):
    seed(engine)
    summary = run_due_date_check(TODAY, NOW, engine=engine)

    assert summary.checked == 3
    assert summary.transitions_applied == 1
    assert summary.notifications_created == 2
    assert summary.duplicates_skipped == 0

    assert loan_db.load_loan("overdue", engine=engine).status == LoanStatus.OVERDUE
    kinds = {(n.loan_id, n.kind) for n in loan_db.load_notifications(engine=engine)}
    assert kinds == {
        ("overdue", NotificationKind.OVERDUE),
        ("due_soon", NotificationKind.DUE_SOON),
    }


def test_second_run_is_a_no_op(engine):
    seed(engine)
    run_due_date_check(TODAY, NOW, engine=engine)
    summary = run_due_date_check(TODAY, NOW + timedelta(hours=1), engine=engine)

    assert summary.transitions_applied == 0
    assert summary.notifications_created == 0
    assert summary.duplicates_skipped == 0
    assert len(loan_db.load_notifications(engine=engine)) == 2


def test_due_soon_loan_later_gets_overdue_reminder(engine):
    seed(engine)
    run_due_date_check(TODAY, NOW, engine=engine)

    later = TODAY + timedelta(days=4)
    summary = run_due_date_check(later, NOW + timedelta(days=4), engine=engine)

    assert summary.transitions_applied == 1
    assert summary.notifications_created == 1
    assert loan_db.load_loan("due_soon", engine=engine).status == LoanStatus.OVERDUE


def test_empty_database(engine):
    summary = run_due_date_check(TODAY, NOW, engine=engine)
    assert summary.checked == 0
    assert summary.notifications_created == 0

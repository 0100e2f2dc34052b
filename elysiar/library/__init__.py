"""
Library loan due-status tracking.

Quick start:
    from elysiar import library

    result = library.derive_notifications(loans, existing, today)
    # result.transitions -> loans to mark overdue
    # result.notifications -> reminders to insert
"""

from elysiar.library.constants import (
    DUE_SOON_WINDOW_DAYS,
    DueStatus,
    LoanStatus,
    NotificationKind,
)
from elysiar.library.due_status import (
    classify,
    days_until_due,
    derive_notifications,
)
from elysiar.library.loans import (
    BorrowerNotification,
    DueStatusResult,
    Loan,
    LoanNotification,
    NotificationRequest,
    StatusTransition,
)

__all__ = [
    "DUE_SOON_WINDOW_DAYS",
    "DueStatus",
    "LoanStatus",
    "NotificationKind",
    "classify",
    "days_until_due",
    "derive_notifications",
    "BorrowerNotification",
    "DueStatusResult",
    "Loan",
    "LoanNotification",
    "NotificationRequest",
    "StatusTransition",
]

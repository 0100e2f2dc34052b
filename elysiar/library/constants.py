"""
Library Loan Constants

Loan lifecycle states, due-status classes and notification settings.
"""

from enum import Enum


class LoanStatus(str, Enum):
    """Persisted loan status."""
    ISSUED = "issued"
    RETURNED = "returned"  # Terminal; set only by the return action
    OVERDUE = "overdue"    # Set by the due-date check, never reverted


class DueStatus(str, Enum):
    """Classification of an open loan relative to today."""
    ON_TIME = "on_time"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


class NotificationKind(str, Enum):
    """Kinds of loan reminder; at most one of each per loan."""
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


# Days before due date during which a reminder is sent (inclusive)
DUE_SOON_WINDOW_DAYS = 3

# ---- Notification text ----

DUE_SOON_TITLE = "Book Due Soon"
OVERDUE_TITLE = "Book Overdue!"

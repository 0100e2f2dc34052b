"""
Loan records and the requests derived from them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from elysiar.library.constants import LoanStatus, NotificationKind


@dataclass(frozen=True)
class Loan:
    """
    An item borrowed by a user.

    status == RETURNED iff returned_at is set.
    """
    id: str
    item_id: str
    borrower_id: str
    issued_at: date
    due_at: date
    returned_at: Optional[date] = None
    status: LoanStatus = LoanStatus.ISSUED

    item_title: Optional[str] = None
    item_author: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.returned_at is None


@dataclass(frozen=True)
class LoanNotification:
    """A reminder that has already been persisted."""
    loan_id: str
    kind: NotificationKind
    created_at: datetime


@dataclass(frozen=True)
class StatusTransition:
    """Request to update a loan's persisted status."""
    loan_id: str
    new_status: LoanStatus


@dataclass(frozen=True)
class NotificationRequest:
    """Request to create a reminder for a loan's borrower."""
    loan_id: str
    borrower_id: str
    kind: NotificationKind
    title: str
    message: str
    days_until_due: Optional[int] = None


@dataclass
class DueStatusResult:
    """Everything one due-status pass asks the caller to write."""
    transitions: list[StatusTransition] = field(default_factory=list)
    notifications: list[NotificationRequest] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.transitions and not self.notifications


@dataclass(frozen=True)
class BorrowerNotification:
    """A persisted reminder as shown to its borrower."""
    id: int
    loan_id: str
    borrower_id: str
    kind: NotificationKind
    title: str
    message: str
    is_read: bool
    created_at: datetime

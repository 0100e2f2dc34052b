"""
Pydantic models for the records the data store hands over.

Store rows arrive as plain dicts (snake_case keys, ISO date strings). These
models validate them and convert to the core dataclasses. Any malformed
record raises DataIntegrityError; nothing is repaired.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from elysiar.errors import DataIntegrityError
from elysiar.library.constants import LoanStatus, NotificationKind
from elysiar.library.loans import Loan, LoanNotification
from elysiar.srs.constants import EASE_FLOOR, ReviewGrade
from elysiar.srs.review_state import ReviewCard


def _parse_date(value: Any) -> Any:
    """Accept dates, datetimes and ISO date / timestamp strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            # Full timestamp such as "2024-03-01T09:30:00Z"
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class ReviewCardRecord(BaseModel):
    """A flashcard row as stored."""
    model_config = ConfigDict(extra="ignore")

    id: str
    front: str
    back: str
    interval: int = Field(..., ge=0, description="Days until next review")
    repetitions: int = Field(..., ge=0, description="Consecutive successful reviews")
    ease_factor: float = Field(..., ge=EASE_FLOOR)
    next_review: datetime
    last_grade: Optional[ReviewGrade] = None

    def to_card(self) -> ReviewCard:
        return ReviewCard(
            id=self.id,
            front=self.front,
            back=self.back,
            interval=self.interval,
            repetitions=self.repetitions,
            ease_factor=self.ease_factor,
            next_review=self.next_review,
            last_grade=self.last_grade,
        )


class LoanRecord(BaseModel):
    """A loan row as stored."""
    model_config = ConfigDict(extra="ignore")

    id: str
    item_id: str
    borrower_id: str
    issued_at: date
    due_at: date
    returned_at: Optional[date] = None
    status: LoanStatus
    item_title: Optional[str] = None
    item_author: Optional[str] = None

    @field_validator("issued_at", "due_at", "returned_at", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any) -> Any:
        return _parse_date(value)

    @model_validator(mode="after")
    def check_status_matches_return(self) -> "LoanRecord":
        returned = self.status == LoanStatus.RETURNED
        if returned != (self.returned_at is not None):
            raise ValueError(
                f"status {self.status.value!r} inconsistent with returned_at={self.returned_at}"
            )
        return self

    def to_loan(self) -> Loan:
        return Loan(
            id=self.id,
            item_id=self.item_id,
            borrower_id=self.borrower_id,
            issued_at=self.issued_at,
            due_at=self.due_at,
            returned_at=self.returned_at,
            status=self.status,
            item_title=self.item_title,
            item_author=self.item_author,
        )


class LoanNotificationRecord(BaseModel):
    """A persisted reminder row."""
    model_config = ConfigDict(extra="ignore")

    loan_id: str
    kind: NotificationKind
    created_at: datetime

    def to_notification(self) -> LoanNotification:
        return LoanNotification(loan_id=self.loan_id, kind=self.kind, created_at=self.created_at)


def card_from_record(record: dict) -> ReviewCard:
    try:
        return ReviewCardRecord.model_validate(record).to_card()
    except ValidationError as e:
        raise DataIntegrityError(f"Malformed review card record: {e}") from e


def loan_from_record(record: dict) -> Loan:
    try:
        return LoanRecord.model_validate(record).to_loan()
    except ValidationError as e:
        raise DataIntegrityError(f"Malformed loan record: {e}") from e


def notification_from_record(record: dict) -> LoanNotification:
    try:
        return LoanNotificationRecord.model_validate(record).to_notification()
    except ValidationError as e:
        raise DataIntegrityError(f"Malformed notification record: {e}") from e

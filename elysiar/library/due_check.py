"""
Due-date check job.

Reads open loans and their reminders, derives what changed, and writes the
result back. Meant to be invoked periodically by an external scheduler;
repeated runs on the same day are no-ops.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy.engine import Engine

from elysiar.library import database
from elysiar.library.due_status import derive_notifications

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DueCheckSummary:
    checked: int
    transitions_applied: int
    notifications_created: int
    duplicates_skipped: int


def run_due_date_check(
    today: date,
    now: datetime,
    engine: Optional[Engine] = None
) -> DueCheckSummary:
    """
    Run one due-date pass.

    Args:
        today: Date loans are classified against
        now: Timestamp recorded on created reminders
        engine: Optional engine override

    Returns:
        DueCheckSummary with counts
    """
    loans = database.load_open_loans(engine=engine)
    logger.info("Found %d open loans", len(loans))

    existing = database.load_notifications([loan.id for loan in loans], engine=engine)
    result = derive_notifications(loans, existing, today)

    transitions_applied = database.apply_status_transitions(result.transitions, engine=engine)
    created, skipped = database.insert_notification_requests(
        result.notifications, created_at=now, engine=engine
    )

    logger.info(
        "Due-date check complete: %d marked overdue, %d notifications created, %d duplicates skipped",
        transitions_applied, created, skipped
    )

    return DueCheckSummary(
        checked=len(loans),
        transitions_applied=transitions_applied,
        notifications_created=created,
        duplicates_skipped=skipped,
    )

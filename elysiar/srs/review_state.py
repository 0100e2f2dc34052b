"""
Review State - Flashcard scheduling state

Defines the per-card state the SM-2 scheduler reads and writes.

Key concepts:
- Interval: days until the next review
- Repetitions: consecutive successful reviews since the last lapse
- Ease factor: multiplier controlling how fast intervals grow
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from elysiar.srs.constants import INITIAL_EASE, ReviewGrade


@dataclass(frozen=True)
class ReviewCard:
    """
    Scheduling state for a single flashcard.

    A card is due when next_review <= now.
    """
    id: str
    front: str
    back: str

    interval: int        # days, >= 0
    repetitions: int     # consecutive successes, >= 0
    ease_factor: float   # >= 1.3
    next_review: datetime

    # Grade of the most recent review (None until first reviewed)
    last_grade: Optional[ReviewGrade] = None


@dataclass(frozen=True)
class UpcomingReviews:
    """Counts of cards coming up for review."""
    today: int
    tomorrow: int
    this_week: int


def initialize_card(card_id: str, front: str, back: str, now: datetime) -> ReviewCard:
    """
    Create state for a brand-new card.

    New cards are immediately due.

    Args:
        card_id: Opaque unique identifier
        front: Prompt text
        back: Answer text
        now: Current time (injected)

    Returns:
        Fresh ReviewCard
    """
    return ReviewCard(
        id=card_id,
        front=front,
        back=back,
        interval=0,
        repetitions=0,
        ease_factor=INITIAL_EASE,
        next_review=now,
    )

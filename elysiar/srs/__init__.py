"""
SRS - SM-2 Spaced Repetition Scheduler

Main API for flashcard review scheduling.

Quick start:
    from elysiar import srs

    card = srs.initialize_card("c1", "Capital of France?", "Paris", now)

    # Process a review (algorithm only, no DB calls)
    card, event_data = srs.process_review(card, srs.ReviewGrade.EASY, now)

    # Due cards, earliest first
    due = srs.select_due_cards(cards, now)
"""

# Core scheduler API (algorithm logic)
from elysiar.srs.scheduler import (
    compute_next_review,
    process_review,
    select_due_cards,
    to_grade,
    update_ease_factor,
    upcoming_review_counts,
)

# Review state
from elysiar.srs.review_state import (
    ReviewCard,
    UpcomingReviews,
    initialize_card,
)

# Constants and parameters
from elysiar.srs.constants import (
    ReviewGrade,
    QUALITY,
    INITIAL_EASE,
    EASE_FLOOR,
    FIRST_INTERVAL,
    SECOND_INTERVAL,
)


__all__ = [
    # Core algorithm
    "compute_next_review",
    "process_review",
    "select_due_cards",
    "to_grade",
    "update_ease_factor",
    "upcoming_review_counts",

    # Review state
    "ReviewCard",
    "UpcomingReviews",
    "initialize_card",

    # Enums
    "ReviewGrade",

    # Parameters
    "QUALITY",
    "INITIAL_EASE",
    "EASE_FLOOR",
    "FIRST_INTERVAL",
    "SECOND_INTERVAL",
]

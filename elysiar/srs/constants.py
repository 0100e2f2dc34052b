"""
Review Scheduler Constants and Parameters

All configurable parameters for the SM-2 review scheduler in one place.
"""

from enum import Enum


# ---- Review Grades ----

class ReviewGrade(str, Enum):
    """Learner's self-assessment after a review."""
    HARD = "hard"      # Recall failed or nearly failed
    MEDIUM = "medium"  # Recalled with some effort
    EASY = "easy"      # Recalled fluently


# Numeric SM-2 quality for each grade (0-5 scale)
QUALITY = {
    ReviewGrade.HARD: 1,
    ReviewGrade.MEDIUM: 3,
    ReviewGrade.EASY: 5,
}

# Quality below this is a lapse
PASSING_QUALITY = 3


# ---- Ease Factor ----

INITIAL_EASE = 2.5
EASE_FLOOR = 1.3


# ---- Intervals (days) ----

FIRST_INTERVAL = 1   # After the first successful review (and after a lapse)
SECOND_INTERVAL = 6  # After the second consecutive success

UPCOMING_WINDOW_DAYS = 7

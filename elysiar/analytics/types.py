"""
Types for review and loan dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from elysiar.srs.review_state import UpcomingReviews


@dataclass(frozen=True)
class ReviewDashboardData:
    """
    Precomputed counts and series for the flashcard review dashboard.
    """
    total_cards: int
    due_now: int
    upcoming: UpcomingReviews
    daily_forecast: pd.Series
    mean_ease_factor: float

"""
Service layer to assemble the review dashboard.
"""

from __future__ import annotations

from datetime import datetime

from elysiar import srs
from elysiar.analytics.metrics import build_review_forecast, compute_mean_ease
from elysiar.analytics.types import ReviewDashboardData
from elysiar.srs.review_state import ReviewCard


def build_review_dashboard(cards: list[ReviewCard], now: datetime, days: int = 7) -> ReviewDashboardData:
    """
    Build all counts and series needed by the review dashboard.
    """
    return ReviewDashboardData(
        total_cards=len(cards),
        due_now=len(srs.select_due_cards(cards, now)),
        upcoming=srs.upcoming_review_counts(cards, now),
        daily_forecast=build_review_forecast(cards, now, days=days),
        mean_ease_factor=compute_mean_ease(cards),
    )

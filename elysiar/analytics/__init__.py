"""
Analytics package exports.
"""

from elysiar.analytics.metrics import build_review_forecast, count_loans_by_status
from elysiar.analytics.service import build_review_dashboard
from elysiar.analytics.types import ReviewDashboardData

__all__ = [
    "build_review_forecast",
    "count_loans_by_status",
    "build_review_dashboard",
    "ReviewDashboardData",
]

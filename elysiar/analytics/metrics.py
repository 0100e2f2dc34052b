"""
Metric computations for review and loan dashboards.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

import pandas as pd

from elysiar.library.constants import DueStatus
from elysiar.library.due_status import classify
from elysiar.library.loans import Loan
from elysiar.srs.review_state import ReviewCard


def cards_to_df(cards: Iterable[ReviewCard]) -> pd.DataFrame:
    """
    Flatten cards into a dataframe (one row per card).
    """
    rows = [
        {
            "card_id": card.id,
            "interval": card.interval,
            "repetitions": card.repetitions,
            "ease_factor": card.ease_factor,
            "next_review": card.next_review,
        }
        for card in cards
    ]
    if not rows:
        return pd.DataFrame(columns=["card_id", "interval", "repetitions", "ease_factor", "next_review"])
    return pd.DataFrame(rows)


def build_review_forecast(cards: Iterable[ReviewCard], now: datetime, days: int = 7) -> pd.Series:
    """
    Number of cards coming due on each of the next `days` calendar days.

    Index is the calendar date in now's timezone, starting today. Cards
    already overdue are counted on today; cards beyond the window are
    dropped.
    """
    today = pd.Timestamp(now.date())
    day_index = pd.date_range(start=today, periods=days, freq="D")

    df = cards_to_df(cards)
    if df.empty:
        return pd.Series(0, index=day_index, dtype="int64")

    tz = now.tzinfo
    review_days = pd.Series(
        [
            (moment.astimezone(tz) if tz is not None and moment.tzinfo is not None else moment).date()
            for moment in df["next_review"]
        ]
    )
    review_days = pd.to_datetime(review_days).clip(lower=today)
    counts = review_days.value_counts()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_mean_ease(cards: Iterable[ReviewCard]) -> float:
    """
    Average ease factor across cards (0.0 when there are none).
    """
    df = cards_to_df(cards)
    if df.empty:
        return 0.0
    return float(df["ease_factor"].mean())


def count_loans_by_status(loans: Iterable[Loan], today: date) -> pd.Series:
    """
    Open loans per due status (on_time, due_soon, overdue).
    """
    statuses = [classify(loan, today) for loan in loans]
    labels = [status.value for status in statuses if status is not None]
    index = [status.value for status in DueStatus]
    if not labels:
        return pd.Series(0, index=index, dtype="int64")
    return pd.Series(labels).value_counts().reindex(index, fill_value=0).astype("int64")

"""
Scheduler - SM-2 Review Logic

Pure SM-2 scheduling and state updates (no database calls).

Main workflow:
1. Load cards (caller's responsibility)
2. Map the review grade to an SM-2 quality
3. Update ease factor, repetitions and interval
4. Return updated card (+ event data dict for process_review)

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Tuple, Union

from elysiar.errors import InvalidGradeError
from elysiar.srs.constants import (
    EASE_FLOOR,
    FIRST_INTERVAL,
    PASSING_QUALITY,
    QUALITY,
    SECOND_INTERVAL,
    UPCOMING_WINDOW_DAYS,
    ReviewGrade,
)
from elysiar.srs.review_state import ReviewCard, UpcomingReviews


def to_grade(grade: Union[ReviewGrade, str]) -> ReviewGrade:
    """
    Coerce a grade value to ReviewGrade.

    Raises:
        InvalidGradeError: if the value is not hard/medium/easy
    """
    try:
        return ReviewGrade(grade)
    except ValueError:
        raise InvalidGradeError(f"Unknown review grade: {grade!r}") from None


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """
    SM-2 ease update.

    Formula:
        EF' = max(1.3, EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))
    """
    miss = 5 - quality
    return max(EASE_FLOOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_next_review(
    card: ReviewCard,
    grade: Union[ReviewGrade, str],
    now: datetime
) -> ReviewCard:
    """
    Apply one review to a card and return the updated card.

    - q < 3 is a lapse: repetitions reset to 0, interval to 1 day
    - otherwise repetitions += 1 and interval becomes 1, 6, then
      round(interval * EF') from the third success on

    The input card is not modified.

    Args:
        card: Current card state
        grade: Review grade (hard, medium, easy)
        now: Review time (injected)

    Returns:
        New ReviewCard with next_review = now + interval days
    """
    grade = to_grade(grade)
    quality = QUALITY[grade]

    ease_factor = update_ease_factor(card.ease_factor, quality)

    if quality < PASSING_QUALITY:
        repetitions = 0
        interval = FIRST_INTERVAL
    else:
        repetitions = card.repetitions + 1
        if repetitions == 1:
            interval = FIRST_INTERVAL
        elif repetitions == 2:
            interval = SECOND_INTERVAL
        else:
            interval = _round_half_up(card.interval * ease_factor)

    return ReviewCard(
        id=card.id,
        front=card.front,
        back=card.back,
        interval=interval,
        repetitions=repetitions,
        ease_factor=ease_factor,
        next_review=now + timedelta(days=interval),
        last_grade=grade,
    )


def process_review(
    card: ReviewCard,
    grade: Union[ReviewGrade, str],
    now: datetime
) -> Tuple[ReviewCard, dict]:
    """
    Process a review and return updated card + event data.

    Caller is responsible for:
    1. Loading the card
    2. Saving the card after review
    3. Persisting the event

    Returns:
        Tuple of (updated_card, event_data_dict)
        event_data_dict is ready to pass to database.batch_log_review_events()
    """
    updated = compute_next_review(card, grade, now)

    event_data = {
        'card_id': card.id,
        'timestamp': now,
        'grade': updated.last_grade.value,
        'interval_before': card.interval,
        'repetitions_before': card.repetitions,
        'ease_factor_before': card.ease_factor,
        'interval_after': updated.interval,
        'repetitions_after': updated.repetitions,
        'ease_factor_after': updated.ease_factor,
        'next_review': updated.next_review,
    }

    return updated, event_data


def select_due_cards(cards: Iterable[ReviewCard], now: datetime) -> list[ReviewCard]:
    """
    Cards with next_review <= now, earliest due first.

    Ties keep input order (sorted() is stable).
    """
    due = [card for card in cards if card.next_review <= now]
    return sorted(due, key=lambda card: card.next_review)


def _local_date(moment: datetime, now: datetime) -> date:
    """Calendar date of moment, seen from now's timezone."""
    if moment.tzinfo is not None and now.tzinfo is not None:
        moment = moment.astimezone(now.tzinfo)
    return moment.date()


def upcoming_review_counts(cards: Iterable[ReviewCard], now: datetime) -> UpcomingReviews:
    """
    Count cards due today, tomorrow and within the next week.

    today / tomorrow compare calendar dates in now's timezone.
    this_week counts now < next_review <= now + 7 days.
    """
    today = _local_date(now, now)
    tomorrow = today + timedelta(days=1)
    week_end = now + timedelta(days=UPCOMING_WINDOW_DAYS)

    today_count = 0
    tomorrow_count = 0
    week_count = 0
    for card in cards:
        review_date = _local_date(card.next_review, now)
        if review_date == today:
            today_count += 1
        elif review_date == tomorrow:
            tomorrow_count += 1
        if now < card.next_review <= week_end:
            week_count += 1

    return UpcomingReviews(today=today_count, tomorrow=tomorrow_count, this_week=week_count)

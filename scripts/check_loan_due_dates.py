"""
Check library loans for due-soon and overdue reminders.

Marks overdue loans and creates at most one reminder of each kind per loan.
Safe to run repeatedly (e.g. from cron).

Usage:
    python -m scripts.check_loan_due_dates
    python -m scripts.check_loan_due_dates --date 2024-03-01
"""

import argparse
import logging
from datetime import date, datetime, timezone

from dotenv import load_dotenv

from elysiar.database import dispose_default_engines, init_db
from elysiar.library.due_check import run_due_date_check


def main():
    parser = argparse.ArgumentParser(description="Run the library due-date check")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Classify loans as of this date (YYYY-MM-DD, default: today)"
    )
    parser.add_argument("--verbose", action="store_true", help="Show per-loan log output")
    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    today = args.date or date.today()

    try:
        init_db()
        summary = run_due_date_check(today=today, now=datetime.now(timezone.utc))
    finally:
        dispose_default_engines()

    print("=" * 60)
    print(f"Due-date check for {today.isoformat()}")
    print("=" * 60)
    print(f"  Open loans checked:     {summary.checked}")
    print(f"  Marked overdue:         {summary.transitions_applied}")
    print(f"  Notifications created:  {summary.notifications_created}")
    print(f"  Duplicates skipped:     {summary.duplicates_skipped}")


if __name__ == "__main__":
    main()

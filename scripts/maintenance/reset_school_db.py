"""
Reset the Elysiar database.

DANGEROUS: This deletes all review history and loan records!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_school_db
"""

from dotenv import load_dotenv

from elysiar.database import reset_db


def main():
    load_dotenv()

    print("=" * 60)
    print("WARNING: Reset Elysiar Database")
    print("=" * 60)
    print()
    print("This will DELETE:")
    print("  - All review cards (intervals, ease factors, due dates)")
    print("  - All review events")
    print("  - All loans and loan notifications")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        reset_db()
        print("Database reset complete.")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()

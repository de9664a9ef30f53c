"""
Reset the review database.

DANGEROUS: This deletes all cards and review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_review_db
    python -m scripts.maintenance.reset_review_db --yes
"""

import argparse
import logging

from recall import config
from recall.sm2 import database

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the review tables")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt"
    )
    args = parser.parse_args()

    config.configure_logging()

    print("=" * 60)
    print("WARNING: Reset Review Database")
    print("=" * 60)
    print()
    print("This will DELETE:")
    print("  - All cards (content and SM-2 state)")
    print("  - All review events (logs of past reviews)")
    print()

    if not args.yes:
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("\nCancelled. No changes made.")
            return

    logger.info("Resetting review database (test mode: %s)", config.is_test_mode())
    database.reset_db()
    print("Database reset complete!")
    print("\nThe database now has empty tables ready for new cards.")


if __name__ == "__main__":
    main()

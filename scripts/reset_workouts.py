"""Delete every stored workout so the next start begins with an empty list."""
from __future__ import annotations

import argparse
import logging

from workout_map.config import get_settings
from workout_map.database import init_db
from workout_map.exceptions import CorruptPersistedData
from workout_map.logging_config import configure_logging
from workout_map.services.persistence import WorkoutPersistence


logger = logging.getLogger("reset_workouts")


def reset_workouts(persistence: WorkoutPersistence, dry_run: bool = False) -> int:
    """
    Clear the stored workout list.

    Returns:
        Number of stored records found before clearing (0 if none or unreadable)
    """
    try:
        stored = persistence.load()
    except CorruptPersistedData:
        logger.warning("Stored workouts are unreadable; clearing anyway", exc_info=True)
        stored = None
    count = len(stored) if isinstance(stored, list) else 0

    if dry_run:
        logger.info("Dry run: would remove %d stored workouts", count)
        return count

    persistence.clear()
    logger.info("Removed %d stored workouts", count)
    return count


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true", help="Report what would be removed without deleting.")
    args = parser.parse_args(argv)

    configure_logging()
    settings = get_settings()
    init_db()
    count = reset_workouts(WorkoutPersistence(key=settings.storage_key), dry_run=args.dry_run)
    print(f"{'Would remove' if args.dry_run else 'Removed'} {count} workouts")


if __name__ == "__main__":
    main()

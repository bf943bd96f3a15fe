"""Remove driver location samples older than the retention window."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from dispatch.application.use_cases.locations import LocationTracker
from dispatch.config import get_settings
from dispatch.infrastructure.database import SessionLocal, initialize_database
from dispatch.infrastructure.notifications import realtime_event_publisher


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Retention window in days (default: LOCATION_RETENTION_DAYS setting)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.days is not None and args.days <= 0:
        raise SystemExit("--days must be a positive number.")

    logging.basicConfig(level=logging.INFO)
    initialize_database()

    settings = get_settings()
    session = SessionLocal()
    try:
        tracker = LocationTracker(session, realtime_event_publisher, settings)
        deleted = tracker.purge_stale_samples(args.days)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not purge location history: {exc}") from exc
    finally:
        session.close()

    print(f"Deleted {deleted} location samples.")


if __name__ == "__main__":
    main()

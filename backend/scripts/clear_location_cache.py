#!/usr/bin/env python3
"""Force clear: delete everything cached in the last FORCE_CLEAR_WINDOW_HOURS (default 24) from both cache tables.
Use when recently cached data is wrong (e.g. a bad location was cached).
Run from backend: python scripts/clear_location_cache.py [--hours N]
"""
import argparse
import sys
from datetime import timedelta
from pathlib import Path

# Ensure backend is on path when run as script
backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from justmoved.config import settings
from justmoved.db.session import SessionLocal
from justmoved.services.cache_cleanup_service import clear_recent_cache


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--hours", type=int, default=settings.force_clear_window_hours)
    args = parser.parse_args()

    db = SessionLocal()
    try:
        result = clear_recent_cache(db, window=timedelta(hours=args.hours))
        print(f"Cleared rows created in the last {args.hours}h (as of {result['cleared_time']}):")
        for table, outcome in result["tables"].items():
            status = f"{outcome['deleted']} deleted" if outcome["success"] else f"FAILED: {outcome['error']}"
            print(f"  {table}: {status}")
        if not result["success"]:
            sys.exit(1)
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()

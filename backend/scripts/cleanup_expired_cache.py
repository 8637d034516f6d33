#!/usr/bin/env python3
"""Run the expiry sweep once (same as the scheduled job) and print per-table counts.
Run from backend: python scripts/cleanup_expired_cache.py
"""
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from justmoved.db.session import SessionLocal
from justmoved.services.cache_cleanup_service import get_cache_stats, sweep_expired_cache


def main():
    db = SessionLocal()
    try:
        deleted = sweep_expired_cache(db)
        print("Expired rows deleted:")
        for table, count in deleted.items():
            print(f"  {table}: {count if count >= 0 else 'FAILED'}")
        print()
        print("Remaining:")
        for table, counts in get_cache_stats(db).items():
            print(f"  {table}: {counts['active']} active, {counts['expired']} expired")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()

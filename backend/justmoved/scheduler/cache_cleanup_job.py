"""Runs every cache_sweep_interval_hours (and on POST /cache/cleanup): delete expired cache rows, log stats."""
import logging

from justmoved.db.session import SessionLocal
from justmoved.services.cache_cleanup_service import get_cache_stats, sweep_expired_cache

logger = logging.getLogger(__name__)


def run_cache_sweep_job() -> dict[str, int] | None:
    db = SessionLocal()
    try:
        logger.info("Starting cache cleanup job...")
        try:
            deleted = sweep_expired_cache(db)
        except Exception as e:
            logger.exception("Cache cleanup job failed: %s", e)
            db.rollback()
            return None
        # Deletions are already committed; a stats failure only loses the report
        try:
            stats = get_cache_stats(db)
        except Exception as e:
            db.rollback()
            logger.exception("Cache stats unavailable after cleanup: %s", e)
            stats = None
        logger.info("Cleanup complete. Deleted: %s. Cache stats: %s", deleted, stats)
        return deleted
    finally:
        db.close()

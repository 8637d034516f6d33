"""
Cache cleanup: expiry sweep and recent-window force clear over both cache tables.
Both are idempotent; running with nothing eligible deletes nothing.
"""
import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from justmoved.models.business_cache import BusinessCache
from justmoved.models.recommendations_cache import RecommendationsCache
from justmoved.services.cache_store import CacheStore, utcnow

logger = logging.getLogger(__name__)

# Sweep/report order matches justmoved.db.tables.CACHE_TABLE_NAMES
CACHE_MODELS = (RecommendationsCache, BusinessCache)


def get_cache_stats(db: Session, *, now: datetime | None = None) -> dict[str, dict[str, int]]:
    """Per-table {total, active, expired} counts."""
    now = now or utcnow()
    return {m.__tablename__: CacheStore(db, m).stats(now=now) for m in CACHE_MODELS}


def sweep_expired_cache(db: Session, *, now: datetime | None = None) -> dict[str, int]:
    """
    Delete every row with expires_at < now from both cache tables.
    Returns dict of table -> deleted count. A failing table is logged and skipped (count -1).
    """
    now = now or utcnow()
    deleted: dict[str, int] = {}
    for model in CACHE_MODELS:
        store = CacheStore(db, model)
        try:
            deleted[store.table_name] = store.delete_expired(now=now)
            logger.info("Cleaned %s expired entries from %s", deleted[store.table_name], store.table_name)
        except Exception as e:
            db.rollback()
            logger.exception("Error cleaning %s: %s", store.table_name, e)
            deleted[store.table_name] = -1
    return deleted


def clear_recent_cache(
    db: Session, *, window: timedelta, now: datetime | None = None
) -> dict[str, Any]:
    """
    Force clear: delete rows created within `window` of now from both tables, regardless of expiry.
    Used when recently cached data is known to be wrong (e.g. a bad location was cached).
    Returns {success, cleared_time, tables: {table: {success, deleted, error}}}.
    """
    now = now or utcnow()
    since = now - window
    tables: dict[str, dict[str, Any]] = {}
    for model in CACHE_MODELS:
        store = CacheStore(db, model)
        try:
            count = store.delete_created_since(since)
            tables[store.table_name] = {"success": True, "deleted": count, "error": None}
            logger.info("Cleared %s recent entries from %s (created since %s)", count, store.table_name, since.isoformat())
        except Exception as e:
            db.rollback()
            logger.exception("Error clearing %s: %s", store.table_name, e)
            tables[store.table_name] = {"success": False, "deleted": 0, "error": str(e)}
    return {
        "success": all(t["success"] for t in tables.values()),
        "cleared_time": now.isoformat(),
        "tables": tables,
    }

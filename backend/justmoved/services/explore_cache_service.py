"""
Explore results cache: whole-category recommendation sets keyed by rounded coordinates,
sorted categories and app version, stored in recommendations_cache.

Payload shape: {"categories": [...], "recommendations": {category: [business, ...]}}.
Lookups try the exact key first, then fall back to the newest live explore entries that share
at least one category (fuzzy match; location is not compared).
"""
import logging
import math
import re
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from justmoved.config import settings
from justmoved.core.constants import (
    DEFAULT_APP_VERSION,
    EXPLORE_CACHE_KEY_PREFIX,
    EXPLORE_COORD_PRECISION,
    EXPLORE_FUZZY_CANDIDATES,
)
from justmoved.core.errors import InvalidInput
from justmoved.services.cache_store import CacheEntry, CacheStore, utcnow

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^v([^-]+)-")

CLEAR_OLD_VERSIONS = "clear-old-versions"
UPDATE_CACHE_VERSION = "update-cache-version"
GET_VERSION_STATS = "get-version-stats"


def round_coordinate(value: float) -> float:
    """Nearest multiple of EXPLORE_COORD_PRECISION (halves round up)."""
    return math.floor(value / EXPLORE_COORD_PRECISION + 0.5) * EXPLORE_COORD_PRECISION


def version_prefix(version: str) -> str:
    return f"v{version}-"


def explore_cache_key(lat: float, lng: float, categories: list[str], version: str | None = None) -> str:
    base = (
        f"{EXPLORE_CACHE_KEY_PREFIX}{round_coordinate(lat):.2f}_{round_coordinate(lng):.2f}_"
        f"{','.join(sorted(categories))}"
    )
    return f"{version_prefix(version)}{base}" if version else base


def _cache_age_hours(entry: CacheEntry, now: datetime) -> int:
    return int((now - entry.created_at).total_seconds() // 3600)


def _recommendations(entry: CacheEntry) -> dict[str, Any]:
    payload = entry.payload if isinstance(entry.payload, dict) else {}
    return payload.get("recommendations") or {}


def _validate_lookup(coordinates: dict[str, Any] | None, categories: list[str] | None) -> tuple[float, float]:
    coordinates = coordinates or {}
    lat, lng = coordinates.get("lat"), coordinates.get("lng")
    if lat is None or lng is None or not categories:
        raise InvalidInput("Missing required parameters")
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError):
        raise InvalidInput("Missing required parameters") from None


def check_explore_cache(
    db: Session,
    coordinates: dict[str, Any] | None,
    categories: list[str] | None,
    version: str | None = None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """{cached: False} on a miss; {cached, data, cacheAge[, fuzzy]} on a hit."""
    lat, lng = _validate_lookup(coordinates, categories)
    now = now or utcnow()
    version = version or DEFAULT_APP_VERSION
    store = CacheStore(db)
    cache_key = explore_cache_key(lat, lng, categories, version)

    entry = store.get_entry(cache_key, now=now)
    if entry is not None:
        recs = _recommendations(entry)
        logger.info("Explore cache hit %s (age %sh)", cache_key, _cache_age_hours(entry, now))
        return {
            "cached": True,
            "data": {c: recs[c] for c in categories if c in recs},
            "cacheAge": _cache_age_hours(entry, now),
        }

    wanted = set(categories)
    candidates = 0
    for entry in store.live_entries(contains=EXPLORE_CACHE_KEY_PREFIX, now=now):
        stored = entry.payload.get("categories") if isinstance(entry.payload, dict) else None
        if not wanted.intersection(stored or []):
            continue
        candidates += 1
        recs = _recommendations(entry)
        data = {c: recs[c] for c in categories if recs.get(c)}
        if data:
            logger.info("Explore fuzzy cache hit %s for %s", entry.cache_key, sorted(data))
            return {"cached": True, "data": data, "cacheAge": _cache_age_hours(entry, now), "fuzzy": True}
        if candidates >= EXPLORE_FUZZY_CANDIDATES:
            break

    logger.info("Explore cache miss %s", cache_key)
    return {"cached": False}


def store_explore_results(
    db: Session,
    coordinates: dict[str, Any] | None,
    categories: list[str] | None,
    recommendations: dict[str, Any] | None,
    version: str | None = None,
) -> str:
    """Upsert an explore result set under the current version's key. Returns the key."""
    lat, lng = _validate_lookup(coordinates, categories)
    if not isinstance(recommendations, dict):
        raise InvalidInput("cacheData is required")
    cache_key = explore_cache_key(lat, lng, categories, version or DEFAULT_APP_VERSION)
    CacheStore(db).upsert(
        cache_key,
        {"categories": sorted(categories), "recommendations": recommendations},
        timedelta(days=settings.explore_cache_ttl_days),
    )
    return cache_key


def clear_old_versions(db: Session, version: str | None = None) -> int:
    """Delete explore entries not written under `version` (unversioned ones included)."""
    version = version or DEFAULT_APP_VERSION
    deleted = CacheStore(db).delete_containing(EXPLORE_CACHE_KEY_PREFIX, keep_prefix=version_prefix(version))
    logger.info("Cleared %s explore cache entries from versions other than %s", deleted, version)
    return deleted


def get_version_stats(db: Session, version: str | None = None, *, now: datetime | None = None) -> dict[str, Any]:
    """Live recommendations_cache entries counted by key version ("unversioned" when none)."""
    keys = CacheStore(db).live_keys(now=now)
    stats: dict[str, int] = {}
    for key in keys:
        m = _VERSION_RE.match(key)
        label = m.group(1) if m else "unversioned"
        stats[label] = stats.get(label, 0) + 1
    return {
        "success": True,
        "versionStats": stats,
        "currentVersion": version or DEFAULT_APP_VERSION,
        "totalEntries": len(keys),
    }


def run_cache_utils_action(
    db: Session, action: str | None, data: dict[str, Any] | None, version: str | None = None
) -> dict[str, Any]:
    version = version or DEFAULT_APP_VERSION
    if action == CLEAR_OLD_VERSIONS:
        clear_old_versions(db, version)
        return {"success": True, "clearedVersion": version}
    if action == UPDATE_CACHE_VERSION:
        data = data or {}
        cache_key = store_explore_results(
            db, data.get("coordinates"), data.get("categories"), data.get("cacheData"), version
        )
        return {"success": True, "cacheKey": cache_key}
    if action == GET_VERSION_STATS:
        return get_version_stats(db, version)
    raise InvalidInput(f"Unknown action: {action}")

"""
Cache maintenance: expiry sweep (background), recent-window force clear, stats; explore results cache check and version utilities.
"""
import asyncio
import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from justmoved.config import settings
from justmoved.core.errors import PlacesError
from justmoved.db.session import get_db
from justmoved.scheduler.cache_cleanup_job import run_cache_sweep_job
from justmoved.services.cache_cleanup_service import clear_recent_cache, get_cache_stats
from justmoved.services.cache_store import utcnow
from justmoved.services.explore_cache_service import check_explore_cache, run_cache_utils_action

router = APIRouter()
logger = logging.getLogger(__name__)

# Strong refs so detached sweep tasks are not garbage-collected mid-run
_background_tasks: set[asyncio.Task] = set()


def _log_sweep_outcome(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        logger.warning("Cache sweep task cancelled")
    elif task.exception() is not None:
        logger.error("Cache sweep task failed: %s", task.exception())


@router.post("/cleanup")
async def cleanup_cache() -> dict[str, Any]:
    """
    Start the expiry sweep in the background and return immediately. Deletion of expired rows
    from both cache tables continues after the response; results go to the server log.
    """
    task = asyncio.create_task(asyncio.to_thread(run_cache_sweep_job))
    _background_tasks.add(task)
    task.add_done_callback(_log_sweep_outcome)
    return {"message": "Cache cleanup initiated", "timestamp": utcnow().isoformat()}


@router.post("/clear-location")
def clear_location_cache(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Delete everything cached in the last force_clear_window_hours from both tables (synchronous)."""
    result = clear_recent_cache(db, window=timedelta(hours=settings.force_clear_window_hours))
    return {
        "success": result["success"],
        "message": "Cache cleared successfully" if result["success"] else "Cache clear failed for some tables",
        "cleared_time": result["cleared_time"],
        "tables": result["tables"],
    }


@router.get("/stats")
def cache_stats(db: Session = Depends(get_db)) -> dict[str, Any]:
    return {"tables": get_cache_stats(db), "timestamp": utcnow().isoformat()}


class CacheCheckRequest(BaseModel):
    coordinates: dict[str, Any] | None = None
    categories: list[str] | None = None


class CacheUtilsRequest(BaseModel):
    action: str | None = None
    data: dict[str, Any] | None = None


@router.post("/check")
def check_cache(
    body: CacheCheckRequest,
    db: Session = Depends(get_db),
    x_app_version: str | None = Header(None),
) -> dict[str, Any]:
    """Explore results for rounded coordinates + categories under the caller's app version."""
    try:
        return check_explore_cache(db, body.coordinates, body.categories, x_app_version)
    except SQLAlchemyError as e:
        logger.exception("Explore cache check failed: %s", e)
        raise PlacesError("Cache check failed", cached=False) from e


@router.post("/utils")
def cache_utils(
    body: CacheUtilsRequest,
    db: Session = Depends(get_db),
    x_app_version: str | None = Header(None),
) -> dict[str, Any]:
    """Versioned explore cache maintenance: clear-old-versions, update-cache-version, get-version-stats."""
    try:
        return run_cache_utils_action(db, body.action, body.data, x_app_version)
    except PlacesError as e:
        e.extra.setdefault("success", False)
        raise
    except SQLAlchemyError as e:
        logger.exception("Cache utils %s failed: %s", body.action, e)
        raise PlacesError(str(e), success=False) from e

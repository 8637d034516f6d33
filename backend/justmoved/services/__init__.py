from justmoved.services.business_details_service import get_business_details
from justmoved.services.cache_cleanup_service import clear_recent_cache, get_cache_stats, sweep_expired_cache
from justmoved.services.cache_store import CacheStore
from justmoved.services.explore_cache_service import check_explore_cache, run_cache_utils_action
from justmoved.services.filter_service import filter_recommendations

__all__ = [
    "CacheStore",
    "check_explore_cache",
    "clear_recent_cache",
    "filter_recommendations",
    "get_business_details",
    "get_cache_stats",
    "run_cache_utils_action",
    "sweep_expired_cache",
]

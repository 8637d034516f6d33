from justmoved.models.business_cache import BusinessCache
from justmoved.models.recommendations_cache import RecommendationsCache

__all__ = [
    "BusinessCache",
    "RecommendationsCache",
]

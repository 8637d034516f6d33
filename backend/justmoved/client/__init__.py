from justmoved.client.filter_options import get_category_filter_options
from justmoved.client.recommendation_filters import FilterResult, Notice, RecommendationFilterClient
from justmoved.data.subfilters import get_subfilters_for_category

__all__ = [
    "FilterResult",
    "Notice",
    "RecommendationFilterClient",
    "get_category_filter_options",
    "get_subfilters_for_category",
]

"""General cache: business details (details_<place_id>) and filtered recommendation lists."""
from justmoved.db.base import Base
from justmoved.db.tables import RECOMMENDATIONS_CACHE_TABLE
from justmoved.models.cache_entry import CacheEntryMixin


class RecommendationsCache(CacheEntryMixin, Base):
    __tablename__ = RECOMMENDATIONS_CACHE_TABLE

"""Per-business enrichment (phone, website, hours, photo) keyed by the provider place_id."""
from justmoved.db.base import Base
from justmoved.db.tables import BUSINESS_CACHE_TABLE
from justmoved.models.cache_entry import CacheEntryMixin


class BusinessCache(CacheEntryMixin, Base):
    __tablename__ = BUSINESS_CACHE_TABLE

"""Columns shared by every cache table: key, JSON payload, write time and expiry."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from justmoved.core.constants import MAX_CACHE_KEY_LENGTH


class CacheEntryMixin:
    cache_key = Column(String(MAX_CACHE_KEY_LENGTH), primary_key=True)
    payload_json = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

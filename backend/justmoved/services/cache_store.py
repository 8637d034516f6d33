"""
Cache store: narrow read / upsert / delete access to the cache tables.

Reads always re-check expires_at > now, so a row the sweep has not reached yet is still a miss.
Writes are upserts (last writer wins); nothing here deletes on the read path.
"""
import hashlib
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from justmoved.core.constants import MAX_CACHE_KEY_LENGTH
from justmoved.models.recommendations_cache import RecommendationsCache

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def storage_key(key: str) -> str:
    """Keys over the column width keep a readable prefix plus a sha256 of the full key."""
    if len(key) <= MAX_CACHE_KEY_LENGTH:
        return key
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"{key[: MAX_CACHE_KEY_LENGTH - len(digest) - 1]}#{digest}"


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored here is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CacheEntry(BaseModel):
    cache_key: str
    payload: Any
    created_at: datetime
    expires_at: datetime


class CacheStore:
    """Key -> JSON payload store over one cache table (RecommendationsCache by default)."""

    def __init__(self, db: Session, model=RecommendationsCache) -> None:
        self.db = db
        self.model = model

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def _live_row(self, key: str, now: datetime):
        key = storage_key(key)
        return (
            self.db.query(self.model)
            .filter(self.model.cache_key == key, self.model.expires_at > now)
            .first()
        )

    def get_entry(self, key: str, *, now: datetime | None = None) -> CacheEntry | None:
        row = self._live_row(key, now or utcnow())
        if not row or not row.payload_json:
            return None
        try:
            payload = json.loads(row.payload_json)
        except (TypeError, json.JSONDecodeError):
            logger.warning("Unreadable cache payload in %s for key %s", self.table_name, key)
            return None
        return CacheEntry(
            cache_key=row.cache_key,
            payload=payload,
            created_at=as_utc(row.created_at),
            expires_at=as_utc(row.expires_at),
        )

    def get(self, key: str, *, now: datetime | None = None) -> Any | None:
        """Return the cached payload, or None on miss / expiry."""
        entry = self.get_entry(key, now=now)
        return entry.payload if entry else None

    def upsert(self, key: str, payload: Any, ttl: timedelta, *, now: datetime | None = None):
        """Insert or overwrite key with created_at=now and expires_at=now+ttl."""
        now = now or utcnow()
        key = storage_key(key)
        payload_json = json.dumps(payload)
        expires_at = now + ttl
        row = self.db.query(self.model).filter(self.model.cache_key == key).first()
        if row:
            row.payload_json = payload_json
            row.created_at = now
            row.expires_at = expires_at
        else:
            row = self.model(cache_key=key, payload_json=payload_json, created_at=now, expires_at=expires_at)
            self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent miss on the same key inserted first; overwrite it.
            self.db.rollback()
            row = self.db.query(self.model).filter(self.model.cache_key == key).one()
            row.payload_json = payload_json
            row.created_at = now
            row.expires_at = expires_at
            self.db.commit()
        logger.debug("Cached %s in %s until %s", key, self.table_name, expires_at.isoformat())
        return row

    def delete_expired(self, *, now: datetime | None = None) -> int:
        """Delete rows with expires_at < now. Returns deleted count."""
        now = now or utcnow()
        deleted = (
            self.db.query(self.model)
            .filter(self.model.expires_at < now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def delete_created_since(self, since: datetime) -> int:
        """Delete rows with created_at >= since, regardless of expiry. Returns deleted count."""
        deleted = (
            self.db.query(self.model)
            .filter(self.model.created_at >= since)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def stats(self, *, now: datetime | None = None) -> dict[str, int]:
        now = now or utcnow()
        total = self.db.query(self.model).count()
        active = self.db.query(self.model).filter(self.model.expires_at > now).count()
        return {"total": total, "active": active, "expired": total - active}

    def live_entries(self, *, contains: str | None = None, now: datetime | None = None) -> Iterator[CacheEntry]:
        """Non-expired entries, newest first, optionally only keys containing `contains`."""
        now = now or utcnow()
        query = self.db.query(self.model).filter(self.model.expires_at > now)
        if contains:
            query = query.filter(self.model.cache_key.contains(contains, autoescape=True))
        for row in query.order_by(self.model.created_at.desc()):
            try:
                payload = json.loads(row.payload_json)
            except (TypeError, json.JSONDecodeError):
                logger.warning("Unreadable cache payload in %s for key %s", self.table_name, row.cache_key)
                continue
            yield CacheEntry(
                cache_key=row.cache_key,
                payload=payload,
                created_at=as_utc(row.created_at),
                expires_at=as_utc(row.expires_at),
            )

    def live_keys(self, *, now: datetime | None = None) -> list[str]:
        now = now or utcnow()
        return [k for (k,) in self.db.query(self.model.cache_key).filter(self.model.expires_at > now)]

    def delete_containing(self, fragment: str, *, keep_prefix: str | None = None) -> int:
        """Delete rows whose key contains `fragment`, except keys starting with `keep_prefix`."""
        query = self.db.query(self.model).filter(self.model.cache_key.contains(fragment, autoescape=True))
        if keep_prefix:
            query = query.filter(~self.model.cache_key.startswith(keep_prefix, autoescape=True))
        deleted = query.delete(synchronize_session=False)
        self.db.commit()
        return deleted

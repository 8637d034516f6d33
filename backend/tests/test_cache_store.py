from datetime import timedelta

from justmoved.models import BusinessCache, RecommendationsCache
from justmoved.services.cache_store import CacheStore, as_utc, storage_key, utcnow


def test_upsert_then_get_returns_payload(db_session):
    store = CacheStore(db_session)
    payload = {"website": "https://joes.example", "phone": "(555) 010-0000", "opening_hours": None}
    store.upsert("details_abc", payload, timedelta(days=180))

    assert store.get("details_abc") == payload


def test_get_before_expiry_hits_and_after_expiry_misses(db_session):
    store = CacheStore(db_session)
    now = utcnow()
    store.upsert("k", [1, 2, 3], timedelta(hours=2), now=now)

    assert store.get("k", now=now + timedelta(hours=1, minutes=59)) == [1, 2, 3]
    assert store.get("k", now=now + timedelta(hours=2)) is None
    # Expired rows stay until the sweep removes them
    assert db_session.query(RecommendationsCache).filter_by(cache_key="k").count() == 1


def test_missing_key_is_a_miss(db_session):
    assert CacheStore(db_session).get("nope") is None


def test_upsert_overwrites_existing_key(db_session):
    store = CacheStore(db_session)
    now = utcnow()
    store.upsert("k", {"v": 1}, timedelta(hours=1), now=now - timedelta(hours=3))
    store.upsert("k", {"v": 2}, timedelta(days=1), now=now)

    entry = store.get_entry("k", now=now)
    assert entry.payload == {"v": 2}
    assert abs(entry.expires_at - (now + timedelta(days=1))) < timedelta(seconds=1)
    assert db_session.query(RecommendationsCache).count() == 1


def test_tables_are_independent(db_session):
    recs = CacheStore(db_session)
    businesses = CacheStore(db_session, BusinessCache)
    recs.upsert("same", "recs", timedelta(hours=1))
    businesses.upsert("same", "biz", timedelta(hours=1))

    assert recs.get("same") == "recs"
    assert businesses.get("same") == "biz"
    assert businesses.table_name == "business_cache"


def test_delete_expired_only_removes_expired(db_session):
    store = CacheStore(db_session)
    now = utcnow()
    store.upsert("old", 1, timedelta(hours=1), now=now - timedelta(hours=2))
    store.upsert("live", 2, timedelta(hours=1), now=now)

    assert store.delete_expired(now=now) == 1
    assert store.get("live", now=now) == 2
    assert store.stats(now=now) == {"total": 1, "active": 1, "expired": 0}


def test_delete_created_since_ignores_expiry(db_session):
    store = CacheStore(db_session)
    now = utcnow()
    store.upsert("recent", 1, timedelta(days=180), now=now - timedelta(hours=1))
    store.upsert("older", 2, timedelta(days=180), now=now - timedelta(days=2))

    assert store.delete_created_since(now - timedelta(hours=24)) == 1
    assert store.get("recent", now=now) is None
    assert store.get("older", now=now) == 2


def test_as_utc_adds_timezone_to_naive_values():
    now = utcnow()
    assert as_utc(now.replace(tzinfo=None)) == now
    assert as_utc(None) is None


def test_long_keys_are_stored_within_column_width(db_session):
    store = CacheStore(db_session)
    long_key = "filter_Restaurants_takeout_" + "Hartford " * 200 + "_10000"
    other_key = long_key + "x"
    store.upsert(long_key, "a", timedelta(hours=1))
    store.upsert(other_key, "b", timedelta(hours=1))

    assert store.get(long_key) == "a"
    assert store.get(other_key) == "b"
    stored = {r.cache_key for r in db_session.query(RecommendationsCache)}
    assert all(len(k) <= 512 for k in stored)
    assert storage_key(long_key) in stored
    assert storage_key("short") == "short"

"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL or reporting per-table results. Both cache tables share the
cache-entry columns (cache_key, payload_json, created_at, expires_at); cleanup jobs rely on that.
"""
RECOMMENDATIONS_CACHE_TABLE = "recommendations_cache"
BUSINESS_CACHE_TABLE = "business_cache"

# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    RECOMMENDATIONS_CACHE_TABLE,
    BUSINESS_CACHE_TABLE,
)

# Tables swept by the cleanup jobs, in the order they are reported.
CACHE_TABLE_NAMES = (
    RECOMMENDATIONS_CACHE_TABLE,
    BUSINESS_CACHE_TABLE,
)

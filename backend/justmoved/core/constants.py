"""
Centralized constants for lookups, cache keys and scheduler jobs.

Change limits or job IDs here instead of scattering literals across routes and services.
Lifetimes that operators may tune (TTL days/hours, sweep interval) come from settings.
"""

# Scheduler job IDs (must match ids used in main.py add_job)
CACHE_SWEEP_JOB_ID = "cache_sweep"

# Search (autocomplete)
SEARCH_DEFAULT_LIMIT = 5
SEARCH_MIN_LIMIT = 1
SEARCH_MAX_LIMIT = 20
AUTOCOMPLETE_BIAS_RADIUS_METERS = 50_000  # 50 km around the "lat,lng" bias
AUTOCOMPLETE_PLACE_TYPES = "establishment"

# Details
MAX_BATCH_PLACE_IDS = 20
PLACE_DETAILS_FIELDS = (
    "name",
    "formatted_address",
    "rating",
    "formatted_phone_number",
    "website",
    "opening_hours",
    "types",
    "geometry",
)
BUSINESS_DETAILS_FIELDS = (
    "website",
    "formatted_phone_number",
    "opening_hours",
    "business_status",
)
BUSINESS_ENRICHMENT_FIELDS = (
    "formatted_phone_number",
    "website",
    "opening_hours",
    "photos",
)
BUSINESS_DETAILS_CACHE_PREFIX = "details_"
MAX_CACHE_KEY_LENGTH = 512  # cache_key column width

# Filter recommendations
DEFAULT_FILTER_RADIUS_METERS = 10_000
TEXT_SEARCH_RESULTS_PER_TERM = 10
FILTER_RESULTS_LIMIT = 20
PHOTO_MAX_WIDTH = 400

# Explore results cache (keys: [v<version>-]explore_<lat>_<lng>_<categories>)
EXPLORE_CACHE_KEY_PREFIX = "explore_"
EXPLORE_COORD_PRECISION = 0.02  # degrees, about 2 miles
EXPLORE_FUZZY_CANDIDATES = 5
DEFAULT_APP_VERSION = "1.0.0"

# Geocoding: fallback when the provider cannot resolve the address (central Connecticut)
DEFAULT_COORDINATES = {"lat": 41.8394397, "lng": -72.7516033}
GEOCODE_MAX_ADDRESS_LENGTH = 200
GEOCODE_FORBIDDEN_CHARS = "<>\"'`"
RATE_LIMIT_WINDOW_SECONDS = 60

# Provider statuses
STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"

"""
Business details (website, phone, hours, status) with a 180-day cache in recommendations_cache.
A cache hit makes zero provider calls; a miss makes one and writes the result back.
"""
import logging
from datetime import timedelta
from typing import Any

from sqlalchemy.orm import Session

from justmoved.config import settings
from justmoved.core.constants import BUSINESS_DETAILS_CACHE_PREFIX, BUSINESS_DETAILS_FIELDS, STATUS_OK
from justmoved.core.errors import InvalidInput, ProviderError, STATUS_INTERNAL_ERROR
from justmoved.services.cache_store import CacheStore, utcnow
from justmoved.services.places.client import GooglePlacesClient
from justmoved.services.places.types import BusinessDetails

logger = logging.getLogger(__name__)


def business_details_cache_key(place_id: str) -> str:
    return f"{BUSINESS_DETAILS_CACHE_PREFIX}{place_id}"


async def get_business_details(
    db: Session,
    client: GooglePlacesClient,
    place_id: str | None,
    business_name: str | None = None,
) -> dict[str, Any]:
    """Return cached details when live, else fetch, cache for business_details_ttl_days and return."""
    if not place_id:
        # This endpoint has always reported a missing id as a server error.
        raise InvalidInput("place_id is required", status_code=STATUS_INTERNAL_ERROR, details=None)

    logger.info("Fetching details for business: %s, place_id: %s", business_name, place_id)
    store = CacheStore(db)
    cache_key = business_details_cache_key(place_id)
    cached = store.get(cache_key)
    if cached is not None:
        logger.info("Returning cached details for %s", business_name)
        return cached

    client.ensure_configured()
    data = await client.details(place_id, BUSINESS_DETAILS_FIELDS)
    status = data.get("status")
    if status != STATUS_OK:
        logger.error("Google Places API error for %s: %s", business_name, status)
        raise ProviderError(f"Google Places API error: {status}", provider_status=status, details=None)

    now = utcnow()
    details = BusinessDetails.from_result(data.get("result") or {}, fetched_at=now)
    payload = details.model_dump()
    store.upsert(cache_key, payload, timedelta(days=settings.business_details_ttl_days), now=now)
    logger.info("Successfully fetched and cached details for %s", business_name)
    return payload

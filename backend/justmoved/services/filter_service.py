"""
Filtered recommendations: businesses for a (category, filter) pair near a location.

Each pair is cached in recommendations_cache for filter_results_ttl_hours. On a miss the provider
text search runs once per search term; each new business is enriched from business_cache
(180 days), falling back to a details call.
"""
import asyncio
import json
import logging
from datetime import timedelta
from typing import Any

from sqlalchemy.orm import Session

from justmoved.config import settings
from justmoved.core.constants import (
    BUSINESS_ENRICHMENT_FIELDS,
    DEFAULT_FILTER_RADIUS_METERS,
    FILTER_RESULTS_LIMIT,
    TEXT_SEARCH_RESULTS_PER_TERM,
)
from justmoved.core.errors import InvalidInput, NetworkError, ProviderError
from justmoved.data.filter_search_terms import get_filter_search_terms
from justmoved.models.business_cache import BusinessCache
from justmoved.services.cache_store import CacheStore
from justmoved.services.places.client import GooglePlacesClient
from justmoved.services.places.types import Business, BusinessEnrichment, RawPlaceResult

logger = logging.getLogger(__name__)


def filter_cache_key(category: str, filter_name: str, location: str | None, radius: int) -> str:
    return f"filter_{category}_{filter_name}_{location}_{radius}"


def subcategory_name(category: str, filter_name: str) -> str:
    """Response key, e.g. ("Medical care", "pharmacy") -> "Medical care - Pharmacy"."""
    return f"{category} - {filter_name[:1].upper()}{filter_name[1:]}"


async def get_business_enrichment(
    db: Session, client: GooglePlacesClient, place_id: str
) -> BusinessEnrichment | None:
    """Phone/website/hours/photo for one business; business_cache first, then a details call."""
    if not place_id:
        return None
    store = CacheStore(db, BusinessCache)
    cached = store.get(place_id)
    if cached is not None:
        logger.debug("Business cache hit for %s", place_id)
        return BusinessEnrichment(**cached)

    logger.debug("Business cache miss for %s, fetching details", place_id)
    try:
        data = await client.details(place_id, BUSINESS_ENRICHMENT_FIELDS)
    except (ProviderError, NetworkError) as e:
        logger.warning("Error fetching details for %s: %s", place_id, e)
        return None
    result = data.get("result")
    if not result:
        return None
    photos = result.get("photos") or []
    photo_ref = photos[0].get("photo_reference") if photos else None
    enrichment = BusinessEnrichment(
        phone=result.get("formatted_phone_number"),
        website=result.get("website"),
        hours=result.get("opening_hours"),
        photo_url=client.photo_url(photo_ref) if photo_ref else None,
    )
    store.upsert(place_id, enrichment.model_dump(), timedelta(days=settings.business_details_ttl_days))
    return enrichment


def _to_business(
    place: RawPlaceResult, enrichment: BusinessEnrichment | None, client: GooglePlacesClient
) -> Business:
    types = place.get("types") or []
    location = (place.get("geometry") or {}).get("location") or {}
    photos = place.get("photos") or []
    image = enrichment.photo_url if enrichment else None
    if not image and photos and photos[0].get("photo_reference"):
        image = client.photo_url(photos[0]["photo_reference"])
    return Business(
        place_id=place["place_id"],
        name=place.get("name") or "",
        address=place.get("formatted_address") or "",
        description=f"{', '.join(types)} - {place.get('name') or ''}",
        rating=place.get("rating"),
        features=types,
        latitude=location.get("lat"),
        longitude=location.get("lng"),
        phone=enrichment.phone if enrichment else None,
        website=enrichment.website if enrichment else None,
        hours=json.dumps(enrichment.hours) if enrichment and enrichment.hours else None,
        image=image,
    )


async def search_businesses(
    db: Session,
    client: GooglePlacesClient,
    search_terms: list[str],
    location: str,
    radius: int = DEFAULT_FILTER_RADIUS_METERS,
) -> list[Business]:
    """Text search per term, dedupe by place_id, keep the first FILTER_RESULTS_LIMIT."""
    businesses: list[Business] = []
    seen: set[str] = set()
    for term in search_terms:
        try:
            data = await client.text_search(f"{term} near {location}", radius=radius)
        except (ProviderError, NetworkError) as e:
            logger.error("Error searching for %s: %s", term, e)
            continue
        places = [
            p for p in (data.get("results") or [])[:TEXT_SEARCH_RESULTS_PER_TERM] if p.get("place_id")
        ]
        fresh: list[RawPlaceResult] = []
        for place in places:
            if place["place_id"] not in seen:
                seen.add(place["place_id"])
                fresh.append(place)
        enrichments = await asyncio.gather(
            *(get_business_enrichment(db, client, p["place_id"]) for p in fresh)
        )
        businesses.extend(_to_business(p, e, client) for p, e in zip(fresh, enrichments))
    return businesses[:FILTER_RESULTS_LIMIT]


def _normalize_filters(filter_name: str | None, filters: list[str] | None) -> list[str]:
    out: list[str] = []
    for f in ([filter_name] if filter_name else []) + list(filters or []):
        f = (f or "").strip()
        if f and f not in out:
            out.append(f)
    return out


async def filter_recommendations(
    db: Session,
    client: GooglePlacesClient,
    category: str | None,
    filter_name: str | None = None,
    filters: list[str] | None = None,
    location: str | None = None,
    radius: int = DEFAULT_FILTER_RADIUS_METERS,
    user_id: str | None = None,
) -> dict[str, list[dict[str, Any]]]:
    """Return {"<Category> - <Filter>": [business, ...]} for each requested filter."""
    category = (category or "").strip()
    wanted = _normalize_filters(filter_name, filters)
    if not category or not wanted:
        raise InvalidInput("Category and filter are required")

    store = CacheStore(db)
    ttl = timedelta(hours=settings.filter_results_ttl_hours)
    response: dict[str, list[dict[str, Any]]] = {}
    for f in wanted:
        cache_key = filter_cache_key(category, f, location, radius)
        businesses = store.get(cache_key)
        if businesses is None:
            logger.info("Cache miss for %s, fetching from API (user=%s)", cache_key, user_id)
            if not location:
                raise InvalidInput("Location is required for new searches")
            client.ensure_configured()
            found = await search_businesses(db, client, get_filter_search_terms(category, f), location, radius)
            businesses = [b.model_dump() for b in found]
            store.upsert(cache_key, businesses, ttl)
        else:
            logger.info("Cache hit for %s", cache_key)
        response[subcategory_name(category, f)] = businesses
    return response

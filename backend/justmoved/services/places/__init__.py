"""Places lookups: search, details (single/batch) and geocoding. Validation here; client below just sends the request."""
import asyncio
import logging
from typing import Any

from justmoved.core.constants import (
    DEFAULT_COORDINATES,
    GEOCODE_FORBIDDEN_CHARS,
    GEOCODE_MAX_ADDRESS_LENGTH,
    MAX_BATCH_PLACE_IDS,
    PLACE_DETAILS_FIELDS,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MAX_LIMIT,
    SEARCH_MIN_LIMIT,
    STATUS_OK,
    STATUS_ZERO_RESULTS,
)
from justmoved.core.errors import InvalidInput, NetworkError, ProviderError, TooManyRequested
from justmoved.services.places.client import GooglePlacesClient
from justmoved.services.places.config import PlacesConfig
from justmoved.services.places.types import GeocodeResult, LatLng, PlaceRecord

logger = logging.getLogger(__name__)

__all__ = [
    "GooglePlacesClient",
    "PlacesConfig",
    "clamp_limit",
    "geocode_address",
    "get_place_details",
    "get_place_details_batch",
    "lookup_place_details",
    "search_places",
]


def clamp_limit(limit: Any) -> int:
    """Clamp a requested result count to [1, 20]; non-numeric falls back to the default."""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        value = SEARCH_DEFAULT_LIMIT
    return min(max(value, SEARCH_MIN_LIMIT), SEARCH_MAX_LIMIT)


async def search_places(
    client: GooglePlacesClient,
    query: str | None,
    limit: Any = SEARCH_DEFAULT_LIMIT,
    location: str | None = None,
) -> dict[str, Any]:
    """Autocomplete predictions truncated to the clamped limit. Every call hits the provider."""
    if not query or not str(query).strip():
        raise InvalidInput("Query is required")
    max_results = clamp_limit(limit)
    client.ensure_configured()
    data = await client.autocomplete(str(query), location=(location or None))
    status = data.get("status")
    logger.info(
        "search_places query=%r status=%s predictions=%s",
        query,
        status,
        len(data.get("predictions") or []),
    )
    if status not in (STATUS_OK, STATUS_ZERO_RESULTS):
        raise ProviderError(
            f"Google Places API error: {status}",
            provider_status=status,
            details=data.get("error_message") or "No additional details",
            google_status=status,
        )
    return {**data, "predictions": (data.get("predictions") or [])[:max_results]}


async def get_place_details(client: GooglePlacesClient, place_id: str) -> PlaceRecord:
    """Details for one place; raises ProviderError on a non-OK status."""
    data = await client.details(place_id, PLACE_DETAILS_FIELDS)
    status = data.get("status")
    if status != STATUS_OK:
        raise ProviderError(f"Google Places API error: {status}", provider_status=status)
    return PlaceRecord.from_result(place_id, data.get("result") or {})


async def _details_or_none(client: GooglePlacesClient, place_id: str) -> PlaceRecord | None:
    try:
        return await get_place_details(client, place_id)
    except Exception as e:
        # Any per-id failure (provider, transport, unparseable record) leaves a null slot
        logger.warning("Details lookup failed for %s: %s", place_id, e)
        return None


async def get_place_details_batch(
    client: GooglePlacesClient, place_ids: list[str]
) -> list[PlaceRecord | None]:
    """
    Concurrent details for up to 20 ids. Output is positional: one slot per input id, None where
    that lookup failed. Repeated ids are fetched once per occurrence.
    """
    if not place_ids:
        raise InvalidInput("At least one place_id is required")
    if len(place_ids) > MAX_BATCH_PLACE_IDS:
        raise TooManyRequested(f"Maximum {MAX_BATCH_PLACE_IDS} place_ids per request")
    client.ensure_configured()
    results = await asyncio.gather(*(_details_or_none(client, pid) for pid in place_ids))
    logger.info(
        "Batch details: %s requested, %s failed",
        len(place_ids),
        sum(1 for r in results if r is None),
    )
    return list(results)


async def lookup_place_details(
    client: GooglePlacesClient,
    place_id: str | None = None,
    place_ids: list[str] | None = None,
) -> dict[str, Any]:
    """Single record for place_id, else {results: [...]} for place_ids."""
    if place_ids is not None:
        records = await get_place_details_batch(client, place_ids)
        return {"results": [r.model_dump() if r else None for r in records]}
    if not place_id:
        raise InvalidInput("Place ID is required")
    client.ensure_configured()
    record = await get_place_details(client, place_id)
    return record.model_dump()


def validate_address(address: Any) -> str:
    if not address:
        raise InvalidInput("Address is required")
    if (
        not isinstance(address, str)
        or len(address) > GEOCODE_MAX_ADDRESS_LENGTH
        or any(ch in address for ch in GEOCODE_FORBIDDEN_CHARS)
    ):
        logger.warning("Invalid address input: %s...", str(address)[:20])
        raise InvalidInput("Invalid address format")
    return address


async def geocode_address(client: GooglePlacesClient, address: Any) -> GeocodeResult:
    """
    Resolve an address to coordinates. When the provider cannot resolve it (non-OK status or
    transport failure) fall back to the default coordinate with the input address.
    """
    address = validate_address(address)
    client.ensure_configured()
    try:
        data = await client.geocode(address)
    except (ProviderError, NetworkError) as e:
        logger.warning("Geocoding failed for %r, using default coordinates: %s", address, e)
        data = {}
    results = data.get("results") or []
    if data.get("status") == STATUS_OK and results:
        first = results[0]
        location = (first.get("geometry") or {}).get("location") or {}
        if "lat" in location and "lng" in location:
            return GeocodeResult(
                coordinates=LatLng(lat=location["lat"], lng=location["lng"]),
                formatted_address=first.get("formatted_address") or address,
            )
    logger.info("Geocoding returned status=%s for %r; using default coordinates", data.get("status"), address)
    return GeocodeResult(coordinates=LatLng(**DEFAULT_COORDINATES), formatted_address=address)

"""
Places lookups: autocomplete search, details (single or batch), cached business details, geocoding.

Request fields are optional so missing values reach service validation and come back as
400 InvalidInput rather than 422.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from justmoved.api.deps import get_geocode_rate_limiter, get_places_client
from justmoved.config import settings
from justmoved.core.constants import SEARCH_DEFAULT_LIMIT
from justmoved.core.errors import PlacesError
from justmoved.core.rate_limit import RateLimiter
from justmoved.db.session import get_db
from justmoved.services.business_details_service import get_business_details
from justmoved.services.places import geocode_address, lookup_place_details, search_places
from justmoved.services.places.client import GooglePlacesClient

router = APIRouter()
logger = logging.getLogger(__name__)


class SearchPlacesRequest(BaseModel):
    query: str | None = None
    limit: Any = SEARCH_DEFAULT_LIMIT
    location: str | None = None  # "lat,lng"


class PlaceDetailsRequest(BaseModel):
    place_id: str | None = None
    place_ids: list[str] | None = None


class BusinessDetailsRequest(BaseModel):
    place_id: str | None = None
    business_name: str | None = None


class GeocodeRequest(BaseModel):
    address: Any = None


@router.post("/search")
async def search(
    body: SearchPlacesRequest,
    client: GooglePlacesClient = Depends(get_places_client),
) -> dict[str, Any]:
    """Autocomplete predictions for establishments, truncated to limit (clamped 1-20). Not cached."""
    return await search_places(client, body.query, body.limit, body.location)


@router.post("/details")
async def details(
    body: PlaceDetailsRequest,
    client: GooglePlacesClient = Depends(get_places_client),
) -> dict[str, Any]:
    """
    One place object for place_id, or {results: [...]} for place_ids (max 20).
    Batch slots whose lookup failed are null; order always matches place_ids.
    """
    return await lookup_place_details(client, place_id=body.place_id, place_ids=body.place_ids)


@router.post("/business-details")
async def business_details(
    body: BusinessDetailsRequest,
    db: Session = Depends(get_db),
    client: GooglePlacesClient = Depends(get_places_client),
) -> dict[str, Any]:
    """Website, phone, hours and status; served from the 180-day cache when present."""
    try:
        return await get_business_details(db, client, body.place_id, body.business_name)
    except PlacesError as e:
        logger.error("Error in business details for %s: %s", body.place_id, e)
        e.extra.setdefault("details", None)
        raise


def _client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for") if settings.trust_forwarded_for else None
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/geocode")
async def geocode(
    body: GeocodeRequest,
    request: Request,
    client: GooglePlacesClient = Depends(get_places_client),
    limiter: RateLimiter = Depends(get_geocode_rate_limiter),
) -> dict[str, Any]:
    """Coordinates for an address; falls back to the default coordinate when unresolved."""
    limiter.hit(_client_key(request))
    result = await geocode_address(client, body.address)
    return result.model_dump()

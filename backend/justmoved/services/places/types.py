"""
Typed definitions for Places responses and the normalized records built from them.

Raw provider shapes are TypedDicts (we only read them). Normalized records are pydantic models
whose JSON dump keeps the field names clients already consume.
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import TypedDict


class RawLatLng(TypedDict, total=False):
    lat: float
    lng: float


class RawGeometry(TypedDict, total=False):
    location: RawLatLng


class RawOpeningHours(TypedDict, total=False):
    open_now: bool
    weekday_text: list[str]
    periods: list[dict[str, Any]]


class RawPhoto(TypedDict, total=False):
    photo_reference: str
    width: int
    height: int


class RawPlaceResult(TypedDict, total=False):
    """One result from details (result) or text search (results[])."""
    place_id: str
    name: str
    formatted_address: str
    rating: float
    formatted_phone_number: str
    website: str
    opening_hours: RawOpeningHours
    business_status: str  # e.g. "OPERATIONAL", "CLOSED_TEMPORARILY"
    types: list[str]
    geometry: RawGeometry
    photos: list[RawPhoto]


class LatLng(BaseModel):
    lat: float
    lng: float


class Geometry(BaseModel):
    location: LatLng | None = None


class OpeningHours(BaseModel):
    open_now: bool | None = None
    weekday_text: list[str] = Field(default_factory=list)


class PlaceRecord(BaseModel):
    """Normalized place details. Built once from a provider result; not mutated afterwards."""

    model_config = {"frozen": True}

    place_id: str
    name: str | None = None
    formatted_address: str | None = None
    rating: float | None = None
    formatted_phone_number: str | None = None
    website: str | None = None
    opening_hours: OpeningHours | None = None
    business_status: str | None = None
    types: list[str] = Field(default_factory=list)
    geometry: Geometry | None = None

    @classmethod
    def from_result(cls, place_id: str, result: RawPlaceResult) -> "PlaceRecord":
        hours = result.get("opening_hours")
        geometry = result.get("geometry") or {}
        location = geometry.get("location") or {}
        return cls(
            place_id=result.get("place_id") or place_id,
            name=result.get("name"),
            formatted_address=result.get("formatted_address"),
            rating=result.get("rating"),
            formatted_phone_number=result.get("formatted_phone_number"),
            website=result.get("website"),
            opening_hours=(
                OpeningHours(open_now=hours.get("open_now"), weekday_text=hours.get("weekday_text") or [])
                if hours
                else None
            ),
            business_status=result.get("business_status"),
            types=result.get("types") or [],
            geometry=(
                Geometry(location=LatLng(lat=location["lat"], lng=location["lng"]))
                if location.get("lat") is not None and location.get("lng") is not None
                else None
            ),
        )


class BusinessDetails(BaseModel):
    """Cached contact/hours snapshot for one business (details_<place_id>)."""

    website: str | None = None
    phone: str | None = None
    opening_hours: list[str] | None = None
    business_status: str | None = None
    fetched_at: str

    @classmethod
    def from_result(cls, result: RawPlaceResult, fetched_at: datetime) -> "BusinessDetails":
        hours = result.get("opening_hours") or {}
        return cls(
            website=result.get("website") or None,
            phone=result.get("formatted_phone_number") or None,
            opening_hours=hours.get("weekday_text") or None,
            business_status=result.get("business_status") or None,
            fetched_at=fetched_at.isoformat(),
        )


class BusinessEnrichment(BaseModel):
    """business_cache payload: extra fields merged into filter results."""

    phone: str | None = None
    website: str | None = None
    hours: RawOpeningHours | None = None
    photo_url: str | None = None


class Business(BaseModel):
    """One business in a filtered recommendation list."""

    place_id: str
    name: str
    address: str = ""
    description: str = ""
    rating: float | None = None
    features: list[str] = Field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None
    phone: str | None = None
    website: str | None = None
    hours: str | None = None
    image: str | None = None


class GeocodeResult(BaseModel):
    coordinates: LatLng
    formatted_address: str

from datetime import timedelta

import httpx
import pytest

from justmoved.api.deps import get_places_client
from justmoved.main import app
from justmoved.models import RecommendationsCache
from justmoved.services.business_details_service import business_details_cache_key, get_business_details
from justmoved.services.cache_store import CacheStore, as_utc, utcnow
from tests.conftest import details_response

JOES = {"place_id": "ChIJ123", "business_name": "Joe's Pharmacy"}


def _joes_details(request: httpx.Request):
    return details_response(
        "ChIJ123",
        website="https://joes.example",
        formatted_phone_number="(555) 010-0000",
        opening_hours={"weekday_text": ["Monday: 9 AM - 5 PM"]},
        business_status="OPERATIONAL",
    )


def test_first_call_fetches_and_caches_for_180_days(client, google, db_session):
    google.on("/place/details/json", _joes_details)
    before = utcnow()

    response = client.post("/places/business-details", json=JOES)

    assert response.status_code == 200
    data = response.json()
    assert data["website"] == "https://joes.example"
    assert data["phone"] == "(555) 010-0000"
    assert data["opening_hours"] == ["Monday: 9 AM - 5 PM"]
    assert data["business_status"] == "OPERATIONAL"
    assert data["fetched_at"]
    assert len(google.calls) == 1
    fields = google.calls[0].url.params["fields"].split(",")
    assert set(fields) == {"website", "formatted_phone_number", "opening_hours", "business_status"}

    row = db_session.query(RecommendationsCache).filter_by(cache_key="details_ChIJ123").one()
    expected = before + timedelta(days=180)
    assert abs(as_utc(row.expires_at) - expected) < timedelta(minutes=1)


def test_second_call_is_served_from_cache(client, google):
    google.on("/place/details/json", _joes_details)

    first = client.post("/places/business-details", json=JOES).json()
    second = client.post("/places/business-details", json=JOES).json()

    assert second == first
    assert len(google.calls) == 1


def test_expired_entry_is_refetched(client, google, db_session):
    google.on("/place/details/json", _joes_details)
    CacheStore(db_session).upsert(
        "details_ChIJ123",
        {"website": "stale", "phone": None, "opening_hours": None, "business_status": None, "fetched_at": "x"},
        timedelta(days=180),
        now=utcnow() - timedelta(days=181),
    )

    data = client.post("/places/business-details", json=JOES).json()

    assert data["website"] == "https://joes.example"
    assert len(google.calls) == 1


def test_missing_fields_are_null(client, google):
    google.on("/place/details/json", lambda r: details_response("ChIJ123"))

    data = client.post("/places/business-details", json=JOES).json()

    assert data["website"] is None
    assert data["phone"] is None
    assert data["opening_hours"] is None
    assert data["business_status"] is None


def test_provider_non_ok_is_500_and_not_cached(client, google, db_session):
    google.on("/place/details/json", lambda r: {"status": "NOT_FOUND"})

    response = client.post("/places/business-details", json=JOES)

    assert response.status_code == 500
    assert response.json() == {"error": "Google Places API error: NOT_FOUND", "details": None}
    assert db_session.query(RecommendationsCache).count() == 0


def test_missing_place_id_is_500(client, google):
    response = client.post("/places/business-details", json={"business_name": "Joe's Pharmacy"})

    assert response.status_code == 500
    assert response.json() == {"error": "place_id is required", "details": None}
    assert google.calls == []


def test_missing_credential_is_500(client, google):
    app.dependency_overrides[get_places_client] = lambda: google.client(api_key="")

    response = client.post("/places/business-details", json=JOES)

    assert response.status_code == 500
    assert response.json() == {"error": "Google Places API key not configured", "details": None}


@pytest.mark.asyncio
async def test_cache_hit_needs_no_credential(db_session, google):
    CacheStore(db_session).upsert(business_details_cache_key("ChIJ123"), {"website": "w"}, timedelta(days=1))

    result = await get_business_details(db_session, google.client(api_key=""), "ChIJ123", "Joe's")

    assert result == {"website": "w"}
    assert google.calls == []

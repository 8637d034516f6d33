import httpx
import pytest

from justmoved.core.errors import InvalidInput, TooManyRequested
from justmoved.services.places import get_place_details_batch
from justmoved.services.places.types import BusinessEnrichment
from tests.conftest import details_response


def _details_by_id(failing=()):
    def handler(request: httpx.Request):
        pid = request.url.params["place_id"]
        if pid in failing:
            return {"status": "NOT_FOUND"}
        return details_response(pid, name=f"Name {pid}", rating=4.5, geometry={"location": {"lat": 1.0, "lng": 2.0}})

    return handler


def test_single_details_returns_normalized_record(client, google):
    google.on(
        "/place/details/json",
        lambda r: details_response(
            "A",
            name="Joe's Pharmacy",
            formatted_address="1 Main St",
            opening_hours={"open_now": True, "weekday_text": ["Monday: 9 AM - 5 PM"]},
            types=["pharmacy", "store"],
            geometry={"location": {"lat": 41.8, "lng": -72.7}},
        ),
    )

    response = client.post("/places/details", json={"place_id": "A"})

    assert response.status_code == 200
    data = response.json()
    assert data["place_id"] == "A"
    assert data["name"] == "Joe's Pharmacy"
    assert data["opening_hours"]["weekday_text"] == ["Monday: 9 AM - 5 PM"]
    assert data["geometry"]["location"] == {"lat": 41.8, "lng": -72.7}
    fields = google.calls_to("/place/details/json")[0].url.params["fields"].split(",")
    assert {"name", "formatted_address", "rating", "opening_hours", "geometry"} <= set(fields)


def test_single_details_provider_failure_is_500(client, google):
    google.on("/place/details/json", lambda r: {"status": "INVALID_REQUEST"})

    response = client.post("/places/details", json={"place_id": "A"})

    assert response.status_code == 500
    assert response.json()["error"] == "Google Places API error: INVALID_REQUEST"


def test_details_missing_id_is_400(client):
    response = client.post("/places/details", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "Place ID is required"


def test_batch_keeps_order_with_null_for_failed_slot(client, google):
    google.on("/place/details/json", _details_by_id(failing={"B"}))

    response = client.post("/places/details", json={"place_ids": ["A", "B", "C"]})

    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 3
    assert results[0]["place_id"] == "A"
    assert results[1] is None
    assert results[2]["place_id"] == "C"


def test_batch_http_failure_is_null_slot(client, google):
    def handler(request):
        if request.url.params["place_id"] == "B":
            return httpx.Response(503, text="unavailable")
        return details_response(request.url.params["place_id"])

    google.on("/place/details/json", handler)

    results = client.post("/places/details", json={"place_ids": ["A", "B"]}).json()["results"]

    assert results[0]["place_id"] == "A"
    assert results[1] is None


def test_batch_of_twenty_succeeds(client, google):
    google.on("/place/details/json", _details_by_id())
    ids = [f"id{i}" for i in range(20)]

    response = client.post("/places/details", json={"place_ids": ids})

    assert response.status_code == 200
    assert [r["place_id"] for r in response.json()["results"]] == ids
    assert len(google.calls) == 20


def test_batch_of_twenty_one_is_rejected(client, google):
    response = client.post("/places/details", json={"place_ids": [f"id{i}" for i in range(21)]})

    assert response.status_code == 400
    assert "Maximum 20" in response.json()["error"]
    assert google.calls == []


def test_empty_batch_is_rejected(client, google):
    response = client.post("/places/details", json={"place_ids": []})

    assert response.status_code == 400
    assert google.calls == []


def test_batch_repeated_ids_fetch_once_per_occurrence(client, google):
    google.on("/place/details/json", _details_by_id())

    results = client.post("/places/details", json={"place_ids": ["A", "A"]}).json()["results"]

    assert [r["place_id"] for r in results] == ["A", "A"]
    assert len(google.calls) == 2


@pytest.mark.asyncio
async def test_batch_service_limits(places_client):
    with pytest.raises(InvalidInput):
        await get_place_details_batch(places_client, [])
    with pytest.raises(TooManyRequested):
        await get_place_details_batch(places_client, ["x"] * 21)


def test_batch_unparseable_record_is_null_slot(client, google):
    def handler(request):
        pid = request.url.params["place_id"]
        if pid == "B":
            return details_response("B", rating="not-a-number")
        return details_response(pid)

    google.on("/place/details/json", handler)

    response = client.post("/places/details", json={"place_ids": ["A", "B", "C"]})

    assert response.status_code == 200
    results = response.json()["results"]
    assert results[0]["place_id"] == "A"
    assert results[1] is None
    assert results[2]["place_id"] == "C"


def test_incomplete_location_drops_geometry(client, google):
    def handler(request):
        pid = request.url.params["place_id"]
        if pid == "B":
            return details_response("B", name="Half", geometry={"location": {"lat": 1.0}})
        return details_response(pid)

    google.on("/place/details/json", handler)

    results = client.post("/places/details", json={"place_ids": ["A", "B", "C"]}).json()["results"]

    assert [r["place_id"] for r in results] == ["A", "B", "C"]
    assert results[1]["name"] == "Half"
    assert results[1]["geometry"] is None


def test_enrichment_validates_provider_opening_hours():
    enrichment = BusinessEnrichment.model_validate(
        {"phone": "555", "hours": {"open_now": True, "weekday_text": ["Monday: 9 AM - 5 PM"]}}
    )

    assert enrichment.hours == {"open_now": True, "weekday_text": ["Monday: 9 AM - 5 PM"]}
    assert enrichment.website is None

import httpx
import pytest

from justmoved.config import settings
from justmoved.core.errors import RateLimited
from justmoved.core.rate_limit import RateLimiter

DEFAULT = {"lat": 41.8394397, "lng": -72.7516033}


def _geocoded(request: httpx.Request):
    return {
        "status": "OK",
        "results": [
            {"formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA", "geometry": {"location": {"lat": 37.42, "lng": -122.08}}}
        ],
    }


def test_geocode_resolves_address(client, google):
    google.on("/geocode/json", _geocoded)

    response = client.post("/places/geocode", json={"address": "1600 Amphitheatre Pkwy"})

    assert response.status_code == 200
    assert response.json() == {
        "coordinates": {"lat": 37.42, "lng": -122.08},
        "formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA",
    }
    assert google.calls[0].url.params["address"] == "1600 Amphitheatre Pkwy"


def test_geocode_zero_results_falls_back_to_default(client, google):
    google.on("/geocode/json", lambda r: {"status": "ZERO_RESULTS", "results": []})

    response = client.post("/places/geocode", json={"address": "Nowhere"})

    assert response.status_code == 200
    assert response.json() == {"coordinates": DEFAULT, "formatted_address": "Nowhere"}


def test_geocode_transport_failure_falls_back_to_default(client, google):
    def boom(request):
        raise httpx.ConnectError("unreachable", request=request)

    google.on("/geocode/json", boom)

    response = client.post("/places/geocode", json={"address": "Hartford, CT"})

    assert response.status_code == 200
    assert response.json()["coordinates"] == DEFAULT


@pytest.mark.parametrize("address", ["x" * 201, "<script>", 'say "hi"', 42])
def test_geocode_rejects_invalid_address(client, google, address):
    response = client.post("/places/geocode", json={"address": address})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid address format"
    assert google.calls == []


def test_geocode_missing_address_is_400(client):
    response = client.post("/places/geocode", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "Address is required"


def test_geocode_is_rate_limited_per_client(client, google):
    google.on("/geocode/json", _geocoded)
    for _ in range(20):
        assert client.post("/places/geocode", json={"address": "Hartford"}).status_code == 200

    response = client.post("/places/geocode", json={"address": "Hartford"})
    assert response.status_code == 429
    assert "Rate limit exceeded" in response.json()["error"]

    # Without a trusted proxy the header cannot buy a fresh window
    spoofed = client.post("/places/geocode", json={"address": "Hartford"}, headers={"x-forwarded-for": "10.0.0.9"})
    assert spoofed.status_code == 429


def test_geocode_uses_forwarded_client_behind_trusted_proxy(client, google, monkeypatch):
    monkeypatch.setattr(settings, "trust_forwarded_for", True)
    google.on("/geocode/json", _geocoded)
    for _ in range(20):
        client.post("/places/geocode", json={"address": "Hartford"}, headers={"x-forwarded-for": "10.0.0.1"})

    limited = client.post("/places/geocode", json={"address": "Hartford"}, headers={"x-forwarded-for": "10.0.0.1"})
    other = client.post("/places/geocode", json={"address": "Hartford"}, headers={"x-forwarded-for": "10.0.0.9, 10.0.0.1"})

    assert limited.status_code == 429
    assert other.status_code == 200


def test_rate_limiter_window_resets():
    limiter = RateLimiter(limit=2, window_seconds=60)
    limiter.hit("a", now=0)
    limiter.hit("a", now=1)
    with pytest.raises(RateLimited):
        limiter.hit("a", now=2)
    limiter.hit("a", now=60)


def test_rate_limiter_prunes_elapsed_windows():
    limiter = RateLimiter(limit=5, window_seconds=60)
    for i in range(1000):
        limiter.hit(f"client-{i}", now=i * 0.01)
    assert len(limiter) == 1000

    limiter.hit("late", now=200)

    assert len(limiter) == 1

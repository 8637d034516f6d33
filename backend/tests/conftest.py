import json
import logging
import os
from typing import Any, Callable

# Settings are read at import time; point them at an in-memory DB before importing the app.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GOOGLE_PLACES_API_KEY"] = "test-key"
os.environ["SCHEDULER_ENABLED"] = "false"

import httpx
import pytest
from fastapi.testclient import TestClient

from justmoved.api.deps import geocode_rate_limiter, get_places_client
from justmoved.db.base import Base
from justmoved.db.session import SessionLocal, engine
from justmoved.main import app
from justmoved.models import BusinessCache, RecommendationsCache  # noqa: F401
from justmoved.services.places.client import GooglePlacesClient
from justmoved.services.places.config import PlacesConfig

PLACES_BASE_URL = "https://places.test/maps/api"


class FakeGooglePlaces:
    """
    Stands in for the Places web service. Register a handler per endpoint suffix
    ("/place/details/json", ...); every request is recorded in `calls`.
    """

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.handlers: dict[str, Callable[[httpx.Request], Any]] = {}

    def on(self, suffix: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.handlers[suffix] = handler

    def calls_to(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.calls if r.url.path.endswith(suffix)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        for suffix, handler in self.handlers.items():
            if request.url.path.endswith(suffix):
                out = handler(request)
                if isinstance(out, httpx.Response):
                    return out
                return httpx.Response(200, json=out)
        return httpx.Response(404, text="no handler")

    def client(self, api_key: str = "test-key") -> GooglePlacesClient:
        return GooglePlacesClient(
            PlacesConfig(api_key=api_key, base_url=PLACES_BASE_URL, timeout=5.0),
            transport=httpx.MockTransport(self),
        )


def details_response(place_id: str, **result: Any) -> dict[str, Any]:
    return {"status": "OK", "result": {"place_id": place_id, **result}}


def json_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content or b"{}")


@pytest.fixture(autouse=True)
def setup_logging():
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("justmoved").setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh cache tables for every test."""
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def google() -> FakeGooglePlaces:
    return FakeGooglePlaces()


@pytest.fixture
def places_client(google: FakeGooglePlaces) -> GooglePlacesClient:
    return google.client()


@pytest.fixture
def client(google: FakeGooglePlaces) -> TestClient:
    """App client whose places lookups go to the fake provider."""
    app.dependency_overrides[get_places_client] = lambda: google.client()
    geocode_rate_limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    geocode_rate_limiter.reset()

"""Request-scoped dependencies shared by the routers."""
from justmoved.config import settings
from justmoved.core.rate_limit import RateLimiter
from justmoved.services.places.client import GooglePlacesClient

geocode_rate_limiter = RateLimiter(limit=settings.geocode_rate_limit_per_minute)


def get_places_client() -> GooglePlacesClient:
    """New client per request so the credential is read from current settings."""
    return GooglePlacesClient()


def get_geocode_rate_limiter() -> RateLimiter:
    return geocode_rate_limiter

"""Places provider config. Credential from settings (GOOGLE_PLACES_API_KEY) or PlacesConfig args."""
from justmoved.config import settings


class PlacesConfig:
    """API key, base URL and timeout for the Google Places web service."""

    __slots__ = ("api_key", "base_url", "timeout")

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = (api_key if api_key is not None else settings.google_places_api_key).strip()
        self.base_url = (base_url or settings.google_places_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.places_http_timeout_seconds

    def is_configured(self) -> bool:
        return bool(self.api_key)

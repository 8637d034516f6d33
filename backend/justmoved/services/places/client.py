"""Google Places client: lowest level, sends the request only. No validation of inputs."""
import logging
from typing import Any, Iterable

import httpx

from justmoved.core.constants import (
    AUTOCOMPLETE_BIAS_RADIUS_METERS,
    AUTOCOMPLETE_PLACE_TYPES,
    PHOTO_MAX_WIDTH,
)
from justmoved.core.errors import ConfigError, NetworkError, ProviderError
from justmoved.services.places.config import PlacesConfig

logger = logging.getLogger(__name__)


class GooglePlacesClient:
    """Autocomplete, details, text search and geocode against the Places web service."""

    def __init__(
        self,
        config: PlacesConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or PlacesConfig()
        self._transport = transport

    @property
    def config(self) -> PlacesConfig:
        return self._config

    def is_configured(self) -> bool:
        return self._config.is_configured()

    def ensure_configured(self) -> None:
        if not self._config.is_configured():
            raise ConfigError()

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        self.ensure_configured()
        url = f"{self._config.base_url}{path}"
        logger.debug("Places GET %s %s", path, params)
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as c:
                r = await c.get(url, params={**params, "key": self._config.api_key})
        except httpx.HTTPError as e:
            logger.warning("Places request %s failed: %s", path, e)
            raise NetworkError(f"Google Places API request failed: {e}") from e
        if not r.is_success:
            body = r.text[:500] if r.text else ""
            logger.warning("Places HTTP error %s on %s: %s", r.status_code, path, body)
            raise ProviderError(
                f"Google Places API HTTP error: {r.status_code} - {body}",
                provider_status=str(r.status_code),
            )
        try:
            return r.json() if r.content else {}
        except ValueError as e:
            raise ProviderError("Google Places API returned a non-JSON body") from e

    async def autocomplete(self, query: str, *, location: str | None = None) -> dict[str, Any]:
        """Autocomplete predictions for establishments; optional "lat,lng" bias with a 50 km radius."""
        params: dict[str, Any] = {"input": query, "types": AUTOCOMPLETE_PLACE_TYPES}
        if location:
            params["location"] = location
            params["radius"] = AUTOCOMPLETE_BIAS_RADIUS_METERS
        return await self._get("/place/autocomplete/json", params)

    async def details(self, place_id: str, fields: Iterable[str]) -> dict[str, Any]:
        """Raw details response ({status, result, ...}) for the requested field set."""
        return await self._get(
            "/place/details/json",
            {"place_id": place_id, "fields": ",".join(fields)},
        )

    async def text_search(self, query: str, *, radius: int) -> dict[str, Any]:
        return await self._get("/place/textsearch/json", {"query": query, "radius": radius})

    async def geocode(self, address: str) -> dict[str, Any]:
        return await self._get("/geocode/json", {"address": address})

    def photo_url(self, photo_reference: str, *, max_width: int = PHOTO_MAX_WIDTH) -> str:
        return (
            f"{self._config.base_url}/place/photo?maxwidth={max_width}"
            f"&photoreference={photo_reference}&key={self._config.api_key}"
        )

"""
Client-side filter state for recommendation categories.

Holds, per category: active filter set, loading flag, last filtered result and how many
results beyond the display limit came back. Talks to POST /recommendations/filter.
Failures never raise to the caller: they become a Notice and an empty result.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from justmoved.config import settings
from justmoved.core.constants import DEFAULT_FILTER_RADIUS_METERS
from justmoved.core.errors import NetworkError, PlacesError

logger = logging.getLogger(__name__)

DISPLAY_LIMIT = 10
FILTER_PATH = "/recommendations/filter"

LOCATION_REQUIRED = "location_required"
FILTER_APPLIED = "filter_applied"
FILTER_ERROR = "filter_error"
NETWORK_ERROR = "network_error"
LOAD_ERROR = "load_error"


@dataclass
class Notice:
    """User-facing toast."""

    kind: str
    title: str
    description: str
    destructive: bool = False


@dataclass
class FilterResult:
    recommendations: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    additional_results: int = 0
    applied_filters: list[str] = field(default_factory=list)


def _merge_unique(groups: dict[str, list[dict[str, Any]]]) -> list[dict[str, Any]]:
    """Flatten the per-subcategory map, dropping repeats of the same place_id (first wins)."""
    seen: set[str] = set()
    merged: list[dict[str, Any]] = []
    for businesses in groups.values():
        for b in businesses or []:
            key = b.get("place_id") or b.get("name")
            if key in seen:
                continue
            seen.add(key)
            merged.append(b)
    return merged


class RecommendationFilterClient:
    """Per-category filter toggling against the recommendations backend."""

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        display_limit: int = DISPLAY_LIMIT,
        radius: int = DEFAULT_FILTER_RADIUS_METERS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.places_http_timeout_seconds
        self.display_limit = display_limit
        self.radius = radius
        self.active_filters: dict[str, set[str]] = {}
        self.filtered_results: dict[str, FilterResult] = {}
        self.additional_results: dict[str, int] = {}
        self.loading: dict[str, bool] = {}
        self.notices: list[Notice] = []
        # Latest request number per category; older responses are discarded
        self._request_seq: dict[str, int] = {}

    def _notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    async def _post_filter(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{FILTER_PATH}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as c:
                r = await c.post(url, json=payload)
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error reaching recommendations backend: {e}") from e
        if not r.is_success:
            try:
                message = r.json().get("error") or r.text
            except ValueError:
                message = r.text
            raise PlacesError(message or f"HTTP {r.status_code}", status_code=r.status_code)
        return r.json()

    async def fetch_filtered_businesses(
        self,
        category: str,
        subfilter: str,
        location: str | None,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """One subfilter's businesses; on any failure notify and return []."""
        payload = {
            "category": category,
            "filter": subfilter,
            "location": location,
            "radius": self.radius,
            "userId": user_id,
        }
        try:
            data = await self._post_filter(payload)
        except PlacesError as e:
            logger.error("Error fetching filtered businesses for %s / %s: %s", category, subfilter, e)
            self._notify(
                Notice(LOAD_ERROR, "Error Loading Recommendations", "Could not load recommendations. Please try again.", True)
            )
            return []
        return _merge_unique(data)

    async def apply_filter(
        self,
        category: str,
        filter_name: str,
        location: str | None,
        user_id: str | None = None,
    ) -> FilterResult | None:
        """
        Toggle filter_name for category. An empty set clears local state without a request.
        Otherwise, no location: LocationRequired notice, no request, filter set unchanged.
        Returns the category's result, or None when the state was cleared or the call was rejected.
        """
        current = set(self.active_filters.get(category, set()))
        if filter_name in current:
            current.discard(filter_name)
        else:
            current.add(filter_name)

        if not current:
            self.clear_all_filters(category)
            return None

        if not location:
            self._notify(
                Notice(
                    LOCATION_REQUIRED,
                    "Location Required",
                    "Please set your location to filter recommendations.",
                    True,
                )
            )
            return None

        self.active_filters[category] = current
        seq = self._request_seq.get(category, 0) + 1
        self._request_seq[category] = seq
        self.loading[category] = True
        filters = sorted(current)
        try:
            data = await self._post_filter(
                {
                    "category": category,
                    "filters": filters,
                    "location": location,
                    "radius": self.radius,
                    "userId": user_id,
                }
            )
            merged = _merge_unique(data)
            result = FilterResult(
                recommendations=merged[: self.display_limit],
                total_count=len(merged),
                additional_results=max(0, len(merged) - self.display_limit),
                applied_filters=filters,
            )
        except NetworkError as e:
            logger.error("Network error applying filters %s to %s: %s", filters, category, e)
            self._notify(
                Notice(
                    NETWORK_ERROR,
                    "Network Error",
                    "Unable to connect to recommendation service. Please check your connection.",
                    True,
                )
            )
            result = FilterResult(applied_filters=filters)
        except PlacesError as e:
            logger.error("Error applying filters %s to %s: %s", filters, category, e)
            self._notify(Notice(FILTER_ERROR, "Filter Error", "Could not apply filter. Please try again.", True))
            result = FilterResult(applied_filters=filters)

        if self._request_seq.get(category) != seq:
            return self.filtered_results.get(category)
        self.loading[category] = False
        self.filtered_results[category] = result
        self.additional_results[category] = result.additional_results
        if result.additional_results > 0:
            self._notify(
                Notice(
                    FILTER_APPLIED,
                    "Filter Applied",
                    f"Found {result.total_count} matching options, showing {result.additional_results} additional results.",
                )
            )
        return result

    def clear_all_filters(self, category: str) -> None:
        """Drop all filter state for category. Other categories are untouched."""
        self.active_filters.pop(category, None)
        self.filtered_results.pop(category, None)
        self.additional_results.pop(category, None)
        self.loading.pop(category, None)
        self._request_seq[category] = self._request_seq.get(category, 0) + 1

    def selected_filters(self, category: str) -> list[str]:
        return sorted(self.active_filters.get(category, set()))

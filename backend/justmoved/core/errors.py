"""
Centralized error handling for lookup, cache and cleanup failures.
Exception types plus the helpers that turn them into JSON responses, so routes stay thin
and new error types are easy to add.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_TOO_MANY_REQUESTS = 429
STATUS_INTERNAL_ERROR = 500

MSG_API_KEY_MISSING = "Google Places API key not configured"
MSG_RATE_LIMITED = "Rate limit exceeded. Please try again later."
MSG_NETWORK = "Unable to reach the places provider. Please try again."


class PlacesError(Exception):
    """Base error: carries the HTTP status and any extra fields for the JSON body."""

    status_code: int = STATUS_INTERNAL_ERROR

    def __init__(self, message: str, *, status_code: int | None = None, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class InvalidInput(PlacesError):
    """Missing or malformed request fields."""

    status_code = STATUS_BAD_REQUEST


class TooManyRequested(PlacesError):
    """Batch size over the limit."""

    status_code = STATUS_BAD_REQUEST


class ConfigError(PlacesError):
    """Provider credential not configured."""

    status_code = STATUS_INTERNAL_ERROR

    def __init__(self, message: str = MSG_API_KEY_MISSING, **extra: Any) -> None:
        super().__init__(message, **extra)


class ProviderError(PlacesError):
    """Upstream returned a non-success HTTP or API status."""

    status_code = STATUS_INTERNAL_ERROR

    def __init__(self, message: str, *, provider_status: str | None = None, **extra: Any) -> None:
        super().__init__(message, **extra)
        self.provider_status = provider_status


class NetworkError(PlacesError):
    """Transport failure reaching the provider or the backend."""

    status_code = STATUS_INTERNAL_ERROR


class RateLimited(PlacesError):
    status_code = STATUS_TOO_MANY_REQUESTS

    def __init__(self, message: str = MSG_RATE_LIMITED, **extra: Any) -> None:
        super().__init__(message, **extra)


# ---------------------------------------------------------------------------
# Exception handlers (registered in main.py)
# ---------------------------------------------------------------------------


async def places_error_handler(request: Request, exc: PlacesError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are InvalidInput (400), not FastAPI's default 422."""
    return JSONResponse(
        status_code=STATUS_BAD_REQUEST,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )

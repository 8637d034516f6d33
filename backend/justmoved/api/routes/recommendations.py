"""
Filtered recommendations for one category and one or more filter tags.
"""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from justmoved.api.deps import get_places_client
from justmoved.core.constants import DEFAULT_FILTER_RADIUS_METERS
from justmoved.db.session import get_db
from justmoved.services.filter_service import filter_recommendations
from justmoved.services.places.client import GooglePlacesClient

router = APIRouter()


class FilterRecommendationsRequest(BaseModel):
    category: str | None = None
    filter: str | None = None
    filters: list[str] | None = None
    location: str | None = None
    radius: int = DEFAULT_FILTER_RADIUS_METERS
    user_id: str | None = Field(None, alias="userId")

    model_config = {"populate_by_name": True}


@router.post("/filter")
async def filter_recs(
    body: FilterRecommendationsRequest,
    db: Session = Depends(get_db),
    client: GooglePlacesClient = Depends(get_places_client),
) -> dict[str, list[dict[str, Any]]]:
    """Returns {"<Category> - <Filter>": [business, ...]} per requested filter (cached 2h per filter)."""
    return await filter_recommendations(
        db,
        client,
        body.category,
        filter_name=body.filter,
        filters=body.filters,
        location=body.location,
        radius=body.radius,
        user_id=body.user_id,
    )

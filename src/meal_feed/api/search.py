"""Search and recommendation endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from meal_feed.api.auth import current_user_id
from meal_feed.api.serializers import (
    meal_search_payload,
    recommendation_payload,
    user_search_payload,
)

if TYPE_CHECKING:
    from meal_feed.containers import AppContainer

router = APIRouter(prefix="/api/search", tags=["search"])

_logger = logging.getLogger(__name__)

SEARCH_TYPES = ("users", "meals")


@dataclass(frozen=True)
class SearchParams:
    """Validated search query parameters."""

    q: str
    type: str


def search_params(
    q: str | None = None,
    type: str | None = None,  # noqa: A002
) -> SearchParams:
    """Validate query parameters before any other work is done."""
    if q is None or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Invalid query parameter "q".',
        )
    if type not in SEARCH_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Type must be "users" or "meals".',
        )
    return SearchParams(q=q, type=type)


@router.get("")
async def search(
    request: Request,
    background_tasks: BackgroundTasks,
    params: SearchParams = Depends(search_params),
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Search users or meals by keyword."""
    container: AppContainer = request.app.state.container
    service = container.search_service
    if params.type == "users":
        try:
            users = await service.search_users(params.q)
        except Exception as exc:
            _logger.exception("User search failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Unable to search users.",
            ) from exc
        return {"results": [user_search_payload(user) for user in users]}

    background_tasks.add_task(service.record_search, user_id, params.q, "meals")
    try:
        meals = await service.search_meals(params.q)
    except Exception as exc:
        _logger.exception("Meal search failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to search meals.",
        ) from exc
    return {"results": [meal_search_payload(meal) for meal in meals]}


@router.get("/recommendation")
async def recommendation_feed(
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Return the caller's personalized meal feed."""
    container: AppContainer = request.app.state.container
    try:
        recommendations = await container.recommendation_service.recommend(user_id)
    except Exception as exc:
        _logger.exception(
            "Recommendation generation failed", extra={"user_id": user_id}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error generating recommendations",
        ) from exc
    return {
        "recommendations": [recommendation_payload(item) for item in recommendations]
    }

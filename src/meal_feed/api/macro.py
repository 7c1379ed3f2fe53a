"""Macro history endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status

from meal_feed.api.auth import current_user_id
from meal_feed.api.serializers import macro_history_payload

if TYPE_CHECKING:
    from meal_feed.containers import AppContainer

router = APIRouter(prefix="/api/macro", tags=["macro"])

_logger = logging.getLogger(__name__)


@router.get("/{user_id}/history")
async def macro_history(
    user_id: UUID,
    request: Request,
    caller_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Return the trailing 7 days of macro totals for a user."""
    container: AppContainer = request.app.state.container
    try:
        entries = await container.macro_history_service.get_history(
            user_id, owner=user_id == caller_id
        )
    except Exception as exc:
        _logger.exception("Macro history read failed", extra={"user_id": user_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch macro history",
        ) from exc
    return {"data": [macro_history_payload(entry) for entry in entries]}

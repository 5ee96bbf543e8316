"""On-demand chat sync for one user: ``POST /sync/chats`` with ``{"userId": "..."}``."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.api.dependencies import get_booking_client, get_session, get_sync_config
from chatsync.api.schemas.sync import SyncChatsResponse, SyncStatsSchema
from chatsync.clients.booking import BaseBookingClient
from chatsync.config.sync import SyncConfig
from chatsync.core.exceptions import ValidationError
from chatsync.core.timeutils import utcnow
from chatsync.services.user_sync_service import UserSyncService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sync", tags=["sync"])


async def _read_user_id(request: Request) -> str:
    try:
        body: Any = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    user_id = body.get("userId")
    if not user_id:
        raise ValidationError("Missing required field: userId", details={"field": "userId"})
    if not isinstance(user_id, str):
        raise ValidationError(
            "Invalid field type. userId must be a string", details={"field": "userId"},
        )
    return user_id


@router.post("/chats", response_model=SyncChatsResponse)
async def sync_chats(
    request: Request,
    session: AsyncSession = Depends(get_session),
    client: BaseBookingClient = Depends(get_booking_client),
    config: SyncConfig = Depends(get_sync_config),
):
    user_id = await _read_user_id(request)
    stats = await UserSyncService(session, client, config).sync_user(user_id, utcnow())
    return SyncChatsResponse(
        message="Chats synchronized successfully",
        stats=SyncStatsSchema(**stats.to_response()),
    )


@router.options("/chats", include_in_schema=False)
async def sync_chats_preflight() -> Response:
    return Response(status_code=204)


@router.api_route(
    "/chats", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False,
)
async def sync_chats_method_not_allowed(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=405,
        content={
            "success": False,
            "error": f"Method {request.method} not allowed. Use POST.",
            "errorCode": 405,
        },
        headers={"Allow": "POST, OPTIONS"},
    )

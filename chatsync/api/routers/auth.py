"""Auth router: SMS code, code login and password login against the booking provider."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.api.dependencies import get_booking_client, get_session
from chatsync.api.schemas.auth import (
    AuthResponse,
    CodeLoginRequest,
    PasswordLoginRequest,
    SmsCodeRequest,
)
from chatsync.clients.booking import BaseBookingClient
from chatsync.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address)


@router.post("/sms-code")
@limiter.limit("5/minute")
async def send_sms_code(
    request: Request,
    body: SmsCodeRequest,
    session: AsyncSession = Depends(get_session),
    client: BaseBookingClient = Depends(get_booking_client),
):
    sent = await AuthService(session, client).send_sms_code(body.phone, body.fullname)
    return {"success": sent}


@router.post("/code", response_model=AuthResponse)
async def login_with_code(
    body: CodeLoginRequest,
    session: AsyncSession = Depends(get_session),
    client: BaseBookingClient = Depends(get_booking_client),
):
    result = await AuthService(session, client).login_with_code(body.phone, body.code)
    return result.to_response()


@router.post("/password", response_model=AuthResponse)
async def login_with_password(
    body: PasswordLoginRequest,
    session: AsyncSession = Depends(get_session),
    client: BaseBookingClient = Depends(get_booking_client),
):
    result = await AuthService(session, client).login_with_password(body.login, body.password)
    return result.to_response()

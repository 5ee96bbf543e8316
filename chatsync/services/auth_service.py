"""AuthService: log users in against the booking provider and link their identity.

Only the minimum needed to route chats to people: an IdentityMapping per
provider identity (token refreshed on every login) and the internal User that
points at it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.clients.booking import AuthData, BaseBookingClient
from chatsync.core.exceptions import BookingProviderError, UnauthorizedError, ValidationError
from chatsync.core.phone import normalize_phone
from chatsync.infra.database.models.identity import IdentityMapping
from chatsync.infra.database.repositories.identity import (
    IdentityMappingRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user_id: UUID
    identity_mapping_id: UUID
    user_token: str
    name: str
    client_id: Optional[int]
    staff_id: Optional[int]
    created: bool

    def to_response(self) -> dict:
        return {
            "success": True,
            "userId": str(self.user_id),
            "userToken": self.user_token,
            "name": self.name,
            "clientId": self.client_id,
            "staffId": self.staff_id,
            "created": self.created,
        }


def _rejected(exc: BookingProviderError) -> bool:
    """A 4xx, or ``success: false`` on a 2xx, means bad credentials rather than an outage."""
    return exc.status is not None and exc.status < 500


class AuthService:
    def __init__(self, session: AsyncSession, client: BaseBookingClient) -> None:
        self._client = client
        self._identities = IdentityMappingRepository(session)
        self._users = UserRepository(session)

    async def send_sms_code(self, phone: str, fullname: Optional[str] = None) -> bool:
        normalized = normalize_phone(phone)
        if normalized is None:
            raise ValidationError("Invalid phone number", details={"field": "phone"})
        sent = await self._client.send_sms_code(normalized, fullname)
        logger.info("SMS code requested for %s: %s", normalized, "sent" if sent else "not sent")
        return sent

    async def login_with_code(self, phone: str, code: str) -> AuthResult:
        normalized = normalize_phone(phone)
        if normalized is None or not code:
            raise ValidationError("Phone and code are required")
        try:
            response = await self._client.authenticate_by_code(normalized, code)
        except BookingProviderError as exc:
            if _rejected(exc):
                raise UnauthorizedError("Authentication failed", details={"provider_status": exc.status}) from exc
            raise
        return await self._link(response.data, fallback_phone=normalized)

    async def login_with_password(self, login: str, password: str) -> AuthResult:
        if not login or not password:
            raise ValidationError("Login and password are required")
        try:
            response = await self._client.authenticate_by_password(login, password)
        except BookingProviderError as exc:
            if _rejected(exc):
                raise UnauthorizedError("Authentication failed", details={"provider_status": exc.status}) from exc
            raise
        return await self._link(response.data, fallback_phone=normalize_phone(login))

    async def _find_staff_id(self, phone: Optional[str]) -> Optional[int]:
        if phone is None:
            return None
        try:
            staff_list = await self._client.fetch_staff_list()
        except BookingProviderError:
            logger.warning("Staff list unavailable, staff id not linked for %s", phone)
            return None
        for staff in staff_list.data or []:
            if normalize_phone(staff.phone) == phone:
                return staff.id
        return None

    async def _find_identity(self, client_id: int, phone: Optional[str]) -> Optional[IdentityMapping]:
        identity = await self._identities.get_by_client_id(client_id)
        if identity is None and phone is not None:
            identity = await self._identities.get_by_phone(phone)
        return identity

    async def _link(self, data: Optional[AuthData], *, fallback_phone: Optional[str]) -> AuthResult:
        if data is None:
            raise UnauthorizedError("Authentication failed")
        phone = normalize_phone(data.phone) or fallback_phone
        staff_id = await self._find_staff_id(phone)

        identity = await self._find_identity(data.id, phone)
        if identity is None:
            identity = await self._identities.create({
                "client_id": data.id,
                "phone": phone,
                "user_token": data.token,
                "staff_id": staff_id,
                "name": data.name,
            })
            logger.info("Identity mapping created: %s (client_id=%s)", identity.id, data.id)
        else:
            changes = {"user_token": data.token, "name": data.name}
            if staff_id is not None:
                changes["staff_id"] = staff_id
            if identity.client_id is None:
                changes["client_id"] = data.id
            await self._identities.apply(identity, changes)

        user = await self._users.get_by_identity_mapping_id(identity.id)
        created = user is None
        if user is None:
            user = await self._users.create({"identity_mapping_id": identity.id, "name": data.name})
            logger.info("User created: %s for identity %s", user.id, identity.id)

        return AuthResult(
            user_id=user.id,
            identity_mapping_id=identity.id,
            user_token=data.token,
            name=data.name,
            client_id=identity.client_id,
            staff_id=identity.staff_id,
            created=created,
        )

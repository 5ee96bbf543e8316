"""YClients REST client (https://developers.yclients.com/)."""
from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from chatsync.clients.booking.base import BaseBookingClient
from chatsync.clients.booking.types import (
    AuthResponse,
    RecordFilter,
    RecordListResponse,
    StaffListResponse,
)
from chatsync.config.yclients import API_VERSION_HEADER, YClientsConfig
from chatsync.core.exceptions import BookingProviderError

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class _SmsCodeResponse(BaseModel):
    success: bool


class YClientsClient(BaseBookingClient):
    """Async YClients client.

    Authorization is either ``Bearer <partner>`` (login endpoints) or
    ``Bearer <partner>, User <user_token>`` (company data).
    """

    def __init__(
        self,
        config: YClientsConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
            headers={
                "Accept": API_VERSION_HEADER,
                "Content-Type": "application/json",
            },
        )

    @property
    def company_id(self) -> int:
        return self._config.company_id

    def _auth_header(self, user_token: Optional[str], with_user: bool) -> dict[str, str]:
        value = f"Bearer {self._config.partner_token}"
        token = (user_token or self._config.default_user_token) if with_user else None
        if token:
            value = f"{value}, User {token}"
        return {"Authorization": value}

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Type[ResponseT],
        *,
        user_token: Optional[str] = None,
        with_user: bool = True,
        **kwargs: Any,
    ) -> ResponseT:
        headers = self._auth_header(user_token, with_user)
        try:
            resp = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise BookingProviderError(
                f"YClients API: no response for {method} {path}", cause=exc,
            ) from exc
        logger.debug("YClients %s %s -> %d", method, path, resp.status_code)

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code >= 400:
            raise self._error_from(resp.status_code, payload)

        try:
            parsed = response_model.model_validate(payload)
        except PydanticValidationError as exc:
            raise BookingProviderError(
                f"YClients API: unexpected payload for {method} {path}",
                status=resp.status_code,
                cause=exc,
            ) from exc

        if not getattr(parsed, "success", True):
            raise self._error_from(resp.status_code, payload)
        return parsed

    @staticmethod
    def _error_from(status: int, payload: Any) -> BookingProviderError:
        meta = payload.get("meta") if isinstance(payload, dict) else None
        errors = payload.get("errors") if isinstance(payload, dict) else None
        meta = meta if isinstance(meta, dict) else {}
        errors = errors if isinstance(errors, dict) else {}
        message = meta.get("message") or errors.get("message") or "Unknown error occurred"
        error_code = meta.get("error_code") or errors.get("code")
        return BookingProviderError(
            f"YClients API Error ({status}): {message}",
            status=status,
            error_code=error_code,
            payload=payload,
        )

    async def fetch_records(self, record_filter: RecordFilter) -> RecordListResponse:
        return await self._request(
            "GET",
            f"/api/v1/records/{self.company_id}",
            RecordListResponse,
            user_token=record_filter.user_token,
            params=record_filter.to_params(),
        )

    async def fetch_staff_list(self) -> StaffListResponse:
        return await self._request(
            "GET", f"/api/v1/company/{self.company_id}/staff", StaffListResponse,
        )

    async def authenticate_by_code(self, phone: str, code: str) -> AuthResponse:
        return await self._request(
            "POST", "/api/v1/user/auth", AuthResponse,
            with_user=False, json={"phone": phone, "code": code},
        )

    async def authenticate_by_password(self, login: str, password: str) -> AuthResponse:
        return await self._request(
            "POST", "/api/v1/auth", AuthResponse,
            with_user=False, json={"login": login, "password": password},
        )

    async def send_sms_code(self, phone: str, fullname: str | None = None) -> bool:
        body: dict[str, Any] = {"phone": phone}
        if fullname:
            body["fullname"] = fullname
        result = await self._request(
            "POST", f"/api/v1/book_code/{self.company_id}", _SmsCodeResponse,
            with_user=False, json=body,
        )
        return result.success

    async def aclose(self) -> None:
        await self._http.aclose()

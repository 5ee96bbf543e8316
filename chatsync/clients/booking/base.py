from __future__ import annotations

from abc import ABC, abstractmethod

from chatsync.clients.booking.types import (
    AuthResponse,
    RecordFilter,
    RecordListResponse,
    StaffListResponse,
)


class BaseBookingClient(ABC):
    """Logical operations the reconciliation engine consumes from the provider."""

    @abstractmethod
    async def fetch_records(self, record_filter: RecordFilter) -> RecordListResponse:
        ...

    @abstractmethod
    async def fetch_staff_list(self) -> StaffListResponse:
        ...

    @abstractmethod
    async def authenticate_by_code(self, phone: str, code: str) -> AuthResponse:
        ...

    @abstractmethod
    async def authenticate_by_password(self, login: str, password: str) -> AuthResponse:
        ...

    @abstractmethod
    async def send_sms_code(self, phone: str, fullname: str | None = None) -> bool:
        ...

    async def aclose(self) -> None:
        """Release transport resources. Default: nothing to release."""

"""Booking provider payloads, validated at the client boundary.

Only the fields the reconciliation engine reads are declared; everything else
the provider sends is ignored.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RecordService(_ProviderModel):
    id: Optional[int] = None
    title: Optional[str] = None


class RecordClient(_ProviderModel):
    id: int
    phone: Optional[str] = None
    name: Optional[str] = None


class BookingRecord(_ProviderModel):
    id: int
    staff_id: int
    client: Optional[RecordClient] = None
    services: List[RecordService] = Field(default_factory=list)
    datetime: str
    attendance: int = 0
    length: int = 0
    """Seconds."""

    payment_status: int = 0
    deleted: bool = False
    bookform_id: Optional[int] = None

    @field_validator("client", mode="before")
    @classmethod
    def _empty_client_is_none(cls, v: Any) -> Any:
        # Internal/blocked bookings come back with client: [] or {}
        if v in ([], {}, ""):
            return None
        return v

    @field_validator("attendance", "length", "payment_status", mode="before")
    @classmethod
    def _coerce_int(cls, v: Any) -> Any:
        return 0 if v in (None, "") else int(v)


class StaffUser(_ProviderModel):
    id: Optional[int] = None
    phone: Optional[str] = None


class Staff(_ProviderModel):
    id: int
    name: str = ""
    is_fired: bool = False
    is_deleted: bool = False
    user: Optional[StaffUser] = None

    @field_validator("user", mode="before")
    @classmethod
    def _empty_user_is_none(cls, v: Any) -> Any:
        if v in ([], {}, ""):
            return None
        return v

    @property
    def phone(self) -> Optional[str]:
        return self.user.phone if self.user else None

    @property
    def is_active(self) -> bool:
        return not (self.is_fired or self.is_deleted)


class AuthData(_ProviderModel):
    id: int
    token: str = Field(alias="user_token")
    name: str = ""
    phone: Optional[str] = None


class ListMeta(_ProviderModel):
    total_count: int = 0
    page: Optional[int] = None


class ProviderResponse(_ProviderModel, Generic[T]):
    """Envelope ``{success, data, meta}``; ``meta`` arrives as ``[]`` when empty."""

    success: bool
    data: Optional[T] = None
    meta: ListMeta = Field(default_factory=ListMeta)

    @field_validator("meta", mode="before")
    @classmethod
    def _list_meta_is_empty(cls, v: Any) -> Any:
        if v is None or isinstance(v, list):
            return {}
        return v


class RecordFilter(_ProviderModel):
    """Query for the records listing. ``None`` values are not sent."""

    staff_id: Optional[int] = None
    client_id: Optional[int] = None
    page: int = 1
    page_size: int = 100
    include_deleted: bool = True
    start_date: Optional[date] = None
    user_token: Optional[str] = None
    """Per-user token; the client falls back to its default token."""

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "count": self.page_size}
        if self.staff_id is not None:
            params["staff_id"] = self.staff_id
        if self.client_id is not None:
            params["client_id"] = self.client_id
        if self.include_deleted:
            params["with_deleted"] = 1
        if self.start_date is not None:
            params["start_date"] = self.start_date.isoformat()
        return params


# One provider record as received (normally a dict). Listings are not
# validated per item; callers run BookingRecord.model_validate on each record.
RawRecord = Any
RecordListResponse = ProviderResponse[List[RawRecord]]
StaffListResponse = ProviderResponse[List[Staff]]
AuthResponse = ProviderResponse[AuthData]


def raw_record_id(raw: RawRecord) -> Any:
    """Provider id of an unvalidated record, for log lines."""
    return raw.get("id") if isinstance(raw, dict) else None

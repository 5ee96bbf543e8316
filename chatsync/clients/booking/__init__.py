"""Booking provider client (YClients) and its validated payload types."""
from chatsync.clients.booking.base import BaseBookingClient
from chatsync.clients.booking.types import (
    AuthData,
    AuthResponse,
    BookingRecord,
    RecordClient,
    RecordFilter,
    RawRecord,
    RecordListResponse,
    RecordService,
    Staff,
    StaffListResponse,
    raw_record_id,
)
from chatsync.clients.booking.yclients import YClientsClient

__all__ = [
    "BaseBookingClient",
    "YClientsClient",
    "AuthData",
    "AuthResponse",
    "BookingRecord",
    "RecordClient",
    "RecordFilter",
    "RawRecord",
    "RecordListResponse",
    "RecordService",
    "Staff",
    "StaffListResponse",
    "raw_record_id",
]

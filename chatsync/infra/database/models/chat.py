"""ChatMapping, booking-record sub-ledger, Chat and Message ORM models."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from chatsync.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class ChatMapping(Base, TimestampMixin):
    """One (staff, client) relationship; identity fields never change after insert."""

    __tablename__ = "chat_mappings"
    __table_args__ = (
        Index("ix_chat_mappings_staff_client", "staff_id", "client_id", unique=True),
        Index("ix_chat_mappings_staff_phone", "staff_id", "client_phone"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    staff_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    staff_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    client_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    client_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    def __repr__(self) -> str:
        return (
            f"ChatMapping(id={self.id!r}, staff_id={self.staff_id!r}, "
            f"client_id={self.client_id!r})"
        )


class BookingRecordProjection(Base, TimestampMixin):
    """Cached view of one provider record, owned by a ChatMapping."""

    __tablename__ = "booking_records"
    __table_args__ = (
        Index(
            "ix_booking_records_mapping_record",
            "chat_mapping_id", "record_id",
            unique=True,
        ),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    chat_mapping_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chat_mappings.id", ondelete="CASCADE"),
        nullable=False,
    )
    record_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    service_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    service_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    attendance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """1 attended, -1 no-show/cancelled, 0 pending."""

    length: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Duration in seconds."""

    payment_status: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bookform_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)


class Chat(Base):
    """User-facing conversation derived from a ChatMapping's sub-ledger."""

    __tablename__ = "chats"
    __table_args__ = (
        Index("ix_chats_chat_mapping_id", "chat_mapping_id", unique=True),
        Index("ix_chats_status", "status"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    chat_mapping_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chat_mappings.id", ondelete="RESTRICT"),
        nullable=False,
    )
    users: Mapped[List[str]] = mapped_column(JSONB, nullable=False, default=list)
    """Participant user ids: client first, then staff."""

    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    """Display date, epoch milliseconds."""

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="new")
    """new | active | archived | paused."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"Chat(id={self.id!r}, status={self.status!r}, users={self.users!r})"


class Message(Base, TimestampMixin):
    """Chat message. Written by the messaging app; this service only reads it."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_chat_id", "chat_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    chat_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    from_user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    to_user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="sent")
    """sent | delivered | read."""

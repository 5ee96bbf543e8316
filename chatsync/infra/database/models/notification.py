"""Pending and sent-history notification ORM models."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from chatsync.infra.database.models.base import Base, _uuid_pk


class _NotificationColumns:
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    """newMessage | chatUpdate | system."""

    title: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    text: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    from_user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    to_user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    chat_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    message_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PendingNotification(Base, _NotificationColumns):
    """Queued push intent. Inserted by the message-send path."""

    __tablename__ = "pending_notifications"
    __table_args__ = (
        Index("ix_pending_notifications_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()


class SentNotification(Base, _NotificationColumns):
    """Terminal history row; keeps the id of the pending notification it came from."""

    __tablename__ = "sent_notifications"
    __table_args__ = (
        Index("ix_sent_notifications_to_user_id", "to_user_id"),
        Index("ix_sent_notifications_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)

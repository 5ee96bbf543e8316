"""IdentityMapping and User ORM models."""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from chatsync.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class IdentityMapping(Base, TimestampMixin):
    """Link between one booking-provider identity and one internal user.

    A person who is both a customer and an employee carries both ids.
    """

    __tablename__ = "identity_mappings"
    __table_args__ = (
        Index("ix_identity_mappings_client_id", "client_id", unique=True),
        Index("ix_identity_mappings_phone", "phone", unique=True),
        Index("ix_identity_mappings_staff_id", "staff_id"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    client_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    user_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """Provider auth token, refreshed on every login."""

    staff_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    def __repr__(self) -> str:
        return (
            f"IdentityMapping(id={self.id!r}, client_id={self.client_id!r}, "
            f"staff_id={self.staff_id!r})"
        )


class User(Base, TimestampMixin):
    """Internal chat user."""

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_identity_mapping_id", "identity_mapping_id", unique=True),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    identity_mapping_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("identity_mappings.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    avatar: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    push_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notifications_enabled: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    """NULL means "never set"; only an explicit False disables pushes."""

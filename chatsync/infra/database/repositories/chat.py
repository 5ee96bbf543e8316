"""Repositories for ChatMapping, the booking-record sub-ledger, Chat and Message."""
from __future__ import annotations

from typing import ClassVar, List, Optional
from uuid import UUID

from sqlalchemy import case, or_, select

from chatsync.infra.database.models.chat import (
    BookingRecordProjection,
    Chat,
    ChatMapping,
    Message,
)
from chatsync.infra.database.repositories.base import BaseRepository
from chatsync.types import RecordSnapshot


class ChatMappingRepository(BaseRepository[ChatMapping]):
    model: ClassVar[type] = ChatMapping

    async def find_for_pair(
        self,
        staff_id: int,
        client_id: int,
        client_phone: Optional[str] = None,
    ) -> Optional[ChatMapping]:
        """Same staff AND (same client id OR same client phone).

        An exact client id match beats a phone-only match; after that the oldest
        mapping wins, with the id as a stable tie-break for same-transaction rows.
        """
        client_match = ChatMapping.client_id == client_id
        if client_phone:
            client_match = or_(client_match, ChatMapping.client_phone == client_phone)
        stmt = (
            select(ChatMapping)
            .where(ChatMapping.staff_id == staff_id, client_match)
            .order_by(
                case((ChatMapping.client_id == client_id, 0), else_=1),
                ChatMapping.created_at,
                ChatMapping.id,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, skip: int = 0, limit: Optional[int] = None) -> List[ChatMapping]:
        stmt = select(ChatMapping).order_by(ChatMapping.created_at, ChatMapping.id).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class BookingRecordRepository(BaseRepository[BookingRecordProjection]):
    model: ClassVar[type] = BookingRecordProjection

    async def get_for_mapping(
        self, chat_mapping_id: UUID, record_id: int,
    ) -> Optional[BookingRecordProjection]:
        stmt = select(BookingRecordProjection).where(
            BookingRecordProjection.chat_mapping_id == chat_mapping_id,
            BookingRecordProjection.record_id == record_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_mapping(self, chat_mapping_id: UUID) -> List[BookingRecordProjection]:
        stmt = (
            select(BookingRecordProjection)
            .where(BookingRecordProjection.chat_mapping_id == chat_mapping_id)
            .order_by(BookingRecordProjection.scheduled_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_from_snapshot(
        self, chat_mapping_id: UUID, snapshot: RecordSnapshot,
    ) -> BookingRecordProjection:
        return await self.create({"chat_mapping_id": chat_mapping_id, **snapshot.as_dict()})


class ChatRepository(BaseRepository[Chat]):
    model: ClassVar[type] = Chat

    async def get_by_chat_mapping_id(self, chat_mapping_id: UUID) -> Optional[Chat]:
        stmt = select(Chat).where(Chat.chat_mapping_id == chat_mapping_id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class MessageRepository(BaseRepository[Message]):
    model: ClassVar[type] = Message

    async def get_in_chat(self, chat_id: UUID, message_id: UUID) -> Optional[Message]:
        stmt = select(Message).where(Message.chat_id == chat_id, Message.id == message_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

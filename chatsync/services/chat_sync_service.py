"""ChatSyncService: re-project every chat mapping into its chat."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.config.sync import SyncConfig
from chatsync.infra.database.repositories.chat import (
    BookingRecordRepository,
    ChatMappingRepository,
    ChatRepository,
)
from chatsync.infra.database.repositories.identity import (
    IdentityMappingRepository,
    UserRepository,
)
from chatsync.services.chat_projector import ChatStatusProjector
from chatsync.services.participant_resolver import ParticipantResolver
from chatsync.types import ChatSyncStats

logger = logging.getLogger(__name__)


def build_projector(session: AsyncSession, grace_factor: int) -> ChatStatusProjector:
    participants = ParticipantResolver(IdentityMappingRepository(session), UserRepository(session))
    return ChatStatusProjector(
        BookingRecordRepository(session),
        ChatRepository(session),
        participants,
        grace_factor=grace_factor,
    )


class ChatSyncService:
    def __init__(self, session: AsyncSession, config: Optional[SyncConfig] = None) -> None:
        self._session = session
        config = config or SyncConfig()
        self._mappings = ChatMappingRepository(session)
        self._projector = build_projector(session, config.activity_grace_factor)

    async def run(self, now: datetime) -> ChatSyncStats:
        stats = ChatSyncStats()
        mappings = await self._mappings.list_all()
        logger.info("Chat sync: %d chat mappings", len(mappings))

        for mapping in mappings:
            try:
                async with self._session.begin_nested():
                    outcome = await self._projector.project(mapping, now)
            except Exception:
                logger.exception("Chat sync: mapping %s failed", mapping.id)
                stats.errors += 1
                continue
            stats.record(outcome)

        logger.info("Chat sync finished: %s", stats.to_dict())
        return stats

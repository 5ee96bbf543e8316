"""UserSyncService: on-demand sync of one user's records and chats.

Runs the same pipeline as the scheduled jobs (fetch, resolve, reconcile,
project) but scoped to a single user and synchronously, for the
``POST /sync/chats`` endpoint.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from chatsync.clients.booking import BaseBookingClient, BookingRecord, RawRecord, raw_record_id
from chatsync.config.sync import SyncConfig
from chatsync.core.exceptions import NotFoundError, UpstreamFetchError
from chatsync.infra.database.models.chat import ChatMapping
from chatsync.infra.database.models.identity import IdentityMapping
from chatsync.infra.database.repositories.chat import (
    BookingRecordRepository,
    ChatMappingRepository,
)
from chatsync.infra.database.repositories.identity import (
    IdentityMappingRepository,
    UserRepository,
)
from chatsync.services.booking_fetcher import BookingRecordFetcher
from chatsync.services.chat_mapping_resolver import ChatMappingResolver
from chatsync.services.chat_sync_service import build_projector
from chatsync.services.record_reconciler import RecordReconciler
from chatsync.types import ProjectionOutcome, UserSyncStats

logger = logging.getLogger(__name__)


class UserSyncService:
    def __init__(
        self,
        session: AsyncSession,
        client: BaseBookingClient,
        config: Optional[SyncConfig] = None,
    ) -> None:
        self._session = session
        config = config or SyncConfig()
        self._users = UserRepository(session)
        self._identities = IdentityMappingRepository(session)
        self._fetcher = BookingRecordFetcher(client, page_size=config.page_size)
        self._resolver = ChatMappingResolver(ChatMappingRepository(session))
        self._reconciler = RecordReconciler(BookingRecordRepository(session))
        self._projector = build_projector(session, config.activity_grace_factor)

    async def _load_identity(self, user_id: str) -> IdentityMapping:
        try:
            user_uuid = UUID(user_id)
        except ValueError:
            raise NotFoundError("User not found", details={"user_id": user_id}) from None

        user = await self._users.get_by_id(user_uuid)
        if user is None:
            raise NotFoundError("User not found", details={"user_id": user_id})

        identity = None
        if user.identity_mapping_id is not None:
            identity = await self._identities.get_by_id(user.identity_mapping_id)
        if identity is None:
            raise NotFoundError("Identity mapping not found", details={"user_id": user_id})
        return identity

    async def _fetch(self, identity: IdentityMapping) -> list[RawRecord]:
        try:
            if identity.staff_id is not None:
                return await self._fetcher.fetch_staff_records(
                    identity.staff_id, user_token=identity.user_token,
                )
            if identity.client_id is not None:
                return await self._fetcher.fetch_client_records(
                    identity.client_id, user_token=identity.user_token,
                )
        except Exception as exc:
            logger.exception("User sync: record fetch failed for identity %s", identity.id)
            raise UpstreamFetchError("Failed to load records from YClients", cause=exc) from exc
        logger.warning("User sync: identity %s has neither staff nor client id", identity.id)
        return []

    async def sync_user(self, user_id: str, now: datetime) -> UserSyncStats:
        """Raises NotFoundError (unknown user/identity) or UpstreamFetchError."""
        identity = await self._load_identity(user_id)
        logger.info(
            "User sync: user=%s staff_id=%s client_id=%s",
            user_id, identity.staff_id, identity.client_id,
        )
        records = await self._fetch(identity)
        staff_phone = identity.phone if identity.staff_id is not None else None

        stats = UserSyncStats()
        touched: Dict[UUID, ChatMapping] = {}
        for raw in records:
            try:
                async with self._session.begin_nested():
                    record = BookingRecord.model_validate(raw)
                    resolved = await self._resolver.resolve_for_record(record, staff_phone=staff_phone)
                    if resolved is not None:
                        await self._reconciler.reconcile(resolved.mapping.id, record)
            except Exception:
                logger.exception("User sync: record %s failed", raw_record_id(raw))
                stats.errors += 1
                continue
            stats.records_processed += 1
            if resolved is not None:
                touched.setdefault(resolved.mapping.id, resolved.mapping)

        for mapping in touched.values():
            try:
                async with self._session.begin_nested():
                    outcome = await self._projector.project(mapping, now)
            except Exception:
                logger.exception("User sync: projecting mapping %s failed", mapping.id)
                stats.errors += 1
                continue
            if outcome is ProjectionOutcome.CREATED:
                stats.chats_created += 1
            elif outcome is ProjectionOutcome.UPDATED:
                stats.chats_updated += 1

        logger.info("User sync finished: user=%s %s", user_id, stats.to_response())
        return stats

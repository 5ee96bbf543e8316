"""ChatMappingResolver: find-or-create the canonical (staff, client) mapping."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from chatsync.clients.booking import BookingRecord
from chatsync.core.phone import normalize_phone
from chatsync.infra.database.models.chat import ChatMapping
from chatsync.infra.database.repositories.chat import ChatMappingRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedMapping:
    mapping: ChatMapping
    created: bool


class ChatMappingResolver:
    def __init__(self, mappings: ChatMappingRepository) -> None:
        self._mappings = mappings

    async def resolve(
        self,
        *,
        staff_id: int,
        client_id: int,
        client_phone: Optional[str] = None,
        staff_phone: Optional[str] = None,
    ) -> ResolvedMapping:
        """Return the mapping for this staff member and client, creating it if absent.

        The client phone is an alternate key: a client who re-registered with
        a new provider id but the same phone resolves to the earlier mapping.
        """
        client_phone = normalize_phone(client_phone)
        existing = await self._mappings.find_for_pair(staff_id, client_id, client_phone)
        if existing is not None:
            return ResolvedMapping(existing, created=False)

        mapping = await self._mappings.create({
            "staff_id": staff_id,
            "staff_phone": normalize_phone(staff_phone),
            "client_id": client_id,
            "client_phone": client_phone,
        })
        logger.info(
            "Chat mapping created: %s (staff_id=%s client_id=%s)",
            mapping.id, staff_id, client_id,
        )
        return ResolvedMapping(mapping, created=True)

    async def resolve_for_record(
        self,
        record: BookingRecord,
        *,
        staff_phone: Optional[str] = None,
    ) -> Optional[ResolvedMapping]:
        """None for records without a client (internal or blocked time)."""
        if record.client is None:
            logger.debug("Record %s has no client, no mapping resolved", record.id)
            return None
        return await self.resolve(
            staff_id=record.staff_id,
            client_id=record.client.id,
            client_phone=record.client.phone,
            staff_phone=staff_phone,
        )

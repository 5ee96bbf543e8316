"""ParticipantResolver: map a (staff, client) pair to internal user ids.

Each side walks an ordered list of strategies (numeric provider id first,
then phone). The first strategy that finds an IdentityMapping wins, and that
mapping must then lead to a User. Sides that don't resolve are left out.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from chatsync.core.phone import normalize_phone
from chatsync.infra.database.models.chat import ChatMapping
from chatsync.infra.database.models.identity import IdentityMapping
from chatsync.infra.database.repositories.identity import (
    IdentityMappingRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

MappingLookup = Callable[[IdentityMappingRepository, Any], Awaitable[Optional[IdentityMapping]]]


@dataclass(frozen=True)
class ResolutionStrategy:
    name: str
    key: str
    """Attribute of :class:`ParticipantKeys` fed to ``lookup``."""

    lookup: MappingLookup


@dataclass(frozen=True)
class ParticipantKeys:
    client_id: Optional[int] = None
    client_phone: Optional[str] = None
    staff_id: Optional[int] = None
    staff_phone: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: ChatMapping) -> ParticipantKeys:
        return cls(
            client_id=mapping.client_id,
            client_phone=mapping.client_phone,
            staff_id=mapping.staff_id,
            staff_phone=mapping.staff_phone,
        )


CLIENT_STRATEGIES: Sequence[ResolutionStrategy] = (
    ResolutionStrategy("client_id", "client_id", lambda repo, v: repo.get_by_client_id(v)),
    ResolutionStrategy("client_phone", "client_phone", lambda repo, v: repo.get_by_phone(v)),
)

STAFF_STRATEGIES: Sequence[ResolutionStrategy] = (
    ResolutionStrategy("staff_id", "staff_id", lambda repo, v: repo.get_by_staff_id(v)),
    ResolutionStrategy("staff_phone", "staff_phone", lambda repo, v: repo.get_by_phone(v)),
)


class ParticipantResolver:
    def __init__(
        self,
        identities: IdentityMappingRepository,
        users: UserRepository,
        *,
        client_strategies: Sequence[ResolutionStrategy] = CLIENT_STRATEGIES,
        staff_strategies: Sequence[ResolutionStrategy] = STAFF_STRATEGIES,
    ) -> None:
        self._identities = identities
        self._users = users
        self._sides = (client_strategies, staff_strategies)

    async def _find_identity(
        self, keys: ParticipantKeys, strategies: Sequence[ResolutionStrategy],
    ) -> Optional[IdentityMapping]:
        for strategy in strategies:
            value = getattr(keys, strategy.key)
            if strategy.key.endswith("phone"):
                value = normalize_phone(value)
            if value is None:
                continue
            identity = await strategy.lookup(self._identities, value)
            if identity is not None:
                logger.debug("Identity %s resolved by %s", identity.id, strategy.name)
                return identity
        return None

    async def resolve(self, keys: ParticipantKeys) -> List[str]:
        """Return user ids, client first then staff; 0, 1 or 2 entries."""
        user_ids: List[str] = []
        for strategies in self._sides:
            identity = await self._find_identity(keys, strategies)
            if identity is None:
                continue
            user = await self._users.get_by_identity_mapping_id(identity.id)
            if user is None:
                logger.debug("Identity %s has no user yet", identity.id)
                continue
            user_ids.append(str(user.id))
        return user_ids

    async def resolve_for_mapping(self, mapping: ChatMapping) -> List[str]:
        return await self.resolve(ParticipantKeys.from_mapping(mapping))

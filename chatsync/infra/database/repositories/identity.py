"""Repositories for IdentityMapping and User."""
from __future__ import annotations

from typing import ClassVar, Optional
from uuid import UUID

from sqlalchemy import select

from chatsync.infra.database.models.identity import IdentityMapping, User
from chatsync.infra.database.repositories.base import BaseRepository


class IdentityMappingRepository(BaseRepository[IdentityMapping]):
    model: ClassVar[type] = IdentityMapping

    async def _first(self, *conditions) -> Optional[IdentityMapping]:
        stmt = (
            select(IdentityMapping)
            .where(*conditions)
            .order_by(IdentityMapping.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_client_id(self, client_id: int) -> Optional[IdentityMapping]:
        return await self._first(IdentityMapping.client_id == client_id)

    async def get_by_staff_id(self, staff_id: int) -> Optional[IdentityMapping]:
        return await self._first(IdentityMapping.staff_id == staff_id)

    async def get_by_phone(self, phone: str) -> Optional[IdentityMapping]:
        return await self._first(IdentityMapping.phone == phone)


class UserRepository(BaseRepository[User]):
    model: ClassVar[type] = User

    async def get_by_identity_mapping_id(self, identity_mapping_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.identity_mapping_id == identity_mapping_id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

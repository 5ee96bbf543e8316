"""Shared async repository: lookups by primary key, inserts and partial writes."""
from __future__ import annotations

from typing import Any, ClassVar, Generic, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: ClassVar[type]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[ModelT]:
        return await self.session.get(self.model, id)  # type: ignore[return-value]

    async def list_all(self, skip: int = 0, limit: Optional[int] = None) -> List[ModelT]:
        query = select(self.model).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())  # type: ignore[return-value]

    async def create(self, data: dict[str, Any]) -> ModelT:
        row = self.model(**data)
        self.session.add(row)
        # flush so server defaults and the generated id are visible to the caller
        await self.session.flush()
        await self.session.refresh(row)
        return row  # type: ignore[return-value]

    async def apply(self, row: ModelT, changes: dict[str, Any]) -> ModelT:
        """Set only the given columns on a loaded row; untouched columns keep their value."""
        for column, value in changes.items():
            setattr(row, column, value)
        await self.session.flush()
        return row

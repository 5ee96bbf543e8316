from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SyncStatsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    records_processed: int = Field(0, alias="recordsProcessed")
    chats_created: int = Field(0, alias="chatsCreated")
    chats_updated: int = Field(0, alias="chatsUpdated")


class SyncChatsResponse(BaseModel):
    success: bool = True
    message: str
    stats: SyncStatsSchema

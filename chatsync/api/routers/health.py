from __future__ import annotations

from fastapi import APIRouter

from chatsync.core.timeutils import utcnow

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok", "service": "chatsync", "timestamp": utcnow().isoformat()}

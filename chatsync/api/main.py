"""chatsync FastAPI application.

Start with:
    uvicorn chatsync.api.main:app --host 0.0.0.0 --port 8000

The scheduled jobs run separately under Celery (see ``chatsync.jobs``); this
app serves the on-demand sync, login and health endpoints.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from chatsync import __version__
from chatsync.api.errors import register_exception_handlers
from chatsync.clients.booking import YClientsClient
from chatsync.config import load_sync_config, load_yclients_config
from chatsync.core.logger import configure
from chatsync.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure()

    await ensure_database_exists()
    engine = build_engine()
    app.state.session_factory = build_session_factory(engine)
    await init_db()

    app.state.sync_config = load_sync_config()
    booking_client = YClientsClient(load_yclients_config())
    app.state.booking_client = booking_client
    logger.info("API: YClients client ready (company %s)", booking_client.company_id)

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    await booking_client.aclose()
    await close_engine()
    logger.info("API: engine disposed")


app = FastAPI(
    title="chatsync",
    version=__version__,
    description="Booking provider to chat reconciliation: on-demand sync and login.",
    lifespan=lifespan,
)

# Rate limiter: default limit from API_RATE_LIMIT (60/minute when unset)
_api_rate_limit = os.environ.get("API_RATE_LIMIT", "60/minute")
limiter = Limiter(key_func=get_remote_address, default_limits=[_api_rate_limit])
app.state.limiter = limiter
register_exception_handlers(app)

_allowed_origins = os.environ.get("CORS_ORIGINS", "*").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ── Routers ───────────────────────────────────────────────────────
from chatsync.api.routers import auth, health, sync  # noqa: E402

app.include_router(health.router)
app.include_router(sync.router)
app.include_router(auth.router)

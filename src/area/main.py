from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI

from area.config import get_settings
from area.storage.database import dispose_engine, init_db
from area.utils.logging import setup_logging
from area.api.webhooks import router as webhooks_router
from area.api.health import router as health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    await init_db()
    # Set on shutdown so in-progress events skip reactions that have not started
    app.state.shutdown = asyncio.Event()
    yield
    app.state.shutdown.set()
    await dispose_engine()


app = FastAPI(title="AREA Dispatch", version="0.1.0", lifespan=lifespan)

app.include_router(webhooks_router)
app.include_router(health_router)

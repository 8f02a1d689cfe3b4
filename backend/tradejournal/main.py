from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradejournal.api import analytics, deps, health, journal, reports, tags, trades
from tradejournal.core.config import settings
from tradejournal.core.logging import setup_logging
from tradejournal.db import base  # noqa: F401
from tradejournal.db.migration import run_migrations

setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event() -> None:
    if settings.persistence_enabled:
        run_migrations()
    else:
        logger.info("Persistence disabled, trades are kept in memory only")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    deps.get_registry().close_all()


@app.get("/")
def root():
    return {"app": settings.app_name}


app.include_router(health.router)
app.include_router(trades.router)
app.include_router(journal.router)
app.include_router(analytics.router)
app.include_router(reports.router)
app.include_router(tags.router)

# cryptocollection/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from cryptocollection.api.detail import router as detail_router
from cryptocollection.api.favorites import router as favorites_router
from cryptocollection.api.health import router as health_router
from cryptocollection.api.search import router as search_router
from cryptocollection.api.trending import router as trending_router
from cryptocollection.config.settings import get_settings
from cryptocollection.db.migrations import create_tables, enforce_integrity_constraints

logger = logging.getLogger("cryptocollection")

app = FastAPI(title="CryptoCollection API")

# Routers
app.include_router(health_router)
app.include_router(trending_router)
app.include_router(search_router)
app.include_router(detail_router)
app.include_router(favorites_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "CryptoCollection"}


@app.on_event("startup")
async def on_startup() -> None:
    # Ensure the favorites table exists, then its uniqueness index
    await create_tables()
    await enforce_integrity_constraints()

    settings = get_settings()
    logger.info(
        "cryptocollection started | vs_currency=%s | base_url=%s",
        settings.VS_CURRENCY,
        settings.COINGECKO_BASE_URL,
    )

"""Broadside ASGI entrypoint (FastAPI + HTMX)."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Response
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse
from starlette.middleware.sessions import SessionMiddleware

from src.broadside.api.routes.game import router as game_router
from src.broadside.core.config import APP_VERSION, ENVIRONMENT, LOG_LEVEL, SECRET_KEY

logger = logging.getLogger(__name__)

HTMX_SRC = "https://unpkg.com/htmx.org@1.9.12"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Broadside %s starting (%s)", APP_VERSION, ENVIRONMENT)
    yield


app = FastAPI(title="Broadside", lifespan=lifespan)

app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": APP_VERSION, "ts": datetime.now(UTC).isoformat()}


@app.head("/")
async def home_head() -> Response:
    return Response(status_code=200)


@app.get("/", response_class=HTMLResponse, name="home")
async def home() -> HTMLResponse:
    return HTMLResponse(
        "<!doctype html><html lang='en'><head><meta charset='utf-8'>"
        "<title>Broadside</title>"
        f"<script src='{HTMX_SRC}'></script>"
        "</head><body><h1>Broadside</h1>"
        "<main id='game' hx-get='/game/board' hx-trigger='load' hx-swap='innerHTML'>"
        "</main></body></html>"
    )


app.include_router(game_router)

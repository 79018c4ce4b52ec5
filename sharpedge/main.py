# sharpedge/main.py
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from sharpedge.core.config import Settings, load_settings
from sharpedge.routers import chat_routes, schedule_routes
from sharpedge.services.odds_api import make_http_client
from sharpedge.services.schedule import ScheduleService

logger = logging.getLogger("sharpedge")


# ------------ Access log middleware ------------
class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        t0 = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
        finally:
            dt = (time.perf_counter() - t0) * 1000
            logger.info(
                "ACCESS %s %s q=%s -> %s in %.1fms",
                request.method,
                request.url.path,
                request.url.query,
                status,
                dt,
            )
        return response


def create_app(settings: Settings | None = None, transport=None) -> FastAPI:
    """
    Build the app. `transport` is handed to the shared httpx client (tests
    pass an httpx.MockTransport).
    """
    settings = settings or load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = make_http_client(settings, transport=transport)
        app.state.schedule = ScheduleService(client, settings)
        logger.info("SharpEdge up: books=%s tz=%s", ",".join(settings.odds_bookmakers), settings.tz or "local")
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="SharpEdge Odds Board API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(AccessLogMiddleware)

    # ------------ CORS (open; UI is served from another origin) ------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------ Global error handler ------------
    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("UNHANDLED ERROR: %s %s", request.method, request.url)
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    # ------------ Health & status ------------
    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/status")
    async def status():
        cache = app.state.schedule.cache
        return {
            "ok": True,
            "has_odds_key": bool(settings.odds_api_key),
            "regions": settings.odds_regions,
            "books": ",".join(settings.odds_bookmakers) or None,
            "cache_entries": len(cache),
            "context_league": cache.context.league or None,
        }

    # ------------ Mount routers ------------
    app.include_router(schedule_routes.router, prefix="/api")
    app.include_router(chat_routes.router, prefix="/api")

    return app


app = create_app()

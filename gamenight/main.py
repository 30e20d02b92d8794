# gamenight/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import time

from gamenight.core import config, db
from gamenight.core.storage import ensure_schema

# ------------ Router imports ------------
from gamenight.routers import me_routes, sports_routes

# ------------ Logging ------------
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("gamenight")


# ------------ Lifespan (optional Postgres key-value store) ------------
@asynccontextmanager
async def lifespan(_: FastAPI):
    if await db.init_engine():
        await ensure_schema()
    try:
        yield
    finally:
        await db.close_engine()


# ------------ App ------------
app = FastAPI(
    title="Gamenight API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


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


app.add_middleware(AccessLogMiddleware)

# ------------ CORS (open; the client is a mobile/web app) ------------
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
    return {
        "ok": True,
        "persistent_store": db.engine_ready(),
        "timezone": config.APP_TZ,
    }


# ------------ Mount routers ------------
app.include_router(me_routes.router, prefix="/api")
app.include_router(sports_routes.router, prefix="/api")

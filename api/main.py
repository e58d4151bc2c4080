"""
api/main.py -- FastAPI application entry point for the product catalog.

Run with:  python main.py
           uvicorn asgi:app --reload

Middleware stack:
  1. log_requests -- one log line per request with status and latency

Lifespan handles startup (engine, schema, stores) and shutdown (pool
disposal) symmetrically. A schema failure at startup is fatal: it is logged
and re-raised, uvicorn aborts before binding the listen socket and the
process exits non-zero.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.catalog import router as catalog_router
from auth.store import UserStore
from catalog.store import ProductStore, SettingsStore
from core.config import get_settings
from core.database import create_db_engine, dispose_engine, init_schema

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("catalog.api")

# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the connection pool for the full server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown (uvicorn triggers it on SIGTERM / SIGINT).

    Startup order matters:
      1. Engine first -- the single pool every store shares.
      2. Schema second -- tables must exist before any request is served.
      3. Stores last -- thin repositories holding a reference to the engine.
    """
    settings = get_settings()
    engine = create_db_engine(settings.database_dsn, settings.db_pool_size, settings.db_max_overflow)
    try:
        init_schema(engine)
    except Exception:
        logger.exception("Failed to start: schema initialization failed")
        dispose_engine(engine)
        raise
    app.state.engine = engine
    app.state.user_store = UserStore(engine)
    app.state.product_store = ProductStore(engine)
    app.state.settings_store = SettingsStore(engine)
    logger.info("Product Catalog API started")

    yield

    dispose_engine(app.state.engine)
    logger.info("Product Catalog API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Product Catalog API",
    description="User registration, product list and settings for the catalog frontend.",
    version="1.0.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(catalog_router, prefix="/api", tags=["Catalog"])
# The static frontend is mounted by asgi.py, not here. It must be the last
# mount because it matches every path.


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same {"error": "..."} envelope so the frontend can
# show err.error without inspecting status codes.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body is not JSON or a field cannot be coerced (e.g. price="abc")."""
    messages = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body') or 'body'}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return _error(400, messages or "Invalid request body.")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report store failures as input errors carrying the driver's message.

    DBAPI errors wrap the driver exception in exc.orig; its text (e.g.
    'duplicate key value violates unique constraint "users_username_key"')
    is what the client sees. No retry is attempted.
    """
    orig = getattr(exc, "orig", None)
    message = str(orig) if orig is not None else str(exc)
    logger.warning("Store error on %s %s: %s", request.method, request.url.path, message)
    return _error(400, message)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable.
# It must not touch the database: it only proves the port is listening.
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return liveness."""
    return HealthResponse()

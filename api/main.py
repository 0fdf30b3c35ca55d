"""
api/main.py -- FastAPI application entry point for the E-Library API.

Run with:      python main.py serve
               uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware    -- adds CORS headers for allowed browser origins
  2. SlowAPIMiddleware -- enforces per-route rate limits from api.limiter
  3. log_requests      -- one access-log line per request

Lifespan builds the single Engine from Settings and hands it to both stores
on startup, then disposes it on shutdown. Route handlers reach the stores
through request.app.state; nothing holds a module-level connection.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorResponse, MessageResponse
from api.routes.auth import router as auth_router
from api.routes.authors import router as authors_router
from api.routes.books import router as books_router
from api.routes.publishers import router as publishers_router
from auth.store import UserStore
from catalog.store import CatalogStore
from core.config import get_settings
from core.database import create_db_engine
from core.errors import LibraryError

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("elibrary.api")

_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared Engine and both stores; dispose them on shutdown.

    UserStore and CatalogStore share one Engine, so closing either disposes
    the pool. Only the catalog store is closed for that reason.
    """
    settings = get_settings()
    db_url = settings.resolved_database_url()
    engine = create_db_engine(db_url)
    logger.info("E-Library API starting up (database=%s)", engine.url.render_as_string(hide_password=True))
    app.state.user_store = UserStore(engine)
    app.state.catalog = CatalogStore(engine)
    logger.info("Stores initialized")

    yield

    app.state.catalog.close()
    logger.info("E-Library API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="E-Library API",
    description="Library catalog: books, publishers and authors behind token-based auth.",
    version=_VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


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

app.include_router(auth_router, tags=["Auth"])
app.include_router(books_router, tags=["Books"])
app.include_router(publishers_router, tags=["Publishers"])
app.include_router(authors_router, tags=["Authors"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every handler returns the same {"error": <message>} envelope so clients can
# parse errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, detail=detail).model_dump(exclude_none=True),
    )


@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    """Map the core error taxonomy (400/401/403/404/500) onto the response."""
    return _error(exc.status_code, exc.message)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with Retry-After when a rate limit is exceeded."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = _error(429, "Too many requests", str(exc.detail))
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, bad path ids and unknown roles are client errors: 400."""
    return _error(400, "Invalid request", str(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes (404), wrong methods (405) and any other framework HTTP error."""
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/", response_model=MessageResponse, tags=["Health"])
async def health() -> MessageResponse:
    """Return a liveness message. No auth, no rate limit."""
    return MessageResponse(message="E_Library API is running!")

"""
Books Proxy — FastAPI application entry point.

Forwards GET /books to the upstream API with the server-side credential,
caches the response for CACHE_TTL_SECONDS, and exposes a health check so
Docker knows we're alive.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.data.cache import TTLCache
from app.data.proxy import CachedProxy
from app.data.upstream_client import UpstreamClient
from app.routers import books
from app.routers.books import GENERIC_ERROR_BODY

VERSION = "0.1.0"

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Settings = app.state.settings
    if not cfg.credential_configured():
        logger.critical("API_KEY is not set — refusing to start without an upstream credential.")
        raise RuntimeError("API_KEY is not configured")
    logger.info(
        f"Starting Books Proxy: upstream={cfg.upstream_url} "
        f"ttl={cfg.cache_ttl_seconds}s origin={cfg.allowed_origin}"
    )
    yield
    logger.info("Shutting down...")


def create_app(
    settings: Optional[Settings] = None,
    proxy: Optional[CachedProxy] = None,
) -> FastAPI:
    """
    Build the application. Tests pass their own settings and/or a proxy
    wired to a fake client; production uses the env-derived defaults.
    """
    settings = settings or get_settings()

    if proxy is None:
        client = UpstreamClient(
            url=settings.upstream_url,
            api_key=settings.api_key.get_secret_value(),
            timeout=settings.upstream_timeout_seconds,
        )
        proxy = CachedProxy(client, TTLCache(default_ttl=settings.cache_ttl_seconds))

    app = FastAPI(
        title="Books Proxy",
        description="Caching gateway for the books table. Keeps the API key off the client.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.proxy = proxy

    # Browser-enforced only; direct HTTP clients are not restricted by this
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # ── Routers ────────────────────────────────────────────────────────────
    app.include_router(books.router, tags=["books"])

    # ── Errors ─────────────────────────────────────────────────────────────
    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=GENERIC_ERROR_BODY)

    # ── Health check ───────────────────────────────────────────────────────
    @app.get("/health", tags=["health"])
    async def health() -> dict[str, Any]:
        # Local state only; never triggers an upstream call
        return {
            "status": "ok",
            "version": VERSION,
            "credential_configured": settings.credential_configured(),
            "cache_warm": app.state.proxy.is_warm,
        }

    return app


app = create_app()


def run() -> None:
    """Serve forever on the configured port."""
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()

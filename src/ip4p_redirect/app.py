"""ip4p-redirect — FastAPI application.

Sends clients to an endpoint that only exists as an IP4P AAAA record:
the path identifier picks a domain, the domain's address carries the
IPv4 and port to redirect to.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from ip4p_redirect.config import RedirectConfig, load_config
from ip4p_redirect.resolver import Resolver, SystemResolver
from ip4p_redirect.router import Router
from ip4p_redirect.routes import meta, redirect

logger = logging.getLogger("ip4p_redirect")
audit_logger = logging.getLogger("ip4p_redirect.audit")

__version__ = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    router: Router = app.state.router
    logger.info("Loaded %d mappings", len(router.mappings))
    logger.info("ip4p-redirect ready")
    yield
    logger.info("ip4p-redirect shut down")


def create_app(
    config: RedirectConfig | None = None,
    resolver: Resolver | None = None,
) -> FastAPI:
    """Application factory."""
    if config is None:
        config = load_config()

    # no docs routes: every path is an identifier
    app = FastAPI(
        title="ip4p-redirect",
        description="Permanent redirects to endpoints published as IP4P AAAA records",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.router = Router(
        mappings=config.mapping_table(),
        resolver=resolver if resolver is not None else SystemResolver(),
    )

    # ── Audit middleware ──────────────────────────────────────

    @app.middleware("http")
    async def audit_log(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start
        audit_logger.info(
            "%s %s %d %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    # ── Routers ───────────────────────────────────────────────

    # meta first, the redirect route matches every path
    app.include_router(meta.router)
    app.include_router(redirect.router)

    return app

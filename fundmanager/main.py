"""
Fund Manager client: application entry-point.

Builds the FastAPI application that serves the fund management screen,
registers middleware, exception handlers and routes, and manages the
backend client's lifecycle.

Run with::

    uvicorn fundmanager.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from fundmanager.core.config import settings
from fundmanager.core.exceptions import add_exception_handlers
from fundmanager.core.logging import setup_logging
from fundmanager.middleware import RequestIDMiddleware, RequestTimingMiddleware
from fundmanager.services.fund_manager import FundManager
from fundmanager.services.gateway import FundGateway, build_backend_client
from fundmanager.ui.pages import router as pages_router

setup_logging()
logger = logging.getLogger(__name__)


def create_app(transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Build the application.

    ``transport`` replaces the network for the backend client; tests pass an
    ``httpx.MockTransport`` here.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Startup: open the backend client and load the fund list once.
        A failed first load leaves the list empty and shows the
        failure banner; the page still serves.

        Shutdown: close the backend client.
        """
        client = build_backend_client(transport=transport)
        manager = FundManager(FundGateway(client))
        app.state.fund_manager = manager

        logger.info("Loading funds from %s", settings.FUND_API_BASE_URL)
        if await manager.fetch_all_funds():
            logger.info("Loaded %d funds", len(manager.state.funds))

        yield

        logger.info("Shutting down, closing backend client")
        await client.aclose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Administrative screen for mutual fund records held by a REST backend.",
        lifespan=lifespan,
    )

    # ── Middleware (the last one added runs first) ──
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    add_exception_handlers(app)
    app.include_router(pages_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness probe with the backend address and cached row count."""
        manager: Optional[FundManager] = getattr(app.state, "fund_manager", None)
        return {
            "status": "ok",
            "version": settings.VERSION,
            "backend": settings.FUND_API_BASE_URL,
            "funds_cached": len(manager.state.funds) if manager else 0,
        }

    return app


app = create_app()

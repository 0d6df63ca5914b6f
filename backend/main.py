"""
PagePress FastAPI application.

Entry point for the public site server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend import db
from backend.config import settings
from backend.routes import public as public_routes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Initialize database pool
    - Close database pool on shutdown
    """
    # Startup
    await db.init_pool()
    logger.info("Database pool initialized (environment=%s)", settings.ENVIRONMENT)

    yield

    # Shutdown
    await db.close_pool()
    logger.info("Database pool closed")


app = FastAPI(
    title="PagePress",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}


# Register routes. The public router ends in a catch-all slug route, so it goes last.
app.include_router(public_routes.router)

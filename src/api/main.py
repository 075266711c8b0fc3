"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging and lifespan events, and wires the adapters
selected by Settings into app.state.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository import InMemoryUserRepository, PostgresUserRepository, run_migrations
from src.api.dependencies import build_anti_spam_checker
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "User Registration API v1 - Register users and manage their profiles",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the repository (in-memory, or PostgreSQL pool + migrations)
    - Creates the anti-spam adapter (with a shared AsyncClient for HTTP)
    - Closes the pool and HTTP client on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")

    pool: ConnectionPool | None = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresUserRepository(pool)
    else:
        logger.info("Using in-memory user repository")
        app.state.repository = InMemoryUserRepository()

    http_client: httpx.AsyncClient | None = None
    if settings.anti_spam_backend == "http":
        http_client = httpx.AsyncClient(timeout=settings.anti_spam_timeout_seconds)
    app.state.anti_spam = build_anti_spam_checker(settings, client=http_client)
    app.state.pool = pool
    logger.info("Anti-spam backend: %s", settings.anti_spam_backend)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if http_client is not None:
        await http_client.aclose()
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="userreg",
    description="User Registration API - Value objects, entity identity and a pluggable anti-spam port",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the application is up. With the PostgreSQL
    backend, also validates database connectivity and raises if the
    connection fails.
    """
    pool = request.app.state.pool
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}

"""Main module of the FastAPI application.

This module sets up the FastAPI application, the request logging middleware
and the exception handlers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from oauthbridge.api.middleware import (
    invalid_transition_exception_handler,
    log_requests,
    oauthbridge_exception_handler,
    unknown_provider_exception_handler,
)
from oauthbridge.api.v1.api import api_router
from oauthbridge.core.config import settings
from oauthbridge.core.exceptions import (
    InvalidHandshakeTransition,
    OAuthBridgeException,
    UnknownProviderException,
)
from oauthbridge.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events.

    Initializes the DI container on startup and releases the token store's
    connection pool on shutdown.
    """
    from oauthbridge.core import container as container_mod
    from oauthbridge.core.container import initialize_container, reset_container

    logger.info("Initializing dependency injection container...")
    initialize_container(settings)
    logger.info("Container initialized successfully")

    yield

    close = getattr(container_mod.container.token_store, "close", None)
    if close is not None:
        await close()
    reset_container()


app = FastAPI(
    title="OAuth Bridge",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

app.middleware("http")(log_requests)

# Register exception handlers
app.exception_handler(UnknownProviderException)(unknown_provider_exception_handler)
app.exception_handler(InvalidHandshakeTransition)(invalid_transition_exception_handler)
app.exception_handler(OAuthBridgeException)(oauthbridge_exception_handler)


@app.get("/health", include_in_schema=False)
async def health() -> dict:
    """Liveness probe."""
    return {"status": "ok"}

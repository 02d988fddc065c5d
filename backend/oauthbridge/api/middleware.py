"""Middleware and exception handlers for the FastAPI application."""

import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from oauthbridge.core.exceptions import (
    InvalidHandshakeTransition,
    OAuthBridgeException,
    UnknownProviderException,
)
from oauthbridge.core.logging import logger


async def log_requests(request: Request, call_next: callable) -> Response:
    """Middleware to log incoming requests.

    Only the path is logged: callback query strings carry tokens and verifiers.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info(
        f"Handled request {request.method} {request.url.path} in {duration:.2f} seconds. "
        f"Response code: {response.status_code}"
    )
    return response


async def unknown_provider_exception_handler(
    request: Request, exc: UnknownProviderException
) -> JSONResponse:
    """Exception handler for UnknownProviderException.

    Returns:
    -------
        JSONResponse: A 404 Not Found status response naming the provider.

    """
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def invalid_transition_exception_handler(
    request: Request, exc: InvalidHandshakeTransition
) -> JSONResponse:
    """Exception handler for InvalidHandshakeTransition.

    Returns:
    -------
        JSONResponse: A 409 Conflict status response.

    """
    return JSONResponse(status_code=409, content={"detail": exc.message})


async def oauthbridge_exception_handler(
    request: Request, exc: OAuthBridgeException
) -> JSONResponse:
    """Generic exception handler for all remaining OAuthBridgeException types.

    Returns:
    -------
        JSONResponse: A 500 Internal Server Error status response.

    """
    logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

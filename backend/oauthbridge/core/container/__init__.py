"""Dependency Injection Container Module.

This module provides the DI container and factory for wiring dependencies
across the application.

Usage:
------
    # Initialize at startup (call once from main.py)
    from oauthbridge.core.container import initialize_container
    from oauthbridge.core.config import settings
    initialize_container(settings)

    # Import the global container after initialization
    from oauthbridge.core import container as container_mod
    service = container_mod.container.handshake_service("twitter")

    # In tests (construct directly with fakes, don't use global)
    from oauthbridge.core.container import Container
    test_container = Container(
        token_store=FakeTokenStore(),
        request_executor=FakeRequestExecutor(),
        handshake_services={"twitter": FakeOAuth1HandshakeService(provider)},
    )

Module structure:
-----------------
    container/
    ├── __init__.py      # This file - exports public API
    ├── container.py     # Container dataclass (serves)
    └── factory.py       # create_container() (builds)
"""

from typing import TYPE_CHECKING

from oauthbridge.core.container.container import Container
from oauthbridge.core.container.factory import create_container

if TYPE_CHECKING:
    from oauthbridge.core.config import Settings

__all__ = ["Container", "create_container", "container", "initialize_container"]


container: Container | None = None
"""Global container instance.

Initialized via `initialize_container()` at application startup.

Do NOT import this in domain code. Domains receive dependencies
via constructor parameters, never by importing the container directly.
"""


def initialize_container(settings: "Settings") -> None:
    """Initialize the global container. Call once at startup.

    Args:
        settings: Application settings from core/config

    Raises:
        RuntimeError: If called more than once (container already initialized)
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings)


def reset_container() -> None:
    """Reset the global container to None. For testing only.

    WARNING: Do not use in production code.
    """
    global container
    container = None

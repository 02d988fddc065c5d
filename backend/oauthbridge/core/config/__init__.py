"""Configuration module for oauthbridge.

Provides centralized configuration management with type-safe enums.

Usage:
    from oauthbridge.core.config import settings, Environment

    # Access settings
    ttl = settings.TOKEN_STORE_TTL_SECONDS

    # Use enums for type safety
    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from oauthbridge.core.config.enums import Environment, TokenStoreBackendType
from oauthbridge.core.config.settings import Settings

__all__ = [
    "Settings",
    "TokenStoreBackendType",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()

"""Configuration enums for type-safe settings.

These enums provide type safety and IDE autocomplete for configuration values.
They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class TokenStoreBackendType(str, Enum):
    """Token store backends.

    Determines where request token pairs wait between start and callback.
    """

    MEMORY = "memory"
    REDIS = "redis"


class Environment(str, Enum):
    """Deployment environments.

    Controls environment-specific behavior like logging format and whether
    deterministic signing overrides are allowed.
    """

    LOCAL = "local"
    TEST = "test"
    DEV = "dev"
    PRD = "prd"

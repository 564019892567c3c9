"""
Runtime Configuration Module

Provides configuration loading and management for the shielded pool.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    PoolConfig,
    VerifierConfig,
    LoggingConfig,
    ApiConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "PoolConfig",
    "VerifierConfig",
    "LoggingConfig",
    "ApiConfig",
    "get_default_config",
    "set_default_config",
]

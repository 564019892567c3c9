"""
Module 07 - API Dependencies

Dependency injection for the API.
Provides the process-wide ShieldedPool.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig
from orchestrator.pool import ShieldedPool, create_pool

logger = logging.getLogger(__name__)


_pool: Optional[ShieldedPool] = None
_pool_lock = threading.Lock()


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a YAML file, then overlay environment variables.

    Search order for config file:
      1. $SHIELDED_POOL_CONFIG
      2. ./shielded_pool.yaml
      3. ~/.config/shielded_pool/config.yaml

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path(p) for p in (os.getenv("SHIELDED_POOL_CONFIG"),) if p
    ] + [
        Path.cwd() / "shielded_pool.yaml",
        Path.home() / ".config" / "shielded_pool" / "config.yaml",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            config = RuntimeConfig.from_yaml(path)
            logger.info("Loaded config from %s", path)
            break

    if config is None:
        # No config file found: start with defaults
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_pool() -> ShieldedPool:
    """
    Return the process-wide pool, building it at genesis on first use.

    Raises:
        PoolNotConfiguredError: If no verifying key is configured
    """
    global _pool
    if _pool is None:
        with _pool_lock:
            if _pool is None:
                from api.errors import PoolNotConfiguredError
                try:
                    _pool = create_pool(_load_runtime_config())
                except (ValueError, FileNotFoundError) as e:
                    logger.error("Pool could not be created: %s", e)
                    raise PoolNotConfiguredError(str(e)) from e
    return _pool


def set_pool(pool: Optional[ShieldedPool]) -> None:
    """Install (or clear, with None) the process-wide pool."""
    global _pool
    with _pool_lock:
        _pool = pool


def peek_pool() -> Optional[ShieldedPool]:
    """The current pool without building one."""
    return _pool

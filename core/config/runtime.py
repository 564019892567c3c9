"""
Runtime Configuration

Central configuration for pool parameters, the verifying key, logging and the
HTTP service.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from core.merkle.merkle_tree import TREE_DEPTH
from core.merkle.root_history import ROOT_HISTORY_SIZE
from core.schemas.pool import Asset, AssetKind

load_dotenv()


DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class TreeConfig:
    """Merkle tree shape. Fixed for the lifetime of a pool."""
    depth: int = TREE_DEPTH
    root_history_size: int = ROOT_HISTORY_SIZE

    def __post_init__(self):
        if not 1 <= self.depth <= 32:
            raise ValueError(f"Tree depth must be in [1, 32], got {self.depth}")
        if self.root_history_size < 1:
            raise ValueError("Root history size must be positive")


@dataclass
class PoolConfig:
    """Economic parameters of a fixed-denomination pool."""
    denomination: int = 10**18
    asset_kind: str = AssetKind.NATIVE.value
    asset_id: Optional[int] = None
    asset_location: Optional[str] = None

    def __post_init__(self):
        if self.denomination <= 0:
            raise ValueError("Denomination must be positive")

    def asset(self) -> Asset:
        return Asset(
            kind=AssetKind(self.asset_kind),
            asset_id=self.asset_id,
            location=self.asset_location,
        )


@dataclass
class VerifierConfig:
    """Where the Groth16 verifying key lives (snarkjs verification_key.json)."""
    verifying_key_path: Optional[str] = None


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT

    def resolved_level(self) -> int:
        value = logging.getLevelName(self.level.upper())
        return value if isinstance(value, int) else logging.INFO


@dataclass
class ApiConfig:
    """Configuration for the HTTP service."""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for a shielded pool.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)
    verifier: VerifierConfig = field(default_factory=VerifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - SHIELDED_POOL_TREE_DEPTH: Merkle tree depth
        - SHIELDED_POOL_ROOT_HISTORY_SIZE: Number of retained roots (K)
        - SHIELDED_POOL_DENOMINATION: Fixed deposit amount in base units
        - SHIELDED_POOL_VERIFYING_KEY: Path to verification_key.json
        - SHIELDED_POOL_LOG_LEVEL: Logging level name
        - SHIELDED_POOL_CORS_ORIGINS: Comma-separated allowed origins
        """
        overrides: dict[str, Any] = {}

        # Tree settings
        if os.getenv("SHIELDED_POOL_TREE_DEPTH"):
            overrides.setdefault("tree", {})["depth"] = int(os.getenv("SHIELDED_POOL_TREE_DEPTH"))
        if os.getenv("SHIELDED_POOL_ROOT_HISTORY_SIZE"):
            overrides.setdefault("tree", {})["root_history_size"] = int(
                os.getenv("SHIELDED_POOL_ROOT_HISTORY_SIZE")
            )

        # Pool settings
        if os.getenv("SHIELDED_POOL_DENOMINATION"):
            overrides.setdefault("pool", {})["denomination"] = int(
                os.getenv("SHIELDED_POOL_DENOMINATION")
            )

        # Verifier
        if os.getenv("SHIELDED_POOL_VERIFYING_KEY"):
            overrides.setdefault("verifier", {})["verifying_key_path"] = os.getenv(
                "SHIELDED_POOL_VERIFYING_KEY"
            )

        # Logging
        if os.getenv("SHIELDED_POOL_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("SHIELDED_POOL_LOG_LEVEL")

        # API
        if os.getenv("SHIELDED_POOL_CORS_ORIGINS"):
            overrides.setdefault("api", {})["cors_origins"] = [
                origin.strip()
                for origin in os.getenv("SHIELDED_POOL_CORS_ORIGINS", "").split(",")
                if origin.strip()
            ]

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        overrides = cls._get_env_overrides()
        return cls.from_dict(overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        pool_data = data.get("pool", {})
        verifier_data = data.get("verifier", {})
        logging_data = data.get("logging", {})
        api_data = data.get("api", {})

        return cls(
            tree=TreeConfig(**tree_data) if tree_data else TreeConfig(),
            pool=PoolConfig(**pool_data) if pool_data else PoolConfig(),
            verifier=VerifierConfig(**verifier_data) if verifier_data else VerifierConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            api=ApiConfig(**api_data) if api_data else ApiConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)
        # Re-run section validation on the overlaid values
        new_config.tree.__post_init__()
        new_config.pool.__post_init__()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "root_history_size": self.tree.root_history_size,
            },
            "pool": {
                "denomination": self.pool.denomination,
                "asset_kind": self.pool.asset_kind,
                "asset_id": self.pool.asset_id,
                "asset_location": self.pool.asset_location,
            },
            "verifier": {
                "verifying_key_path": self.verifier.verifying_key_path,
            },
            "logging": {
                "level": self.logging.level,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "cors_origins": list(self.api.cors_origins),
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env on next read)."""
    global _default_config
    _default_config = config

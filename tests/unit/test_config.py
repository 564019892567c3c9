"""
Runtime Configuration Unit Tests
Tests for core/config/runtime.py
"""
import logging

import pytest
from pydantic import ValidationError

from core.config.runtime import (
    LoggingConfig,
    PoolConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)
from core.schemas.pool import AssetKind


ENV_VARS = (
    "SHIELDED_POOL_TREE_DEPTH",
    "SHIELDED_POOL_ROOT_HISTORY_SIZE",
    "SHIELDED_POOL_DENOMINATION",
    "SHIELDED_POOL_VERIFYING_KEY",
    "SHIELDED_POOL_LOG_LEVEL",
    "SHIELDED_POOL_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    set_default_config(None)


class TestDefaults:

    def test_canonical_tree_shape(self):
        config = RuntimeConfig()
        assert config.tree.depth == 20
        assert config.tree.root_history_size == 30

    def test_native_asset_by_default(self):
        assert RuntimeConfig().pool.asset().is_native

    def test_default_config_is_cached(self):
        assert get_default_config() is get_default_config()


class TestValidation:

    @pytest.mark.parametrize("depth", [0, 33])
    def test_depth_bounds(self, depth):
        with pytest.raises(ValueError):
            TreeConfig(depth=depth)

    def test_history_must_be_positive(self):
        with pytest.raises(ValueError):
            TreeConfig(root_history_size=0)

    def test_denomination_must_be_positive(self):
        with pytest.raises(ValueError):
            PoolConfig(denomination=0)

    def test_foreign_asset_requires_location(self):
        config = PoolConfig(asset_kind="foreign", asset_id=7)
        with pytest.raises(ValidationError):
            config.asset()

    def test_foreign_asset(self):
        asset = PoolConfig(asset_kind="foreign", asset_id=7, asset_location="parachain/1000").asset()
        assert asset.kind == AssetKind.FOREIGN
        assert not asset.is_native

    def test_unknown_log_level_falls_back(self):
        assert LoggingConfig(level="chatty").resolved_level() == logging.INFO
        assert LoggingConfig(level="debug").resolved_level() == logging.DEBUG


class TestEnvironment:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SHIELDED_POOL_TREE_DEPTH", "8")
        monkeypatch.setenv("SHIELDED_POOL_DENOMINATION", "500")
        monkeypatch.setenv("SHIELDED_POOL_CORS_ORIGINS", "https://a.example, https://b.example")
        config = RuntimeConfig.from_env()
        assert config.tree.depth == 8
        assert config.tree.root_history_size == 30
        assert config.pool.denomination == 500
        assert config.api.cors_origins == ["https://a.example", "https://b.example"]

    def test_env_overlays_file_values(self, monkeypatch):
        base = RuntimeConfig.from_dict({"tree": {"depth": 10}, "pool": {"denomination": 5}})
        monkeypatch.setenv("SHIELDED_POOL_DENOMINATION", "9")
        merged = base.with_env_overrides()
        assert merged.tree.depth == 10
        assert merged.pool.denomination == 9
        assert base.pool.denomination == 5

    def test_overlay_is_validated(self, monkeypatch):
        monkeypatch.setenv("SHIELDED_POOL_TREE_DEPTH", "64")
        with pytest.raises(ValueError):
            RuntimeConfig().with_env_overrides()

    def test_no_overrides_returns_same_object(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config


class TestYaml:

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "shielded_pool.yaml"
        path.write_text(
            "tree:\n"
            "  depth: 12\n"
            "  root_history_size: 5\n"
            "verifier:\n"
            "  verifying_key_path: keys/verification_key.json\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        config = RuntimeConfig.from_yaml(path)
        assert config.tree.depth == 12
        assert config.tree.root_history_size == 5
        assert config.verifier.verifying_key_path == "keys/verification_key.json"
        assert config.logging.level == "DEBUG"
        assert config.pool.denomination == 10**18

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RuntimeConfig.from_yaml(path).to_dict() == RuntimeConfig().to_dict()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "absent.yaml")

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"tree": {"depth": 6}, "extra": {"label": "dev"}})
        assert RuntimeConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()

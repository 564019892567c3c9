"""
Pytest configuration and shared fixtures for shielded pool tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_zk = importlib.import_module("fixtures.zk_fixtures")

# Extract factory functions
make_commitment = _common.make_commitment
make_pool = _common.make_pool
make_pool_state = _common.make_pool_state

make_setup = _zk.make_setup
make_note = _zk.make_note


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(scope="session")
def zk_setup():
    """Verifying key and trapdoor for the six-input withdrawal circuit."""
    return make_setup()


@pytest.fixture(scope="session")
def verifying_key(zk_setup):
    vk, _ = zk_setup
    return vk


@pytest.fixture(scope="session")
def trapdoor(zk_setup):
    _, td = zk_setup
    return td


@pytest.fixture(scope="session")
def verifier(verifying_key):
    """Prepared verifier, shared so e(alpha, beta) is computed once."""
    from core.zk.groth16 import ProofVerifier
    return ProofVerifier(verifying_key)


@pytest.fixture
def pool_state():
    """Provide an empty small-depth PoolState."""
    return make_pool_state()


@pytest.fixture
def pool(verifier):
    """Provide an empty small-depth ShieldedPool with a recording executor."""
    return make_pool(verifier)


@pytest.fixture
def note():
    return make_note(0)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )

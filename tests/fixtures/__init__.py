"""
Test fixtures package for shielded pool tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: Small pools, pool state, commitments and runtime config
- zk_fixtures.py: Simulated Groth16 setup, proofs and deposit notes

Usage:
    from fixtures import make_pool, make_setup, make_withdrawal_proof

    def test_something():
        vk, trapdoor = make_setup()
        pool = make_pool(vk)
"""

from .common import (
    TEST_DENOMINATION,
    TEST_DEPTH,
    TEST_HISTORY,
    make_commitment,
    make_pool,
    make_pool_state,
    make_runtime_config,
)

from .zk_fixtures import (
    Trapdoor,
    make_note,
    make_proof,
    make_setup,
    make_withdrawal_proof,
)

__all__ = [
    # Common
    "TEST_DENOMINATION",
    "TEST_DEPTH",
    "TEST_HISTORY",
    "make_commitment",
    "make_pool",
    "make_pool_state",
    "make_runtime_config",
    # Groth16
    "Trapdoor",
    "make_note",
    "make_proof",
    "make_setup",
    "make_withdrawal_proof",
]

"""
Common test fixtures shared by all modules.

Provides factory functions for core pool structures:
- RuntimeConfig with small trees
- PoolState
- ShieldedPool wired to a test verifying key
- Commitments

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Optional

from core.config.runtime import PoolConfig, RuntimeConfig, TreeConfig
from core.crypto.field import reduce_to_field
from core.crypto.hashing import sha256
from core.schemas.pool import Asset
from core.state.pool_state import PoolState
from core.zk.groth16 import ProofVerifier, VerifyingKey
from orchestrator.effects import RecordingTransferExecutor, TransferExecutor
from orchestrator.events import EventLog
from orchestrator.pool import ShieldedPool


# Small enough for fast hashing, large enough for multi-level paths
TEST_DEPTH = 4
TEST_HISTORY = 30
TEST_DENOMINATION = 1_000


def make_commitment(index: int) -> int:
    """Deterministic commitment-like field element."""
    return reduce_to_field(sha256(b"commitment/" + index.to_bytes(4, "big")))


def make_runtime_config(
    depth: int = TEST_DEPTH,
    history_size: int = TEST_HISTORY,
    denomination: int = TEST_DENOMINATION,
    verifying_key_path: Optional[str] = None,
) -> RuntimeConfig:
    config = RuntimeConfig(
        tree=TreeConfig(depth=depth, root_history_size=history_size),
        pool=PoolConfig(denomination=denomination),
    )
    config.verifier.verifying_key_path = verifying_key_path
    return config


def make_pool_state(depth: int = TEST_DEPTH, history_size: int = TEST_HISTORY) -> PoolState:
    return PoolState(depth=depth, history_size=history_size)


def make_pool(
    verifier: ProofVerifier | VerifyingKey,
    *,
    depth: int = TEST_DEPTH,
    history_size: int = TEST_HISTORY,
    denomination: int = TEST_DENOMINATION,
    asset: Optional[Asset] = None,
    executor: Optional[TransferExecutor] = None,
    state: Optional[PoolState] = None,
) -> ShieldedPool:
    """
    Create a ShieldedPool for testing.

    Pass a ProofVerifier to reuse its prepared key across tests; building
    one from a raw VerifyingKey costs a pairing.
    """
    if isinstance(verifier, VerifyingKey):
        verifier = ProofVerifier(verifier)
    return ShieldedPool(
        state=state if state is not None else make_pool_state(depth, history_size),
        verifier=verifier,
        denomination=denomination,
        asset=asset,
        events=EventLog(),
        executor=executor or RecordingTransferExecutor(),
    )

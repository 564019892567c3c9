"""
Module 04 - Pool State
Commitment ledger, nullifier registry and the PoolState that owns them.

Usage:
    from core.state import PoolState

    state = PoolState(depth=20, history_size=30)
    with state.transaction() as journal:
        leaf_index = state.ledger.insert(commitment, journal)
"""
from .journal import Journal, UndoAction
from .ledger import CommitmentLedger
from .nullifiers import NullifierRegistry
from .pool_state import PoolState


__all__ = [
    "Journal",
    "UndoAction",
    "CommitmentLedger",
    "NullifierRegistry",
    "PoolState",
]

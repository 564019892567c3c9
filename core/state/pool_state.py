"""
Module 04 - Pool State
File: pool_state.py

PoolState owns the three pieces of persistent pool state:
- CommitmentLedger (commitments by leaf index)
- IncrementalMerkleTree (nodes + root history)
- NullifierRegistry (spent nullifier hashes)

It is constructed once at genesis and passed explicitly to the orchestrator.
All mutation goes through `transaction()`, which serializes writers on one
re-entrant lock and rolls every staged change back if the body raises.

Readers of the current root and root history use the tree's published
TreeView and never take the lock.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from core.merkle.incremental import IncrementalMerkleTree, TreeView
from core.merkle.merkle_tree import TREE_DEPTH, MerkleProof
from core.merkle.root_history import ROOT_HISTORY_SIZE
from core.schemas.canonical import canonicalize_value
from core.schemas.errors import (
    PoolException,
    PoolHaltedException,
    PoolInvariantViolation,
)
from core.schemas.pool import PoolSnapshot
from core.schemas.versioning import SCHEMA_VERSION, assert_supported_schema_version
from core.state.journal import Journal
from core.state.ledger import CommitmentLedger
from core.state.nullifiers import NullifierRegistry


logger = logging.getLogger(__name__)


class PoolState:
    """
    Ledger + tree + nullifier registry behind one write lock.

    Example:
        >>> state = PoolState(depth=20)
        >>> with state.transaction() as journal:
        ...     state.ledger.insert(commitment, journal)
    """

    def __init__(
        self,
        depth: int = TREE_DEPTH,
        history_size: int = ROOT_HISTORY_SIZE,
    ) -> None:
        self._lock = threading.RLock()
        self.tree = IncrementalMerkleTree(depth=depth, history_size=history_size)
        self.ledger = CommitmentLedger(self.tree)
        self.nullifiers = NullifierRegistry()
        self._halted_reason: Optional[str] = None
        self._active: Optional[Journal] = None

    # ------------------------------------------------------------------
    # Halting
    # ------------------------------------------------------------------

    @property
    def is_halted(self) -> bool:
        return self._halted_reason is not None

    @property
    def halted_reason(self) -> Optional[str]:
        return self._halted_reason

    def halt(self, reason: str) -> None:
        """Refuse every later mutation. Irreversible for this instance."""
        if self._halted_reason is None:
            self._halted_reason = reason
            logger.critical("Pool halted: %s", reason)

    def ensure_not_halted(self) -> None:
        if self._halted_reason is not None:
            raise PoolHaltedException(self._halted_reason)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[Journal]:
        """
        Run the body as one atomic unit of mutation.

        Yields a Journal that components record undo actions into. If the body
        raises, every staged change is undone and the exception propagates.
        A PoolInvariantViolation additionally halts the pool.

        Raises:
            PoolHaltedException: If the pool is halted
            PoolInvariantViolation: On nesting, or if rollback itself fails
        """
        with self._lock:
            self.ensure_not_halted()
            if self._active is not None:
                raise PoolInvariantViolation("Nested pool transaction")

            journal = Journal()
            self._active = journal
            try:
                yield journal
            except BaseException as exc:
                try:
                    journal.rollback()
                except Exception as rollback_error:
                    self.halt(f"rollback failed: {rollback_error}")
                    raise PoolInvariantViolation(
                        "Rollback failed; pool state is unreliable",
                        details={"cause": repr(rollback_error)},
                    ) from rollback_error
                if isinstance(exc, PoolInvariantViolation):
                    self.halt(exc.message)
                raise
            else:
                journal.commit()
            finally:
                self._active = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self.tree.depth

    @property
    def history_size(self) -> int:
        return self.tree.history_size

    def view(self) -> TreeView:
        return self.tree.view

    def current_root(self) -> int:
        return self.tree.current_root()

    def root_history(self) -> tuple[int, ...]:
        return self.tree.root_history()

    def is_known_root(self, candidate: int) -> bool:
        return self.tree.is_known_root(candidate)

    def is_spent(self, nullifier: int) -> bool:
        return self.nullifiers.is_spent(nullifier)

    def merkle_path(self, leaf_index: int) -> MerkleProof:
        with self._lock:
            return self.tree.merkle_path(leaf_index)

    def leaf_count(self) -> int:
        return self.tree.leaf_count

    def stats(self) -> dict[str, Any]:
        view = self.tree.view
        return {
            "tree_depth": self.depth,
            "capacity": self.tree.capacity,
            "leaf_count": view.leaf_count,
            "root_history_size": self.history_size,
            "spent_count": self.nullifiers.spent_count(),
            "halted": self.is_halted,
        }

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        """Return the logical pool state as a canonical-JSON-ready dict."""
        with self._lock:
            snapshot = PoolSnapshot(
                schema_version=SCHEMA_VERSION,
                tree_depth=self.depth,
                root_history_size=self.history_size,
                commitments=self.ledger.commitments(),
                nullifiers=list(self.nullifiers),
                root_history=list(self.root_history()),
                halted_reason=self._halted_reason,
            )
        return canonicalize_value(snapshot)

    @classmethod
    def from_snapshot(cls, data: dict[str, Any] | PoolSnapshot) -> "PoolState":
        """
        Rebuild a pool by replaying recorded commitments from empty.

        Raises:
            PoolInvariantViolation: If replay fails or the replayed root history
                disagrees with the recorded one
        """
        snapshot = data if isinstance(data, PoolSnapshot) else PoolSnapshot.model_validate(data)
        assert_supported_schema_version(snapshot.schema_version)

        state = cls(depth=snapshot.tree_depth, history_size=snapshot.root_history_size)
        try:
            for commitment in snapshot.commitments:
                state.ledger.insert(commitment)
            for nullifier in snapshot.nullifiers:
                state.nullifiers.mark_spent(nullifier)
        except PoolException as e:
            raise PoolInvariantViolation(
                "Snapshot replay failed",
                details={"cause": e.code, "message": e.message},
            ) from e

        if list(state.root_history()) != snapshot.root_history:
            raise PoolInvariantViolation(
                "Replayed root history does not match snapshot",
                details={
                    "replayed_root": hex(state.current_root()),
                    "leaf_count": len(snapshot.commitments),
                },
            )

        if snapshot.halted_reason is not None:
            state.halt(snapshot.halted_reason)

        logger.info(
            "Restored pool from snapshot: %d commitments, %d spent nullifiers",
            len(snapshot.commitments),
            len(snapshot.nullifiers),
        )
        return state

    def __repr__(self) -> str:
        return (
            f"PoolState(depth={self.depth}, leaves={self.leaf_count()}, "
            f"spent={self.nullifiers.spent_count()}, halted={self.is_halted})"
        )


__all__ = ["PoolState"]

"""
Module 03 - Incremental Merkle Tree Engine
O(depth) append-only Merkle tree with a bounded root history.

Owner: Protocol/Crypto Engineer
Module ID: M03

Nodes live in a dict arena keyed by (level, index); absent keys are empty
subtrees and read as zero[level]. Each insertion rewrites exactly one node per
level and publishes a fresh immutable TreeView, so readers of the current root
and the root history never see a half-applied insertion.

The engine does not lock. PoolState serializes writers and path reads.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from core.crypto.mimc import hash_pair
from core.merkle.merkle_tree import (
    TREE_DEPTH,
    MerkleProof,
    tree_capacity,
    zero_values,
)
from core.merkle.root_history import ROOT_HISTORY_SIZE, RootHistory
from core.schemas.errors import LeafIndexOutOfRangeException, PoolInvariantViolation

if TYPE_CHECKING:
    from core.state.journal import Journal


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeView:
    """Immutable snapshot of the tree's externally visible state."""
    root: int
    roots: tuple[int, ...]
    leaf_count: int

    def is_known_root(self, candidate: int) -> bool:
        if candidate == 0:
            return False
        return candidate in self.roots


class IncrementalMerkleTree:
    """
    Append-only Merkle tree of fixed depth.

    Example:
        >>> tree = IncrementalMerkleTree(depth=4)
        >>> tree.insert_leaf(0, commitment)
        >>> tree.is_known_root(tree.current_root())
        True
    """

    def __init__(
        self,
        depth: int = TREE_DEPTH,
        history_size: int = ROOT_HISTORY_SIZE,
    ) -> None:
        self._depth = depth
        self._zeros = zero_values(depth)
        self._nodes: dict[tuple[int, int], int] = {}
        self._next_index = 0
        self._history = RootHistory(history_size)
        self._history.append(self._zeros[depth])
        self._view = self._publish()

    @classmethod
    def from_leaves(
        cls,
        leaves: Iterable[int],
        depth: int = TREE_DEPTH,
        history_size: int = ROOT_HISTORY_SIZE,
    ) -> "IncrementalMerkleTree":
        """Rebuild a tree by replaying leaves from empty."""
        tree = cls(depth=depth, history_size=history_size)
        for index, leaf in enumerate(leaves):
            tree.insert_leaf(index, leaf)
        return tree

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def capacity(self) -> int:
        return tree_capacity(self._depth)

    @property
    def history_size(self) -> int:
        return self._history.size

    @property
    def leaf_count(self) -> int:
        return self._view.leaf_count

    @property
    def view(self) -> TreeView:
        return self._view

    def current_root(self) -> int:
        return self._view.root

    def root_history(self) -> tuple[int, ...]:
        """Up to K most recent roots, oldest first, current root last."""
        return self._view.roots

    def is_known_root(self, candidate: int) -> bool:
        return self._view.is_known_root(candidate)

    def insert_leaf(self, index: int, leaf: int, journal: Optional["Journal"] = None) -> int:
        """
        Place `leaf` at `index` and recompute its ancestors.

        Args:
            index: Must equal the current leaf count
            leaf: Commitment value
            journal: If given, receives an undo action restoring the prior state

        Returns:
            The new root

        Raises:
            PoolInvariantViolation: On a gap, an overwrite, or a full tree
        """
        if index != self._next_index:
            raise PoolInvariantViolation(
                "Leaf index is not the next sequential index",
                details={"index": index, "expected": self._next_index},
            )
        if index >= self.capacity:
            raise PoolInvariantViolation(
                "Leaf index beyond tree capacity",
                details={"index": index, "capacity": self.capacity},
            )

        updates: dict[tuple[int, int], int] = {(0, index): leaf}
        current = leaf
        position = index
        for level in range(self._depth):
            sibling = self._node(level, position ^ 1, updates)
            if position % 2 == 0:
                current = hash_pair(current, sibling)
            else:
                current = hash_pair(sibling, current)
            position //= 2
            updates[(level + 1, position)] = current

        if journal is not None:
            journal.record(self._undo_action(updates))

        self._nodes.update(updates)
        self._next_index = index + 1
        self._history.append(current)
        self._view = self._publish()

        logger.debug("Inserted leaf %d, root %s", index, hex(current))
        return current

    def merkle_path(self, index: int) -> MerkleProof:
        """
        Inclusion proof for the leaf at `index` against the current root.

        Raises:
            LeafIndexOutOfRangeException: If no leaf exists at index
        """
        if index < 0 or index >= self._next_index:
            raise LeafIndexOutOfRangeException(index, self._next_index)

        siblings: list[int] = []
        position = index
        for level in range(self._depth):
            siblings.append(self._node(level, position ^ 1))
            position //= 2

        return MerkleProof(
            leaf=self._nodes[(0, index)],
            index=index,
            siblings=tuple(siblings),
            root=self._view.root,
        )

    def leaves(self) -> list[int]:
        return [self._nodes[(0, i)] for i in range(self._next_index)]

    def _node(
        self,
        level: int,
        index: int,
        pending: Optional[dict[tuple[int, int], int]] = None,
    ) -> int:
        key = (level, index)
        if pending is not None and key in pending:
            return pending[key]
        return self._nodes.get(key, self._zeros[level])

    def _publish(self) -> TreeView:
        return TreeView(
            root=self._history.latest(),
            roots=self._history.as_tuple(),
            leaf_count=self._next_index,
        )

    def _undo_action(self, updates: dict[tuple[int, int], int]):
        previous = {key: self._nodes.get(key) for key in updates}
        previous_index = self._next_index
        previous_roots = self._history.as_tuple()
        previous_view = self._view

        def undo() -> None:
            for key, value in previous.items():
                if value is None:
                    self._nodes.pop(key, None)
                else:
                    self._nodes[key] = value
            self._next_index = previous_index
            self._history.restore(previous_roots)
            self._view = previous_view

        return undo

    def __repr__(self) -> str:
        return (
            f"IncrementalMerkleTree(depth={self._depth}, "
            f"leaves={self._next_index}, history={len(self._history)})"
        )


__all__ = ["TreeView", "IncrementalMerkleTree"]

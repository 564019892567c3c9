"""
Module 04 - Pool State
File: ledger.py

Commitment Ledger: append-only list of deposited commitments.

The ledger owns leaf index assignment. Indices are dense from 0 and never
reused; the tree is told to insert at exactly the index the ledger assigns.
"""
from __future__ import annotations

import logging
from typing import Iterator, Optional

from core.crypto.field import require_field_element
from core.merkle.incremental import IncrementalMerkleTree
from core.schemas.errors import (
    CommitmentAlreadyExistsException,
    PoolFullException,
    SchemaValidationException,
)
from core.state.journal import Journal


logger = logging.getLogger(__name__)


class CommitmentLedger:
    """Ordered commitments with O(1) membership."""

    def __init__(self, tree: IncrementalMerkleTree) -> None:
        self._tree = tree
        self._commitments: list[int] = []
        self._index_of: dict[int, int] = {}

    @property
    def capacity(self) -> int:
        return self._tree.capacity

    def insert(self, commitment: int, journal: Optional[Journal] = None) -> int:
        """
        Assign the next leaf index to `commitment` and insert it into the tree.

        Args:
            commitment: Field element produced by the depositor
            journal: Receives undo actions when called inside a transaction

        Returns:
            The assigned leaf index

        Raises:
            SchemaValidationException: If commitment is not a field element
            PoolFullException: If all 2^depth leaves are assigned
            CommitmentAlreadyExistsException: If commitment was deposited before
        """
        try:
            require_field_element(commitment, "commitment")
        except ValueError as e:
            raise SchemaValidationException(str(e), field_path="commitment") from e

        if len(self._commitments) >= self.capacity:
            raise PoolFullException(self.capacity)

        existing = self._index_of.get(commitment)
        if existing is not None:
            raise CommitmentAlreadyExistsException(existing)

        leaf_index = len(self._commitments)
        # Tree first: an invariant failure there must leave the ledger untouched
        self._tree.insert_leaf(leaf_index, commitment, journal)

        self._commitments.append(commitment)
        self._index_of[commitment] = leaf_index
        if journal is not None:
            journal.record(self._undo_append(commitment))

        return leaf_index

    def contains(self, commitment: int) -> bool:
        return commitment in self._index_of

    def leaf_index_of(self, commitment: int) -> Optional[int]:
        return self._index_of.get(commitment)

    def commitments(self) -> list[int]:
        return list(self._commitments)

    def _undo_append(self, commitment: int):
        def undo() -> None:
            self._commitments.pop()
            del self._index_of[commitment]
        return undo

    def __contains__(self, commitment: object) -> bool:
        return commitment in self._index_of

    def __len__(self) -> int:
        return len(self._commitments)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._commitments))


__all__ = ["CommitmentLedger"]

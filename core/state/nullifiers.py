"""
Module 04 - Pool State
File: nullifiers.py

Nullifier Registry: the set of spent nullifier hashes.

Presence means spent, forever. There is no public removal. Only
a transaction journal may undo an insertion made within the same failed
atomic unit.
"""
from __future__ import annotations

from typing import Iterator, Optional

from core.schemas.errors import NullifierAlreadySpentException
from core.state.journal import Journal


class NullifierRegistry:
    """Insertion-ordered set of spent nullifier hashes."""

    def __init__(self) -> None:
        # dict keeps insertion order for snapshots
        self._spent: dict[int, None] = {}

    def is_spent(self, nullifier: int) -> bool:
        return nullifier in self._spent

    def mark_spent(self, nullifier: int, journal: Optional[Journal] = None) -> None:
        """
        Record `nullifier` as spent.

        Callers hold the pool write lock, so check-then-insert is atomic.

        Raises:
            NullifierAlreadySpentException: If already present
        """
        if nullifier in self._spent:
            raise NullifierAlreadySpentException(details={"nullifier_hash": hex(nullifier)})
        self._spent[nullifier] = None
        if journal is not None:
            journal.record(lambda: self._spent.pop(nullifier, None))

    def spent_count(self) -> int:
        return len(self._spent)

    def __contains__(self, nullifier: object) -> bool:
        return nullifier in self._spent

    def __len__(self) -> int:
        return len(self._spent)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._spent))


__all__ = ["NullifierRegistry"]

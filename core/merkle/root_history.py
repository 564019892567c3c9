"""
Module 03 - Root History
Bounded window of recently valid Merkle roots.

Owner: Protocol/Crypto Engineer
Module ID: M03

Withdrawal proofs are generated off-chain against whatever root the client
saw. Deposits landing in between advance the tree, so a withdrawal accepts
any of the last K roots instead of only the current one.
"""
from __future__ import annotations

from collections import deque
from typing import Iterator


# Canonical window size
ROOT_HISTORY_SIZE: int = 30


class RootHistory:
    """
    Ring buffer of the last `size` roots, oldest evicted first.

    Ordering is insertion order; the most recent root is last.
    """

    def __init__(self, size: int = ROOT_HISTORY_SIZE) -> None:
        if size < 1:
            raise ValueError(f"Root history size must be positive, got {size}")
        self._size = size
        self._roots: deque[int] = deque(maxlen=size)

    @property
    def size(self) -> int:
        return self._size

    def append(self, root: int) -> None:
        self._roots.append(root)

    def latest(self) -> int | None:
        return self._roots[-1] if self._roots else None

    def contains(self, root: int) -> bool:
        # K is small; a linear scan beats maintaining a parallel index
        return root in self._roots

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(self._roots)

    def restore(self, roots: tuple[int, ...]) -> None:
        """Replace the window wholesale (used by transaction rollback)."""
        self._roots = deque(roots, maxlen=self._size)

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self) -> Iterator[int]:
        return iter(tuple(self._roots))

    def __repr__(self) -> str:
        return f"RootHistory(size={self._size}, held={len(self._roots)})"


__all__ = ["ROOT_HISTORY_SIZE", "RootHistory"]

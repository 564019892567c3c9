"""
Module 04 - Pool State
File: journal.py

Undo journal for one atomic unit of pool mutation.

Each component that mutates during a transaction records a closure that
restores its prior state. On failure the closures run newest first; on
success the journal is simply discarded.
"""
from __future__ import annotations

import logging
from typing import Callable

from core.schemas.errors import PoolInvariantViolation


logger = logging.getLogger(__name__)

UndoAction = Callable[[], None]


class Journal:
    """Ordered list of undo actions."""

    def __init__(self) -> None:
        self._undo: list[UndoAction] = []
        self._closed = False

    def record(self, undo: UndoAction) -> None:
        if self._closed:
            raise PoolInvariantViolation("Journal used after commit or rollback")
        self._undo.append(undo)

    def rollback(self) -> int:
        """
        Run every recorded undo action, newest first.

        Returns:
            Number of actions undone
        """
        count = len(self._undo)
        while self._undo:
            undo = self._undo.pop()
            undo()
        self._closed = True
        if count:
            logger.debug("Rolled back %d staged mutation(s)", count)
        return count

    def commit(self) -> None:
        self._undo.clear()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._undo)


__all__ = ["Journal", "UndoAction"]

"""
Module 06 - Pool Event Log

Records Deposit and Withdrawal events emitted by the orchestrator.

Events are written inside the pool transaction: the journal removes an event
again if the surrounding deposit or withdrawal rolls back, so the log only
ever holds events for committed state.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from core.schemas.canonical import dumps_canonical
from core.schemas.pool import DepositEvent, PoolEvent, WithdrawalEvent
from core.state.journal import Journal


def generate_event_id(event: PoolEvent, sequence: int) -> str:
    """
    Generate a deterministic event ID from the event body and its position.

    Format: ev_{event_type}_{hash_prefix}
    """
    stable_str = f"{sequence}|{dumps_canonical(event)}"
    hash_hex = hashlib.sha256(stable_str.encode()).hexdigest()[:12]
    return f"ev_{event.event_type}_{hash_hex}"


@dataclass(frozen=True)
class EventRecord:
    sequence: int
    event_id: str
    event: PoolEvent

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "event_id": self.event_id,
            "event": self.event.model_dump(mode="json"),
        }


class EventSink(ABC):
    """Destination for pool events. Raising aborts the enclosing transaction."""

    @abstractmethod
    def emit(self, event: PoolEvent, journal: Optional[Journal] = None) -> str:
        """Record the event and return its id."""


class EventLog(EventSink):
    """
    In-memory, append-only event log.

    Usage:
        log = EventLog()
        log.emit(DepositEvent(commitment=c, leaf_index=0, new_root=r))
        deposits = log.get_deposits()
    """

    def __init__(self) -> None:
        self._records: list[EventRecord] = []

    def emit(self, event: PoolEvent, journal: Optional[Journal] = None) -> str:
        sequence = len(self._records)
        record = EventRecord(
            sequence=sequence,
            event_id=generate_event_id(event, sequence),
            event=event,
        )
        self._records.append(record)
        if journal is not None:
            journal.record(self._records.pop)
        return record.event_id

    def get_records(self) -> list[EventRecord]:
        return list(self._records)

    def get_events(self, event_type: Optional[str] = None) -> list[PoolEvent]:
        return [
            r.event for r in self._records
            if event_type is None or r.event.event_type == event_type
        ]

    def get_deposits(self) -> list[DepositEvent]:
        return [r.event for r in self._records if isinstance(r.event, DepositEvent)]

    def get_withdrawals(self) -> list[WithdrawalEvent]:
        return [r.event for r in self._records if isinstance(r.event, WithdrawalEvent)]

    def get_by_id(self, event_id: str) -> Optional[EventRecord]:
        for record in self._records:
            if record.event_id == event_id:
                return record
        return None

    def clear(self) -> None:
        self._records.clear()

    def to_dict_list(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self._records]

    def __len__(self) -> int:
        return len(self._records)


__all__ = [
    "generate_event_id",
    "EventRecord",
    "EventSink",
    "EventLog",
]

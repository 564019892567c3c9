"""
Module 06 - Transfer Effects

The pool core never moves funds itself. A committed withdrawal produces a
TransferEffect that the host ledger's TransferExecutor carries out inside the
same atomic unit: if the executor raises, the withdrawal is rolled back.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from core.schemas.pool import Asset


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CrossChainInstruction:
    """Release to an account on another chain. Message encoding is the executor's job."""
    destination_chain_hash: int
    beneficiary: str
    asset: Asset
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "destination_chain_hash": hex(self.destination_chain_hash),
            "beneficiary": self.beneficiary,
            "asset": self.asset.model_dump(mode="json", exclude_none=True),
            "amount": self.amount,
        }


@dataclass(frozen=True)
class TransferEffect:
    """
    Funds movement authorized by one withdrawal.

    recipient receives `amount` (denomination - fee) and relayer receives
    `fee`, both in the pool asset; `total` is that pool-asset outflow.
    `refund` is a separate native-asset leg paid to the recipient (non-zero
    only for foreign-asset pools) and is not part of `total`. When
    `cross_chain` is set the recipient's share leaves through that
    instruction instead of a local transfer.
    """
    asset: Asset
    recipient: str
    amount: int
    relayer: str
    fee: int
    refund: int = 0
    cross_chain: Optional[CrossChainInstruction] = None

    @property
    def total(self) -> int:
        return self.amount + self.fee

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset": self.asset.model_dump(mode="json", exclude_none=True),
            "recipient": self.recipient,
            "amount": self.amount,
            "relayer": self.relayer,
            "fee": self.fee,
            "refund": self.refund,
            "cross_chain": self.cross_chain.to_dict() if self.cross_chain else None,
        }


class TransferExecutor(ABC):
    """Host-ledger hook that performs a TransferEffect or raises."""

    @abstractmethod
    def execute(self, effect: TransferEffect) -> None:
        """
        Carry out the transfer.

        Raises:
            Exception: Any failure; the pool rolls the withdrawal back
        """


@dataclass
class RecordingTransferExecutor(TransferExecutor):
    """
    In-memory executor that records effects instead of moving funds.

    Used by the HTTP service and in tests. Set `fail_with` to make the next
    executions raise.
    """
    effects: list[TransferEffect] = field(default_factory=list)
    fail_with: Optional[Exception] = None

    def execute(self, effect: TransferEffect) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.effects.append(effect)
        logger.debug(
            "Recorded transfer: %d to %s, fee %d to %s",
            effect.amount, effect.recipient, effect.fee, effect.relayer,
        )

    def clear(self) -> None:
        self.effects.clear()


__all__ = [
    "CrossChainInstruction",
    "TransferEffect",
    "TransferExecutor",
    "RecordingTransferExecutor",
]

"""
Module 01 - Schemas & Canonicalization
File: pool.py

Purpose: Schemas for pool events, receipts, assets and snapshots.

Field elements are carried as plain ints. Range checks against the field
modulus happen in the crypto layer, which this module must not import
(core.crypto.hashing depends on core.schemas.canonical).
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .versioning import SCHEMA_VERSION


class AssetKind(str, Enum):
    """Which asset the pool's fixed denomination is paid in."""
    NATIVE = "native"
    FOREIGN = "foreign"


class Asset(BaseModel):
    """
    Pool asset.

    NATIVE carries nothing else. FOREIGN carries the registered asset id and
    the origin location it is reserve-transferred from.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: AssetKind = Field(default=AssetKind.NATIVE)
    asset_id: Optional[int] = Field(default=None, ge=0)
    location: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _check_variant(self) -> "Asset":
        if self.kind == AssetKind.NATIVE:
            if self.asset_id is not None or self.location is not None:
                raise ValueError("Native asset takes no asset_id or location")
        elif self.asset_id is None or self.location is None:
            raise ValueError("Foreign asset requires asset_id and location")
        return self

    @property
    def is_native(self) -> bool:
        return self.kind == AssetKind.NATIVE


class DepositEvent(BaseModel):
    """Emitted once per admitted deposit."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    event_type: Literal["deposit"] = "deposit"
    commitment: int = Field(..., ge=0)
    leaf_index: int = Field(..., ge=0)
    new_root: int = Field(..., ge=0)


class WithdrawalEvent(BaseModel):
    """
    Emitted once per committed withdrawal.

    Carries public withdrawal data only; nothing here links back to a
    commitment or leaf index.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    event_type: Literal["withdrawal"] = "withdrawal"
    nullifier_hash: int = Field(..., ge=0)
    recipient: str = Field(..., min_length=1)
    relayer: str = Field(..., min_length=1)
    fee: int = Field(..., ge=0)
    refund: int = Field(default=0, ge=0)
    amount: int = Field(..., ge=0, description="Amount released to the recipient")
    destination_chain_hash: Optional[int] = Field(default=None, ge=0)


PoolEvent = DepositEvent | WithdrawalEvent


class DepositReceipt(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_index: int = Field(..., ge=0)
    new_root: int = Field(..., ge=0)


class WithdrawalReceipt(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    recipient: str
    amount: int = Field(..., ge=0)
    relayer: str
    fee: int = Field(..., ge=0)
    refund: int = Field(default=0, ge=0)
    nullifier_hash: int = Field(..., ge=0)
    destination_chain_hash: Optional[int] = Field(default=None, ge=0)


class PoolSnapshot(BaseModel):
    """
    Logical persisted state of a pool.

    The host ledger stores this; PoolState.from_snapshot() rebuilds the tree
    by replaying `commitments` and checks the result against `root_history`.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    tree_depth: int = Field(..., ge=1)
    root_history_size: int = Field(..., ge=1)
    commitments: list[int] = Field(default_factory=list)
    nullifiers: list[int] = Field(default_factory=list)
    root_history: list[int] = Field(default_factory=list)
    halted_reason: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def _check_sizes(self) -> "PoolSnapshot":
        if len(self.commitments) > (1 << self.tree_depth):
            raise ValueError("More commitments than tree capacity")
        if len(self.root_history) > self.root_history_size:
            raise ValueError("Root history longer than its configured size")
        return self


__all__ = [
    "AssetKind",
    "Asset",
    "DepositEvent",
    "WithdrawalEvent",
    "PoolEvent",
    "DepositReceipt",
    "WithdrawalReceipt",
    "PoolSnapshot",
]

"""
Module 07 - Pool Routes

Deposit, withdraw and read-only pool queries.

Handlers are plain `def` so FastAPI runs them in its threadpool: proof
verification is CPU-bound and must not block the event loop.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from api.deps import get_pool
from api.errors import InvalidRequestError
from api.models.requests import DepositRequest, WithdrawRequest
from api.models.responses import (
    DepositResponse,
    MerklePathResponse,
    NullifierResponse,
    RootResponse,
    RootsResponse,
    WithdrawResponse,
)
from core.crypto.field import field_from_hex, field_to_hex
from core.crypto.hashing import from_hex
from orchestrator.pool import ShieldedPool, WithdrawalRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pool", tags=["pool"])


def _parse_field(value: str, name: str) -> int:
    try:
        return field_from_hex(value)
    except ValueError as e:
        raise InvalidRequestError(f"{name}: {e}", details={"field": name}) from e


def _parse_optional_field(value: Optional[str], name: str) -> Optional[int]:
    return None if value is None else _parse_field(value, name)


@router.get("/root", response_model=RootResponse)
def get_root(pool: ShieldedPool = Depends(get_pool)) -> RootResponse:
    view = pool.state.view()
    return RootResponse(root=field_to_hex(view.root), leaf_count=view.leaf_count)


@router.get("/roots", response_model=RootsResponse)
def get_roots(pool: ShieldedPool = Depends(get_pool)) -> RootsResponse:
    view = pool.state.view()
    return RootsResponse(
        current=field_to_hex(view.root),
        roots=[field_to_hex(r) for r in view.roots],
        history_size=pool.state.history_size,
    )


@router.get("/nullifiers/{nullifier_hash}", response_model=NullifierResponse)
def get_nullifier(nullifier_hash: str, pool: ShieldedPool = Depends(get_pool)) -> NullifierResponse:
    value = _parse_field(nullifier_hash, "nullifier_hash")
    return NullifierResponse(nullifier_hash=field_to_hex(value), spent=pool.is_spent(value))


@router.get("/path/{leaf_index}", response_model=MerklePathResponse)
def get_merkle_path(leaf_index: int, pool: ShieldedPool = Depends(get_pool)) -> MerklePathResponse:
    return MerklePathResponse(**pool.merkle_path(leaf_index).to_dict())


@router.post("/deposit", response_model=DepositResponse)
def deposit(request: DepositRequest, pool: ShieldedPool = Depends(get_pool)) -> DepositResponse:
    commitment = _parse_field(request.commitment, "commitment")
    outcome = pool.process_deposit(commitment)
    if outcome.error is not None:
        raise outcome.error
    return DepositResponse(
        state=outcome.state.value,
        leaf_index=outcome.receipt.leaf_index,
        new_root=field_to_hex(outcome.receipt.new_root),
    )


@router.post("/withdraw", response_model=WithdrawResponse)
def withdraw(request: WithdrawRequest, pool: ShieldedPool = Depends(get_pool)) -> WithdrawResponse:
    # JSON proofs are decoded by the pool, after the root and nullifier checks
    if request.proof_json is not None:
        proof = request.proof_json
    else:
        try:
            proof = from_hex(request.proof)
        except ValueError as e:
            raise InvalidRequestError(f"proof: {e}", details={"field": "proof"}) from e

    outcome = pool.process_withdrawal(
        WithdrawalRequest(
            proof=proof,
            root=_parse_field(request.root, "root"),
            nullifier_hash=_parse_field(request.nullifier_hash, "nullifier_hash"),
            recipient=request.recipient,
            fee=request.fee,
            relayer=request.relayer,
            refund=request.refund,
            destination_chain_hash=_parse_optional_field(
                request.destination_chain_hash, "destination_chain_hash"
            ),
        )
    )
    if outcome.error is not None:
        raise outcome.error

    receipt = outcome.receipt
    return WithdrawResponse(
        state=outcome.state.value,
        recipient=receipt.recipient,
        amount=receipt.amount,
        relayer=receipt.relayer,
        fee=receipt.fee,
        refund=receipt.refund,
        nullifier_hash=field_to_hex(receipt.nullifier_hash),
        destination_chain_hash=(
            field_to_hex(receipt.destination_chain_hash)
            if receipt.destination_chain_hash is not None
            else None
        ),
    )

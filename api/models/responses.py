"""
Module 07 - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "shielded-pool-api"
    version: str = "v1"
    pool: Optional[dict[str, Any]] = Field(
        default=None,
        description="Pool statistics when a pool is configured",
    )


class RootResponse(BaseModel):
    """Response for GET /pool/root."""

    root: str = Field(..., description="Current Merkle root")
    leaf_count: int = Field(..., description="Number of deposits so far")


class RootsResponse(BaseModel):
    """Response for GET /pool/roots."""

    current: str = Field(..., description="Current Merkle root")
    roots: list[str] = Field(..., description="Retained roots, oldest first")
    history_size: int = Field(..., description="Maximum number of retained roots")


class NullifierResponse(BaseModel):
    """Response for GET /pool/nullifiers/{nullifier_hash}."""

    nullifier_hash: str
    spent: bool


class MerklePathResponse(BaseModel):
    """Response for GET /pool/path/{leaf_index}."""

    leaf: str
    index: int
    siblings: list[str]
    path_bits: list[int]
    root: str


class DepositResponse(BaseModel):
    """Response for POST /pool/deposit."""

    ok: bool = True
    state: str = Field(..., description="Final deposit state")
    leaf_index: int
    new_root: str


class WithdrawResponse(BaseModel):
    """Response for POST /pool/withdraw."""

    ok: bool = True
    state: str = Field(..., description="Final withdrawal state")
    recipient: str
    amount: int = Field(..., description="Amount released to the recipient")
    relayer: str
    fee: int
    refund: int = 0
    nullifier_hash: str
    destination_chain_hash: Optional[str] = None


class ErrorDetail(BaseModel):
    """Error detail information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = Field(default=False)


class ErrorResponse(BaseModel):
    """Error response format."""

    ok: bool = False
    error: ErrorDetail

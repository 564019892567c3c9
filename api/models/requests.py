"""
Module 07 - API Request Models

Pydantic models for API request validation.

Field elements travel as 0x-prefixed 64-character hex strings; amounts as
plain integers in base units.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


HEX_FIELD_PATTERN = r"^0x[0-9a-fA-F]{64}$"


class DepositRequest(BaseModel):
    """Request body for POST /pool/deposit."""

    commitment: str = Field(
        ...,
        pattern=HEX_FIELD_PATTERN,
        description="Commitment field element (32-byte big-endian hex)",
    )


class WithdrawRequest(BaseModel):
    """Request body for POST /pool/withdraw."""

    proof: Optional[str] = Field(
        default=None,
        pattern=r"^0x[0-9a-fA-F]*$",
        description="256-byte Groth16 proof as 0x-hex (A | B | C, EIP-197 ordering)",
    )
    proof_json: Optional[dict[str, Any]] = Field(
        default=None,
        description="snarkjs proof.json content (alternative to `proof`)",
    )
    root: str = Field(..., pattern=HEX_FIELD_PATTERN)
    nullifier_hash: str = Field(..., pattern=HEX_FIELD_PATTERN)
    recipient: str = Field(..., min_length=1, max_length=256)
    relayer: str = Field(..., min_length=1, max_length=256)
    fee: int = Field(default=0, ge=0)
    refund: int = Field(default=0, ge=0)
    destination_chain_hash: Optional[str] = Field(default=None, pattern=HEX_FIELD_PATTERN)

    @model_validator(mode="after")
    def _exactly_one_proof(self) -> "WithdrawRequest":
        if (self.proof is None) == (self.proof_json is None):
            raise ValueError("Provide exactly one of `proof` or `proof_json`")
        return self

"""API request and response models."""

from api.models.requests import DepositRequest, WithdrawRequest
from api.models.responses import (
    HealthResponse,
    RootResponse,
    RootsResponse,
    NullifierResponse,
    MerklePathResponse,
    DepositResponse,
    WithdrawResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "DepositRequest",
    "WithdrawRequest",
    "HealthResponse",
    "RootResponse",
    "RootsResponse",
    "NullifierResponse",
    "MerklePathResponse",
    "DepositResponse",
    "WithdrawResponse",
    "ErrorDetail",
    "ErrorResponse",
]

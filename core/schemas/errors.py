"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the shielded pool.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Rejections (pool full, duplicate commitment, invalid root, spent nullifier,
failed proof, malformed public inputs) leave the pool untouched. Invariant
violations are fatal: the pool halts and refuses further mutations.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pool."""

    # Schema & Serialization Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"

    # Deposit Errors
    POOL_FULL = "POOL_FULL"
    COMMITMENT_ALREADY_EXISTS = "COMMITMENT_ALREADY_EXISTS"

    # Withdrawal Errors
    INVALID_ROOT = "INVALID_ROOT"
    NULLIFIER_ALREADY_SPENT = "NULLIFIER_ALREADY_SPENT"
    PROOF_VERIFICATION_FAILED = "PROOF_VERIFICATION_FAILED"
    MALFORMED_PUBLIC_INPUTS = "MALFORMED_PUBLIC_INPUTS"

    # Merkle Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    LEAF_INDEX_OUT_OF_RANGE = "LEAF_INDEX_OUT_OF_RANGE"

    # Fatal Errors
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
    POOL_HALTED = "POOL_HALTED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class PoolError(BaseModel):
    """
    Base error model for structured error communication.

    Used to hand rejections across process boundaries (API responses,
    host ledger dispatch results) without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_ROOT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the caller can retry with corrected input",
    )

    def to_exception(self) -> "PoolException":
        """Convert this error model to a raised exception."""
        return PoolException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class PoolException(Exception):
    """
    Base exception for all shielded pool errors.

    Carries structured error information and can be converted
    to/from PoolError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "POOL_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> PoolError:
        """Convert this exception to a PoolError model."""
        return PoolError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(PoolException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class SchemaValidationException(PoolException):
    """Exception raised when schema validation fails."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


# -----------------------------------------------------------------------------
# Deposit rejections
# -----------------------------------------------------------------------------

class DepositError(PoolException):
    """Base class for recoverable deposit rejections."""


class PoolFullException(DepositError):
    """Raised when the tree already holds its maximum number of leaves."""

    def __init__(self, capacity: int, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        full_details["capacity"] = capacity
        super().__init__(
            message=f"Pool is full: all {capacity} leaves are assigned",
            code=ErrorCodes.POOL_FULL,
            details=full_details,
            retryable=False,
        )


class CommitmentAlreadyExistsException(DepositError):
    """Raised when the same commitment is deposited twice."""

    def __init__(self, leaf_index: int, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        full_details["leaf_index"] = leaf_index
        super().__init__(
            message=f"Commitment already deposited at leaf {leaf_index}",
            code=ErrorCodes.COMMITMENT_ALREADY_EXISTS,
            details=full_details,
            retryable=False,
        )


# -----------------------------------------------------------------------------
# Withdrawal rejections
# -----------------------------------------------------------------------------

class WithdrawError(PoolException):
    """Base class for recoverable withdrawal rejections."""


class InvalidRootException(WithdrawError):
    """Raised when the claimed root is not in the retained root history."""

    def __init__(self, message: str = "Unknown Merkle root", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_ROOT,
            details=details,
            retryable=True,
        )


class NullifierAlreadySpentException(WithdrawError):
    """Raised on a double-withdrawal attempt."""

    def __init__(self, message: str = "Nullifier has already been spent", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NULLIFIER_ALREADY_SPENT,
            details=details,
            retryable=False,
        )


class ProofVerificationFailedException(WithdrawError):
    """Raised when the Groth16 check fails or the proof does not decode."""

    def __init__(self, message: str = "Proof verification failed", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_VERIFICATION_FAILED,
            details=details,
            retryable=False,
        )


class MalformedPublicInputsException(WithdrawError):
    """Raised when the public-input vector does not match the schema."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PUBLIC_INPUTS,
            details=full_details,
            retryable=False,
        )


# -----------------------------------------------------------------------------
# Merkle path errors (read side)
# -----------------------------------------------------------------------------

class LeafIndexOutOfRangeException(PoolException):
    """Raised when a Merkle path is requested for an unassigned leaf."""

    def __init__(self, leaf_index: int, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {leaf_index} out of range for {leaf_count} leaves",
            code=ErrorCodes.LEAF_INDEX_OUT_OF_RANGE,
            details={"leaf_index": leaf_index, "leaf_count": leaf_count},
            retryable=False,
        )


# -----------------------------------------------------------------------------
# Fatal errors
# -----------------------------------------------------------------------------

class PoolInvariantViolation(PoolException):
    """
    Raised when internal state is found inconsistent.

    Indicates a bug in the core (e.g. a leaf index gap or tree/ledger
    desynchronization). Never retryable; the pool halts.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
            retryable=False,
        )


class PoolHaltedException(PoolException):
    """Raised for every mutation attempted after an invariant violation."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Pool halted after invariant violation: {reason}",
            code=ErrorCodes.POOL_HALTED,
            details={"reason": reason},
            retryable=False,
        )

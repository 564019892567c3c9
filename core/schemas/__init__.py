"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    PUBLIC_INPUT_SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SUPPORTED_PUBLIC_INPUT_SCHEMA_VERSIONS,
    SchemaVersion,
    PublicInputSchemaVersion,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
    assert_supported_public_input_version,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    ErrorCodes,
    PoolError,
    PoolException,
    CanonicalizationException,
    SchemaValidationException,
    DepositError,
    PoolFullException,
    CommitmentAlreadyExistsException,
    WithdrawError,
    InvalidRootException,
    NullifierAlreadySpentException,
    ProofVerificationFailedException,
    MalformedPublicInputsException,
    LeafIndexOutOfRangeException,
    PoolInvariantViolation,
    PoolHaltedException,
)

# Pool events, receipts and snapshots
from .pool import (
    AssetKind,
    Asset,
    DepositEvent,
    WithdrawalEvent,
    PoolEvent,
    DepositReceipt,
    WithdrawalReceipt,
    PoolSnapshot,
)

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "PUBLIC_INPUT_SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "SUPPORTED_PUBLIC_INPUT_SCHEMA_VERSIONS",
    "SchemaVersion",
    "PublicInputSchemaVersion",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    "assert_supported_public_input_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "ErrorCodes",
    "PoolError",
    "PoolException",
    "CanonicalizationException",
    "SchemaValidationException",
    "DepositError",
    "PoolFullException",
    "CommitmentAlreadyExistsException",
    "WithdrawError",
    "InvalidRootException",
    "NullifierAlreadySpentException",
    "ProofVerificationFailedException",
    "MalformedPublicInputsException",
    "LeafIndexOutOfRangeException",
    "PoolInvariantViolation",
    "PoolHaltedException",
    # Pool
    "AssetKind",
    "Asset",
    "DepositEvent",
    "WithdrawalEvent",
    "PoolEvent",
    "DepositReceipt",
    "WithdrawalReceipt",
    "PoolSnapshot",
]

"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize snapshot and public-input schema version constants.
This file must stay tiny and import nothing from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Snapshot format version
SCHEMA_VERSION: str = "v1"

# Public-input vector layout shared with the off-chain proof generator
PUBLIC_INPUT_SCHEMA_VERSION: str = "v1"

SchemaVersion = Literal["v1"]
PublicInputSchemaVersion = Literal["v1"]

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})
SUPPORTED_PUBLIC_INPUT_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedSchemaVersionError(ValueError):
    """Raised when an unsupported snapshot schema version is encountered."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_SCHEMA_VERSIONS
        super().__init__(
            f"Unsupported schema version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_schema_version(version: str) -> None:
    """
    Validate that the given snapshot schema version is supported.

    Raises:
        UnsupportedSchemaVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)


def assert_supported_public_input_version(version: str) -> None:
    """
    Validate that the given public-input schema version is supported.

    Raises:
        UnsupportedSchemaVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_PUBLIC_INPUT_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version, SUPPORTED_PUBLIC_INPUT_SCHEMA_VERSIONS)

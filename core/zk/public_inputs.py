"""
Module 05 - Proof Verification Gate
File: public_inputs.py

Public-input vector shared with the withdrawal circuit.

Layout (schema v1), one field element each, in this order:
    root, nullifier_hash, recipient, fee, refund, relayer[, destination_chain_hash]

Recipient and relayer are account identifiers mapped into the field with
identifier_to_field(). The destination slot exists only when the circuit was
compiled with it; the verifying key's IC length decides.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from core.crypto.field import (
    FIELD_ELEMENT_BYTES,
    field_from_bytes,
    identifier_to_field,
    is_field_element,
)
from core.schemas.errors import MalformedPublicInputsException
from core.schemas.versioning import (
    PUBLIC_INPUT_SCHEMA_VERSION,
    UnsupportedSchemaVersionError,
    assert_supported_public_input_version,
)


PUBLIC_INPUT_FIELDS: tuple[str, ...] = (
    "root",
    "nullifier_hash",
    "recipient",
    "fee",
    "refund",
    "relayer",
    "destination_chain_hash",
)

# Without / with the destination slot
BASE_INPUT_COUNT = len(PUBLIC_INPUT_FIELDS) - 1
CROSS_CHAIN_INPUT_COUNT = len(PUBLIC_INPUT_FIELDS)


@dataclass(frozen=True)
class PublicInputs:
    """Field-encoded public inputs of one withdrawal."""
    root: int
    nullifier_hash: int
    recipient: int
    fee: int
    refund: int
    relayer: int
    destination_chain_hash: Optional[int] = None
    schema_version: str = PUBLIC_INPUT_SCHEMA_VERSION

    def __post_init__(self) -> None:
        try:
            assert_supported_public_input_version(self.schema_version)
        except UnsupportedSchemaVersionError as e:
            raise MalformedPublicInputsException(str(e), field_path="schema_version") from e
        for name in PUBLIC_INPUT_FIELDS:
            value = getattr(self, name)
            if value is None and name == "destination_chain_hash":
                continue
            if not is_field_element(value):
                raise MalformedPublicInputsException(
                    f"{name} is not a canonical field element",
                    field_path=name,
                )

    @classmethod
    def for_withdrawal(
        cls,
        root: int,
        nullifier_hash: int,
        recipient: str,
        fee: int,
        relayer: str,
        refund: int = 0,
        destination_chain_hash: Optional[int] = None,
    ) -> "PublicInputs":
        """Encode withdrawal arguments, hashing identifiers into the field."""
        return cls(
            root=root,
            nullifier_hash=nullifier_hash,
            recipient=identifier_to_field(recipient),
            fee=fee,
            refund=refund,
            relayer=identifier_to_field(relayer),
            destination_chain_hash=destination_chain_hash,
        )

    @property
    def has_destination(self) -> bool:
        return self.destination_chain_hash is not None

    def to_vector(self) -> tuple[int, ...]:
        values = [getattr(self, name) for name in PUBLIC_INPUT_FIELDS[:BASE_INPUT_COUNT]]
        if self.destination_chain_hash is not None:
            values.append(self.destination_chain_hash)
        return tuple(values)

    def to_dict(self) -> dict:
        return {
            name: hex(value)
            for name in PUBLIC_INPUT_FIELDS
            if (value := getattr(self, name)) is not None
        }


def decode_public_inputs(words: Sequence[bytes]) -> tuple[int, ...]:
    """
    Decode 32-byte big-endian words into field elements.

    Raises:
        MalformedPublicInputsException: On a wrong width or an unreduced value
    """
    values: list[int] = []
    for i, word in enumerate(words):
        if len(word) != FIELD_ELEMENT_BYTES:
            raise MalformedPublicInputsException(
                f"Public input must be {FIELD_ELEMENT_BYTES} bytes, got {len(word)}",
                field_path=f"public_inputs[{i}]",
            )
        try:
            values.append(field_from_bytes(word))
        except ValueError as e:
            raise MalformedPublicInputsException(str(e), field_path=f"public_inputs[{i}]") from e
    return tuple(values)


__all__ = [
    "PUBLIC_INPUT_FIELDS",
    "BASE_INPUT_COUNT",
    "CROSS_CHAIN_INPUT_COUNT",
    "PublicInputs",
    "decode_public_inputs",
]

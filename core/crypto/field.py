"""
Module 02 - Field Elements
BN254 scalar field helpers shared by the tree, the notes and the verifier.

Owner: Protocol/Crypto Engineer
Module ID: M02

Field elements are plain Python ints in [0, FIELD_MODULUS). On the wire they
are exactly FIELD_ELEMENT_BYTES bytes, big-endian, usually 0x-hex encoded.
"""
from __future__ import annotations

from py_ecc.optimized_bn128 import curve_order

from core.crypto.hashing import from_hex, sha256, to_hex


# Order of the BN254 G1/G2 subgroups: the field public inputs live in
FIELD_MODULUS: int = curve_order

FIELD_ELEMENT_BYTES: int = 32

IDENTIFIER_DOMAIN: bytes = b"shielded-pool/identifier"


def is_field_element(value: int) -> bool:
    """True iff value is a canonical (fully reduced, non-negative) element."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < FIELD_MODULUS


def require_field_element(value: int, name: str = "value") -> int:
    """
    Return value unchanged if canonical.

    Raises:
        ValueError: If value is not an int in [0, FIELD_MODULUS)
    """
    if not is_field_element(value):
        raise ValueError(f"{name} is not a canonical field element")
    return value


def field_to_bytes(value: int) -> bytes:
    """Encode a field element as 32 big-endian bytes."""
    require_field_element(value)
    return value.to_bytes(FIELD_ELEMENT_BYTES, "big")


def field_from_bytes(data: bytes) -> int:
    """
    Decode exactly 32 big-endian bytes into a canonical field element.

    Raises:
        ValueError: On a wrong width or a value >= FIELD_MODULUS
    """
    if len(data) != FIELD_ELEMENT_BYTES:
        raise ValueError(
            f"Field element must be {FIELD_ELEMENT_BYTES} bytes, got {len(data)}"
        )
    value = int.from_bytes(data, "big")
    if value >= FIELD_MODULUS:
        raise ValueError("Field element is not reduced modulo the field order")
    return value


def field_to_hex(value: int) -> str:
    """Encode a field element as 0x-prefixed, zero-padded 64-char hex."""
    return to_hex(field_to_bytes(value))


def field_from_hex(hex_string: str) -> int:
    """Decode 0x-prefixed 64-char hex into a canonical field element."""
    return field_from_bytes(from_hex(hex_string))


def reduce_to_field(data: bytes) -> int:
    """Interpret bytes as a big-endian integer reduced modulo the field order."""
    return int.from_bytes(data, "big") % FIELD_MODULUS


def identifier_to_field(identifier: str) -> int:
    """
    Map an account identifier (recipient, relayer) to a field element.

    Identifiers are hashed rather than reduced so that two distinct
    identifiers cannot share an encoding by differing by the modulus.
    """
    return reduce_to_field(sha256(IDENTIFIER_DOMAIN + identifier.encode("utf-8")))


__all__ = [
    "FIELD_MODULUS",
    "FIELD_ELEMENT_BYTES",
    "is_field_element",
    "require_field_element",
    "field_to_bytes",
    "field_from_bytes",
    "field_to_hex",
    "field_from_hex",
    "reduce_to_field",
    "identifier_to_field",
]

"""
Core cryptographic utilities.

Module 02 provides byte hashing, BN254 field helpers, the MiMC sponge
used inside the Merkle tree, and client-side deposit notes.
"""
from .hashing import (
    sha256,
    hash_canonical,
    to_hex,
    from_hex,
)
from .field import (
    FIELD_MODULUS,
    FIELD_ELEMENT_BYTES,
    is_field_element,
    require_field_element,
    field_to_bytes,
    field_from_bytes,
    field_to_hex,
    field_from_hex,
    reduce_to_field,
    identifier_to_field,
)
from .mimc import (
    mimc_sponge,
    hash_pair,
)
from .notes import Note

__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "from_hex",
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
    "mimc_sponge",
    "hash_pair",
    "Note",
]

"""
Module 02 - MiMC Sponge
Circuit-friendly 2-to-1 hash used for Merkle nodes and note derivation.

Owner: Protocol/Crypto Engineer
Module ID: M02

Construction (same shape as circomlib's MiMCSponge):
- Feistel permutation over the BN254 scalar field, x^5 S-box, 220 rounds
- Round constants: c_i = sha256(b"mimcsponge" || u32be(i)) mod r,
  with c_0 = c_219 = 0
- Sponge: rate 1, capacity 1, key 0; each input is added to the left
  half before a full permutation; output is the final left half

The constant derivation is ours; outputs will not match circomlib's
keccak-derived constants. Circuits proving against this pool must use
the constants produced here.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from core.crypto.field import FIELD_MODULUS, require_field_element
from core.crypto.hashing import sha256


MIMC_ROUNDS: int = 220
MIMC_EXPONENT: int = 5
MIMC_SEED: bytes = b"mimcsponge"


@lru_cache(maxsize=1)
def round_constants() -> tuple[int, ...]:
    """Return the MIMC_ROUNDS round constants (first and last are zero)."""
    constants = [0]
    for i in range(1, MIMC_ROUNDS - 1):
        digest = sha256(MIMC_SEED + i.to_bytes(4, "big"))
        constants.append(int.from_bytes(digest, "big") % FIELD_MODULUS)
    constants.append(0)
    return tuple(constants)


def mimc_feistel(x_left: int, x_right: int, key: int = 0) -> tuple[int, int]:
    """
    Apply the MiMC Feistel permutation to (x_left, x_right).

    The last round does not swap the halves.
    """
    p = FIELD_MODULUS
    constants = round_constants()
    last = MIMC_ROUNDS - 1
    for i, c in enumerate(constants):
        t = pow((x_left + key + c) % p, MIMC_EXPONENT, p)
        if i < last:
            x_left, x_right = (x_right + t) % p, x_left
        else:
            x_right = (x_right + t) % p
    return x_left, x_right


def mimc_sponge(inputs: Iterable[int], key: int = 0) -> int:
    """
    Absorb field elements into the sponge and squeeze one output.

    Raises:
        ValueError: If any input is not a canonical field element
    """
    x_left, x_right = 0, 0
    for position, value in enumerate(inputs):
        require_field_element(value, f"inputs[{position}]")
        x_left = (x_left + value) % FIELD_MODULUS
        x_left, x_right = mimc_feistel(x_left, x_right, key)
    return x_left


def hash_pair(left: int, right: int) -> int:
    """Merkle parent: H(left, right). Order matters."""
    return mimc_sponge((left, right))


__all__ = [
    "MIMC_ROUNDS",
    "round_constants",
    "mimc_feistel",
    "mimc_sponge",
    "hash_pair",
]

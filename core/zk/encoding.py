"""
Module 05 - Proof Verification Gate
File: encoding.py

Wire formats for proofs and verifying keys.

Binary proof (256 bytes, EIP-197 ordering, big-endian 32-byte words):
    A.x | A.y | B.x.c1 | B.x.c0 | B.y.c1 | B.y.c0 | C.x | C.y
G2 coordinates put the imaginary part first. An all-zero point encodes the
point at infinity.

snarkjs JSON (verification_key.json / proof.json): decimal-string projective
coordinates, G2 coordinates as [c0, c1] (real part first).
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    Z1,
    Z2,
    field_modulus,
    is_inf,
    normalize,
)

from core.schemas.errors import ProofVerificationFailedException
from core.zk.groth16 import G1Point, G2Point, Proof, VerifyingKey, is_valid_g1, is_valid_g2


WORD_BYTES = 32
G1_BYTES = 2 * WORD_BYTES
G2_BYTES = 4 * WORD_BYTES
PROOF_BYTES = 2 * G1_BYTES + G2_BYTES


# -----------------------------------------------------------------------------
# Points <-> bytes
# -----------------------------------------------------------------------------

def _word(value: int) -> bytes:
    return value.to_bytes(WORD_BYTES, "big")


def _read_word(data: bytes, offset: int) -> int:
    value = int.from_bytes(data[offset:offset + WORD_BYTES], "big")
    if value >= field_modulus:
        raise ValueError("Coordinate is not reduced modulo the base field")
    return value


def g1_to_bytes(point: G1Point) -> bytes:
    if is_inf(point):
        return bytes(G1_BYTES)
    x, y = normalize(point)
    return _word(x.n) + _word(y.n)


def g1_from_bytes(data: bytes) -> G1Point:
    """
    Decode a 64-byte G1 point.

    Raises:
        ValueError: On a wrong width, unreduced coordinate, or off-curve point
    """
    if len(data) != G1_BYTES:
        raise ValueError(f"G1 point must be {G1_BYTES} bytes, got {len(data)}")
    x = _read_word(data, 0)
    y = _read_word(data, WORD_BYTES)
    if x == 0 and y == 0:
        return Z1
    point = (FQ(x), FQ(y), FQ.one())
    if not is_valid_g1(point):
        raise ValueError("G1 point is not on the curve")
    return point


def g2_to_bytes(point: G2Point) -> bytes:
    if is_inf(point):
        return bytes(G2_BYTES)
    x, y = normalize(point)
    x_c0, x_c1 = (int(c) for c in x.coeffs)
    y_c0, y_c1 = (int(c) for c in y.coeffs)
    return _word(x_c1) + _word(x_c0) + _word(y_c1) + _word(y_c0)


def g2_from_bytes(data: bytes) -> G2Point:
    """
    Decode a 128-byte G2 point (imaginary part first).

    Raises:
        ValueError: On a wrong width, unreduced coordinate, or a point
            outside the prime-order subgroup
    """
    if len(data) != G2_BYTES:
        raise ValueError(f"G2 point must be {G2_BYTES} bytes, got {len(data)}")
    x_c1, x_c0, y_c1, y_c0 = (_read_word(data, i * WORD_BYTES) for i in range(4))
    if not any((x_c0, x_c1, y_c0, y_c1)):
        return Z2
    point = (FQ2([x_c0, x_c1]), FQ2([y_c0, y_c1]), FQ2.one())
    if not is_valid_g2(point):
        raise ValueError("G2 point is not in the prime-order subgroup")
    return point


# -----------------------------------------------------------------------------
# Proofs
# -----------------------------------------------------------------------------

def encode_proof(proof: Proof) -> bytes:
    return g1_to_bytes(proof.a) + g2_to_bytes(proof.b) + g1_to_bytes(proof.c)


def decode_proof(data: bytes) -> Proof:
    """
    Decode a 256-byte proof.

    A proof that does not decode to valid points cannot verify, so decoding
    failures surface as a failed verification rather than malformed inputs.

    Raises:
        ProofVerificationFailedException: On any decoding failure
    """
    if len(data) != PROOF_BYTES:
        raise ProofVerificationFailedException(
            f"Proof must be {PROOF_BYTES} bytes, got {len(data)}",
            details={"length": len(data)},
        )
    try:
        a = g1_from_bytes(data[:G1_BYTES])
        b = g2_from_bytes(data[G1_BYTES:G1_BYTES + G2_BYTES])
        c = g1_from_bytes(data[G1_BYTES + G2_BYTES:])
    except ValueError as e:
        raise ProofVerificationFailedException(
            f"Proof does not decode to valid curve points: {e}"
        ) from e
    return Proof(a=a, b=b, c=c)


# -----------------------------------------------------------------------------
# snarkjs JSON
# -----------------------------------------------------------------------------

def _json_coordinate(value: Any) -> int:
    coordinate = int(value)
    if not 0 <= coordinate < field_modulus:
        raise ValueError("Coordinate is not reduced modulo the base field")
    return coordinate


def g1_from_json(coords: Sequence[Any]) -> G1Point:
    x, y, z = (_json_coordinate(c) for c in coords)
    if z == 0:
        return Z1
    point = (FQ(x), FQ(y), FQ(z))
    if not is_valid_g1(point):
        raise ValueError("G1 point is not on the curve")
    return point


def g1_to_json(point: G1Point) -> list[str]:
    if is_inf(point):
        return ["0", "1", "0"]
    x, y = normalize(point)
    return [str(x.n), str(y.n), "1"]


def g2_from_json(coords: Sequence[Sequence[Any]]) -> G2Point:
    (x_c0, x_c1), (y_c0, y_c1), (z_c0, z_c1) = (
        (_json_coordinate(pair[0]), _json_coordinate(pair[1])) for pair in coords
    )
    if z_c0 == 0 and z_c1 == 0:
        return Z2
    point = (FQ2([x_c0, x_c1]), FQ2([y_c0, y_c1]), FQ2([z_c0, z_c1]))
    if not is_valid_g2(point):
        raise ValueError("G2 point is not in the prime-order subgroup")
    return point


def g2_to_json(point: G2Point) -> list[list[str]]:
    if is_inf(point):
        return [["0", "0"], ["1", "0"], ["0", "0"]]
    x, y = normalize(point)
    return [
        [str(int(c)) for c in x.coeffs],
        [str(int(c)) for c in y.coeffs],
        ["1", "0"],
    ]


def verifying_key_from_dict(data: dict[str, Any]) -> VerifyingKey:
    """
    Build a VerifyingKey from snarkjs `verification_key.json` content.

    Raises:
        ValueError: If a required field is missing, the declared protocol is
            not groth16, or any point is invalid
    """
    protocol = data.get("protocol", "groth16")
    if protocol != "groth16":
        raise ValueError(f"Unsupported proof system: {protocol}")
    try:
        vk = VerifyingKey(
            alpha_g1=g1_from_json(data["vk_alpha_1"]),
            beta_g2=g2_from_json(data["vk_beta_2"]),
            gamma_g2=g2_from_json(data["vk_gamma_2"]),
            delta_g2=g2_from_json(data["vk_delta_2"]),
            ic=tuple(g1_from_json(p) for p in data["IC"]),
        )
    except KeyError as e:
        raise ValueError(f"Verifying key is missing field {e}") from e

    declared = data.get("nPublic")
    if declared is not None and int(declared) != vk.num_public_inputs:
        raise ValueError(
            f"nPublic={declared} disagrees with {len(vk.ic)} IC points"
        )
    return vk


def verifying_key_to_dict(vk: VerifyingKey) -> dict[str, Any]:
    return {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": vk.num_public_inputs,
        "vk_alpha_1": g1_to_json(vk.alpha_g1),
        "vk_beta_2": g2_to_json(vk.beta_g2),
        "vk_gamma_2": g2_to_json(vk.gamma_g2),
        "vk_delta_2": g2_to_json(vk.delta_g2),
        "IC": [g1_to_json(p) for p in vk.ic],
    }


def load_verifying_key(path: str | Path) -> VerifyingKey:
    """Load a snarkjs verification_key.json file."""
    with open(path, "r", encoding="utf-8") as f:
        return verifying_key_from_dict(json.load(f))


def proof_from_dict(data: dict[str, Any]) -> Proof:
    """
    Build a Proof from snarkjs `proof.json` content.

    Raises:
        ProofVerificationFailedException: If a field is missing or a point
            is invalid
    """
    try:
        return Proof(
            a=g1_from_json(data["pi_a"]),
            b=g2_from_json(data["pi_b"]),
            c=g1_from_json(data["pi_c"]),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ProofVerificationFailedException(
            f"Proof JSON does not decode to valid curve points: {e}"
        ) from e


def proof_to_dict(proof: Proof) -> dict[str, Any]:
    return {
        "protocol": "groth16",
        "curve": "bn128",
        "pi_a": g1_to_json(proof.a),
        "pi_b": g2_to_json(proof.b),
        "pi_c": g1_to_json(proof.c),
    }


__all__ = [
    "PROOF_BYTES",
    "G1_BYTES",
    "G2_BYTES",
    "g1_to_bytes",
    "g1_from_bytes",
    "g2_to_bytes",
    "g2_from_bytes",
    "encode_proof",
    "decode_proof",
    "g1_from_json",
    "g1_to_json",
    "g2_from_json",
    "g2_to_json",
    "verifying_key_from_dict",
    "verifying_key_to_dict",
    "load_verifying_key",
    "proof_from_dict",
    "proof_to_dict",
]

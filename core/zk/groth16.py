"""
Module 05 - Proof Verification Gate
Groth16 verification over BN254.

Owner: Protocol/Crypto Engineer
Module ID: M05

Verification equation:

    e(A, B) == e(alpha, beta) * e(vk_x, gamma) * e(C, delta)
    vk_x    =  ic[0] + sum(x_i * ic[i + 1])

Points are py_ecc optimized_bn128 projective tuples. The gate is pure: it
reads and writes no pool state, so the same inputs always give the same
answer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    add,
    b,
    b2,
    curve_order,
    is_inf,
    is_on_curve,
    multiply,
    pairing,
)

from core.crypto.field import is_field_element
from core.schemas.errors import MalformedPublicInputsException


logger = logging.getLogger(__name__)

G1Point = tuple[FQ, FQ, FQ]
G2Point = tuple[FQ2, FQ2, FQ2]


def is_valid_g1(point: G1Point) -> bool:
    """On-curve check. G1 has cofactor 1, so this is also a subgroup check."""
    return is_on_curve(point, b)


def is_valid_g2(point: G2Point) -> bool:
    """On-curve and prime-order subgroup check for a G2 point."""
    if not is_on_curve(point, b2):
        return False
    return is_inf(multiply(point, curve_order))


@dataclass(frozen=True)
class VerifyingKey:
    """
    Groth16 verifying key. Immutable for the lifetime of a pool.

    Attributes:
        alpha_g1: [alpha]_1
        beta_g2: [beta]_2
        gamma_g2: [gamma]_2
        delta_g2: [delta]_2
        ic: Input commitments; len(ic) == number of public inputs + 1
    """
    alpha_g1: G1Point
    beta_g2: G2Point
    gamma_g2: G2Point
    delta_g2: G2Point
    ic: tuple[G1Point, ...]

    def __post_init__(self) -> None:
        if len(self.ic) < 1:
            raise ValueError("Verifying key needs at least one IC point")
        if not is_valid_g1(self.alpha_g1):
            raise ValueError("alpha_g1 is not a valid G1 point")
        for name in ("beta_g2", "gamma_g2", "delta_g2"):
            if not is_valid_g2(getattr(self, name)):
                raise ValueError(f"{name} is not a valid G2 point")
        for i, point in enumerate(self.ic):
            if not is_valid_g1(point):
                raise ValueError(f"ic[{i}] is not a valid G1 point")

    @property
    def num_public_inputs(self) -> int:
        return len(self.ic) - 1

    def prepare(self) -> "PreparedVerifyingKey":
        return PreparedVerifyingKey(self)


@dataclass(frozen=True)
class Proof:
    """Groth16 proof (A in G1, B in G2, C in G1). Never persisted."""
    a: G1Point
    b: G2Point
    c: G1Point

    def is_well_formed(self) -> bool:
        return is_valid_g1(self.a) and is_valid_g2(self.b) and is_valid_g1(self.c)


class PreparedVerifyingKey:
    """Verifying key with e(alpha, beta) precomputed."""

    def __init__(self, vk: VerifyingKey) -> None:
        self.vk = vk
        self.alpha_beta: FQ12 = pairing(vk.beta_g2, vk.alpha_g1)

    @property
    def num_public_inputs(self) -> int:
        return self.vk.num_public_inputs


def check_public_inputs(public_inputs: Sequence[int], expected: int) -> None:
    """
    Validate the vector shape before any curve arithmetic.

    Raises:
        MalformedPublicInputsException: On a count mismatch or a
            non-canonical element
    """
    if len(public_inputs) != expected:
        raise MalformedPublicInputsException(
            f"Expected {expected} public inputs, got {len(public_inputs)}",
            details={"expected": expected, "received": len(public_inputs)},
        )
    for i, value in enumerate(public_inputs):
        if not is_field_element(value):
            raise MalformedPublicInputsException(
                "Public input is not a canonical field element",
                field_path=f"public_inputs[{i}]",
            )


def compute_vk_x(vk: VerifyingKey, public_inputs: Sequence[int]) -> G1Point:
    """Linear combination ic[0] + sum(x_i * ic[i + 1])."""
    acc = vk.ic[0]
    for value, point in zip(public_inputs, vk.ic[1:]):
        if value:
            acc = add(acc, multiply(point, value))
    return acc


def verify_proof(
    proof: Proof,
    public_inputs: Sequence[int],
    verifying_key: Union[VerifyingKey, PreparedVerifyingKey],
) -> bool:
    """
    Check a Groth16 proof against a public-input vector.

    Args:
        proof: Decoded proof
        public_inputs: Field elements in circuit order
        verifying_key: Raw or prepared verifying key

    Returns:
        True iff the pairing equation holds

    Raises:
        MalformedPublicInputsException: If the vector does not fit the key
    """
    vk = verifying_key.vk if isinstance(verifying_key, PreparedVerifyingKey) else verifying_key

    check_public_inputs(public_inputs, vk.num_public_inputs)

    if not proof.is_well_formed():
        logger.debug("Proof points failed curve or subgroup checks")
        return False

    pvk = verifying_key if isinstance(verifying_key, PreparedVerifyingKey) else vk.prepare()

    vk_x = compute_vk_x(vk, public_inputs)

    lhs = pairing(proof.b, proof.a)
    rhs = pvk.alpha_beta * pairing(vk.gamma_g2, vk_x) * pairing(vk.delta_g2, proof.c)
    return lhs == rhs


class ProofVerifier:
    """
    Verification gate bound to one verifying key.

    Example:
        >>> verifier = ProofVerifier(vk)
        >>> verifier.verify(proof, inputs.to_vector())
        True
    """

    def __init__(self, verifying_key: VerifyingKey) -> None:
        self._prepared = verifying_key.prepare()

    @property
    def verifying_key(self) -> VerifyingKey:
        return self._prepared.vk

    @property
    def num_public_inputs(self) -> int:
        return self._prepared.num_public_inputs

    def verify(self, proof: Proof, public_inputs: Sequence[int]) -> bool:
        return verify_proof(proof, public_inputs, self._prepared)


__all__ = [
    "G1Point",
    "G2Point",
    "is_valid_g1",
    "is_valid_g2",
    "VerifyingKey",
    "Proof",
    "PreparedVerifyingKey",
    "check_public_inputs",
    "compute_vk_x",
    "verify_proof",
    "ProofVerifier",
]

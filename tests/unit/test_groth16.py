"""
Module 05 - Groth16 Verification Unit Tests
Tests for core/zk/groth16.py

Pairings in pure Python take seconds each, so every test here that reaches
the pairing check shares the session verifier and uses one proof.
"""
import pytest
from py_ecc.optimized_bn128 import FQ, G1, multiply

from core.crypto.field import FIELD_MODULUS
from core.schemas.errors import MalformedPublicInputsException
from core.zk.groth16 import (
    Proof,
    VerifyingKey,
    check_public_inputs,
    compute_vk_x,
    is_valid_g1,
    verify_proof,
)

from fixtures.zk_fixtures import make_proof


INPUTS = (11, 22, 33, 0, 0, 44)


@pytest.fixture(scope="module")
def valid_proof(trapdoor):
    return make_proof(trapdoor, INPUTS)


class TestVerifyingKey:

    def test_num_public_inputs(self, verifying_key):
        assert verifying_key.num_public_inputs == 6
        assert len(verifying_key.ic) == 7

    def test_rejects_off_curve_alpha(self, verifying_key):
        with pytest.raises(ValueError, match="alpha_g1"):
            VerifyingKey(
                alpha_g1=(FQ(1), FQ(1), FQ(1)),
                beta_g2=verifying_key.beta_g2,
                gamma_g2=verifying_key.gamma_g2,
                delta_g2=verifying_key.delta_g2,
                ic=verifying_key.ic,
            )

    def test_rejects_empty_ic(self, verifying_key):
        with pytest.raises(ValueError, match="IC"):
            VerifyingKey(
                alpha_g1=verifying_key.alpha_g1,
                beta_g2=verifying_key.beta_g2,
                gamma_g2=verifying_key.gamma_g2,
                delta_g2=verifying_key.delta_g2,
                ic=(),
            )


class TestPublicInputChecks:

    def test_count_mismatch(self):
        with pytest.raises(MalformedPublicInputsException) as exc_info:
            check_public_inputs((1, 2, 3), 6)
        assert exc_info.value.details["expected"] == 6
        assert exc_info.value.details["received"] == 3

    def test_non_field_element(self):
        with pytest.raises(MalformedPublicInputsException) as exc_info:
            check_public_inputs((1, FIELD_MODULUS), 2)
        assert exc_info.value.details["field_path"] == "public_inputs[1]"

    def test_verifier_rejects_short_vector_before_pairing(self, verifier, valid_proof):
        with pytest.raises(MalformedPublicInputsException):
            verifier.verify(valid_proof, INPUTS[:5])

    def test_vk_x_is_linear_combination(self, verifying_key, trapdoor):
        expected = trapdoor.ic[0]
        for x, k in zip(INPUTS, trapdoor.ic[1:]):
            expected = (expected + x * k) % FIELD_MODULUS
        vk_x = compute_vk_x(verifying_key, INPUTS)
        assert is_valid_g1(vk_x)
        assert _same_point(vk_x, multiply(G1, expected))


class TestVerification:

    def test_valid_proof_accepted(self, verifier, valid_proof):
        assert verifier.verify(valid_proof, INPUTS)

    def test_altered_input_rejected(self, verifier, valid_proof):
        altered = (INPUTS[0] + 1,) + INPUTS[1:]
        assert not verifier.verify(valid_proof, altered)

    def test_off_curve_point_rejected_without_pairing(self, verifier, valid_proof):
        forged = Proof(a=(FQ(1), FQ(1), FQ(1)), b=valid_proof.b, c=valid_proof.c)
        assert not forged.is_well_formed()
        assert not verifier.verify(forged, INPUTS)

    def test_malformed_vector_raises_through_function(self, verifying_key, valid_proof):
        with pytest.raises(MalformedPublicInputsException):
            verify_proof(valid_proof, INPUTS + (1,), verifying_key)


def _same_point(p, q) -> bool:
    # Projective equality: x1*z2 == x2*z1 and y1*z2 == y2*z1
    return p[0] * q[2] == q[0] * p[2] and p[1] * q[2] == q[1] * p[2]

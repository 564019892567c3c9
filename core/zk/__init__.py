"""
Module 05 - Proof Verification Gate
Groth16 over BN254, proof/key codecs, and the public-input vector.

Usage:
    from core.zk import ProofVerifier, PublicInputs, decode_proof, load_verifying_key

    verifier = ProofVerifier(load_verifying_key("verification_key.json"))
    inputs = PublicInputs.for_withdrawal(root, nullifier_hash, "alice", 0, "relayer")
    ok = verifier.verify(decode_proof(proof_bytes), inputs.to_vector())
"""
from .groth16 import (
    G1Point,
    G2Point,
    is_valid_g1,
    is_valid_g2,
    VerifyingKey,
    Proof,
    PreparedVerifyingKey,
    check_public_inputs,
    compute_vk_x,
    verify_proof,
    ProofVerifier,
)
from .encoding import (
    PROOF_BYTES,
    encode_proof,
    decode_proof,
    verifying_key_from_dict,
    verifying_key_to_dict,
    load_verifying_key,
    proof_from_dict,
    proof_to_dict,
)
from .public_inputs import (
    PUBLIC_INPUT_FIELDS,
    BASE_INPUT_COUNT,
    CROSS_CHAIN_INPUT_COUNT,
    PublicInputs,
    decode_public_inputs,
)


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
    "PROOF_BYTES",
    "encode_proof",
    "decode_proof",
    "verifying_key_from_dict",
    "verifying_key_to_dict",
    "load_verifying_key",
    "proof_from_dict",
    "proof_to_dict",
    "PUBLIC_INPUT_FIELDS",
    "BASE_INPUT_COUNT",
    "CROSS_CHAIN_INPUT_COUNT",
    "PublicInputs",
    "decode_public_inputs",
]

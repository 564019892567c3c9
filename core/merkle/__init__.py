"""
Module 03 - Merkle Tree and Root History
Fixed-depth commitment tree used as the pool's anonymity set.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- IncrementalMerkleTree: O(depth) append-only tree with a published TreeView
- RootHistory: Ring buffer of the last K roots
- compute_root: Full recomputation used to cross-check the engine
- MerkleProof / verify_merkle_proof: Inclusion proofs for clients

Usage:
    from core.merkle import IncrementalMerkleTree, compute_root

    tree = IncrementalMerkleTree(depth=20)
    tree.insert_leaf(0, commitment)
    assert tree.current_root() == compute_root([commitment], depth=20)

    proof = tree.merkle_path(0)
    assert verify_merkle_proof(proof)
"""
from .merkle_tree import (
    TREE_DEPTH,
    ZERO_LEAF,
    MerkleProof,
    zero_values,
    empty_root,
    tree_capacity,
    compute_root,
    build_merkle_proof,
    root_from_path,
    verify_merkle_proof,
)
from .root_history import ROOT_HISTORY_SIZE, RootHistory
from .incremental import TreeView, IncrementalMerkleTree


__all__ = [
    # Constants
    "TREE_DEPTH",
    "ZERO_LEAF",
    "ROOT_HISTORY_SIZE",
    # Core types
    "MerkleProof",
    "TreeView",
    "RootHistory",
    "IncrementalMerkleTree",
    # Core functions
    "zero_values",
    "empty_root",
    "tree_capacity",
    "compute_root",
    "build_merkle_proof",
    "root_from_path",
    "verify_merkle_proof",
]

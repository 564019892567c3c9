"""
Module 03 - Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py, root_history.py and incremental.py

Tests:
- zero values and empty root
- incremental roots match full recomputation for every prefix
- sequential index enforcement and capacity
- root history window and eviction
- inclusion paths verify and reject tampering
"""
import pytest

from core.crypto.mimc import hash_pair
from core.merkle import (
    IncrementalMerkleTree,
    MerkleProof,
    RootHistory,
    ZERO_LEAF,
    build_merkle_proof,
    compute_root,
    empty_root,
    verify_merkle_proof,
    zero_values,
)
from core.schemas.errors import LeafIndexOutOfRangeException, PoolInvariantViolation

from fixtures.common import make_commitment


DEPTH = 4


class TestZeroValues:

    def test_first_zero_is_zero_leaf(self):
        assert zero_values(DEPTH)[0] == ZERO_LEAF

    def test_each_level_hashes_previous(self):
        zeros = zero_values(DEPTH)
        for level in range(DEPTH):
            assert zeros[level + 1] == hash_pair(zeros[level], zeros[level])

    def test_empty_root_matches_compute_root(self):
        assert compute_root([], DEPTH) == empty_root(DEPTH)

    def test_rejects_zero_depth(self):
        with pytest.raises(ValueError):
            zero_values(0)


class TestComputeRoot:

    def test_single_leaf_depth_one(self):
        leaf = make_commitment(0)
        assert compute_root([leaf], 1) == hash_pair(leaf, ZERO_LEAF)

    def test_two_leaves_depth_one(self):
        a, b = make_commitment(0), make_commitment(1)
        assert compute_root([a, b], 1) == hash_pair(a, b)

    def test_order_matters(self):
        a, b = make_commitment(0), make_commitment(1)
        assert compute_root([a, b], DEPTH) != compute_root([b, a], DEPTH)

    def test_rejects_overflow(self):
        with pytest.raises(ValueError, match="exceed capacity"):
            compute_root([make_commitment(i) for i in range(3)], 1)


class TestRootHistory:

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            RootHistory(0)

    def test_evicts_oldest(self):
        history = RootHistory(3)
        for root in (1, 2, 3, 4):
            history.append(root)
        assert history.as_tuple() == (2, 3, 4)
        assert not history.contains(1)
        assert history.latest() == 4

    def test_restore_replaces_window(self):
        history = RootHistory(3)
        history.append(9)
        history.restore((1, 2))
        assert list(history) == [1, 2]
        assert len(history) == 2


class TestIncrementalTree:

    def test_genesis_root_is_known(self):
        tree = IncrementalMerkleTree(depth=DEPTH)
        assert tree.current_root() == empty_root(DEPTH)
        assert tree.is_known_root(empty_root(DEPTH))
        assert tree.leaf_count == 0

    def test_zero_root_never_known(self):
        tree = IncrementalMerkleTree(depth=DEPTH)
        assert not tree.is_known_root(0)

    def test_matches_full_recomputation_for_every_prefix(self):
        tree = IncrementalMerkleTree(depth=DEPTH)
        leaves = [make_commitment(i) for i in range(7)]
        for index, leaf in enumerate(leaves):
            root = tree.insert_leaf(index, leaf)
            assert root == compute_root(leaves[: index + 1], DEPTH)
            assert tree.current_root() == root

    def test_leaf_count_and_leaves(self):
        leaves = [make_commitment(i) for i in range(3)]
        tree = IncrementalMerkleTree.from_leaves(leaves, depth=DEPTH)
        assert tree.leaf_count == 3
        assert tree.leaves() == leaves

    def test_gap_is_invariant_violation(self):
        tree = IncrementalMerkleTree(depth=DEPTH)
        with pytest.raises(PoolInvariantViolation) as exc_info:
            tree.insert_leaf(1, make_commitment(0))
        assert exc_info.value.details["expected"] == 0

    def test_overwrite_is_invariant_violation(self):
        tree = IncrementalMerkleTree(depth=DEPTH)
        tree.insert_leaf(0, make_commitment(0))
        with pytest.raises(PoolInvariantViolation):
            tree.insert_leaf(0, make_commitment(1))

    def test_capacity(self):
        tree = IncrementalMerkleTree(depth=2)
        for i in range(4):
            tree.insert_leaf(i, make_commitment(i))
        assert tree.leaf_count == tree.capacity == 4
        with pytest.raises(PoolInvariantViolation):
            tree.insert_leaf(4, make_commitment(4))

    def test_root_history_window(self):
        tree = IncrementalMerkleTree(depth=DEPTH, history_size=3)
        genesis = tree.current_root()
        roots = [tree.insert_leaf(i, make_commitment(i)) for i in range(3)]
        assert tree.root_history() == tuple(roots)
        assert not tree.is_known_root(genesis)
        assert all(tree.is_known_root(r) for r in roots)

    def test_view_is_immutable_snapshot(self):
        tree = IncrementalMerkleTree(depth=DEPTH)
        before = tree.view
        tree.insert_leaf(0, make_commitment(0))
        assert before.leaf_count == 0
        assert tree.view.leaf_count == 1
        assert before.root != tree.view.root


class TestMerklePaths:

    def test_path_matches_full_recomputation(self):
        leaves = [make_commitment(i) for i in range(5)]
        tree = IncrementalMerkleTree.from_leaves(leaves, depth=DEPTH)
        for index in range(len(leaves)):
            assert tree.merkle_path(index) == build_merkle_proof(leaves, index, DEPTH)

    def test_paths_verify_against_current_root(self):
        tree = IncrementalMerkleTree.from_leaves(
            [make_commitment(i) for i in range(6)], depth=DEPTH
        )
        for index in range(6):
            proof = tree.merkle_path(index)
            assert proof.root == tree.current_root()
            assert proof.depth == DEPTH
            assert verify_merkle_proof(proof)

    def test_tampered_sibling_fails(self):
        tree = IncrementalMerkleTree.from_leaves(
            [make_commitment(i) for i in range(3)], depth=DEPTH
        )
        proof = tree.merkle_path(1)
        siblings = list(proof.siblings)
        siblings[2] = make_commitment(99)
        forged = MerkleProof(proof.leaf, proof.index, tuple(siblings), proof.root)
        assert not verify_merkle_proof(forged)

    def test_wrong_index_fails(self):
        tree = IncrementalMerkleTree.from_leaves(
            [make_commitment(i) for i in range(3)], depth=DEPTH
        )
        proof = tree.merkle_path(0)
        moved = MerkleProof(proof.leaf, 1, proof.siblings, proof.root)
        assert not verify_merkle_proof(moved)

    def test_path_bits(self):
        tree = IncrementalMerkleTree.from_leaves(
            [make_commitment(i) for i in range(6)], depth=DEPTH
        )
        assert tree.merkle_path(5).path_bits == (1, 0, 1, 0)

    @pytest.mark.parametrize("index", [-1, 2, 100])
    def test_out_of_range(self, index):
        tree = IncrementalMerkleTree.from_leaves(
            [make_commitment(i) for i in range(2)], depth=DEPTH
        )
        with pytest.raises(LeafIndexOutOfRangeException) as exc_info:
            tree.merkle_path(index)
        assert exc_info.value.details["leaf_count"] == 2

    def test_to_dict_is_hex(self):
        tree = IncrementalMerkleTree.from_leaves([make_commitment(0)], depth=DEPTH)
        data = tree.merkle_path(0).to_dict()
        assert data["index"] == 0
        assert data["root"].startswith("0x")
        assert len(data["siblings"]) == DEPTH

"""
Module 03 - Merkle Tree Primitives
Fixed-depth Merkle tree over the BN254 scalar field.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- Per-level zero values for empty subtrees
- Full-recomputation root for a leaf sequence
- Merkle path (inclusion proof) generation and verification

Canonical Commitment Rules (Hard Contracts):
1. Leaves are commitments (field elements); they are NOT re-hashed
2. Parent hashing: parent = hash_pair(left, right) (MiMC sponge)
3. Padding rule: empty positions hold zero[level], where
   zero[0] = ZERO_LEAF and zero[i+1] = hash_pair(zero[i], zero[i])
4. Empty tree: root = zero[depth]
5. Leaf order is insertion order; this module never sorts leaves

The incremental engine in core.merkle.incremental must produce the same
roots as compute_root() for every prefix of the commitment sequence.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

from core.crypto.field import field_to_hex, reduce_to_field
from core.crypto.hashing import sha256
from core.crypto.mimc import hash_pair


# Canonical tree depth (capacity 2^20 deposits)
TREE_DEPTH: int = 20

# Value of an unused leaf slot
ZERO_LEAF: int = reduce_to_field(sha256(b"shielded-pool"))


@lru_cache(maxsize=None)
def zero_values(depth: int) -> tuple[int, ...]:
    """
    Return zero[0..depth] for a tree of the given depth.

    zero[depth] is the root of the empty tree.
    """
    if depth < 1:
        raise ValueError(f"Tree depth must be at least 1, got {depth}")
    zeros = [ZERO_LEAF]
    for _ in range(depth):
        zeros.append(hash_pair(zeros[-1], zeros[-1]))
    return tuple(zeros)


def empty_root(depth: int) -> int:
    """Root of a tree with no leaves."""
    return zero_values(depth)[depth]


def tree_capacity(depth: int) -> int:
    return 1 << depth


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for one leaf of a fixed-depth tree.

    Attributes:
        leaf: The commitment at `index`
        index: 0-based leaf index; its bits give the path direction
        siblings: Sibling values from the leaf level up to just below the root
        root: The root this proof was generated against
    """
    leaf: int
    index: int
    siblings: tuple[int, ...]
    root: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        if self.index >= tree_capacity(len(self.siblings)):
            raise ValueError(
                f"Leaf index {self.index} does not fit a depth-{len(self.siblings)} path"
            )

    @property
    def depth(self) -> int:
        return len(self.siblings)

    @property
    def path_bits(self) -> tuple[int, ...]:
        """Direction per level, bottom-up: 0 = node is the left child."""
        return tuple((self.index >> level) & 1 for level in range(self.depth))

    def to_dict(self) -> dict:
        return {
            "leaf": field_to_hex(self.leaf),
            "index": self.index,
            "siblings": [field_to_hex(s) for s in self.siblings],
            "path_bits": list(self.path_bits),
            "root": field_to_hex(self.root),
        }


def compute_root(leaves: Sequence[int], depth: int = TREE_DEPTH) -> int:
    """
    Compute the root of a depth-`depth` tree holding `leaves` from scratch.

    Cost is O(len(leaves) + depth) hashes.

    Raises:
        ValueError: If more than 2^depth leaves are given
    """
    if len(leaves) > tree_capacity(depth):
        raise ValueError(f"{len(leaves)} leaves exceed capacity of depth {depth}")

    zeros = zero_values(depth)
    if not leaves:
        return zeros[depth]

    level: list[int] = list(leaves)
    for height in range(depth):
        if len(level) % 2 == 1:
            level.append(zeros[height])
        level = [hash_pair(level[i], level[i + 1]) for i in range(0, len(level), 2)]

    return level[0]


def build_merkle_proof(leaves: Sequence[int], index: int, depth: int = TREE_DEPTH) -> MerkleProof:
    """
    Generate an inclusion proof for leaves[index] by full recomputation.

    Raises:
        IndexError: If index is out of range
    """
    if index < 0 or index >= len(leaves):
        raise IndexError(f"Leaf index {index} out of range for {len(leaves)} leaves")

    zeros = zero_values(depth)
    siblings: list[int] = []
    level: list[int] = list(leaves)
    current_index = index

    for height in range(depth):
        if len(level) % 2 == 1:
            level.append(zeros[height])
        siblings.append(level[current_index ^ 1])
        level = [hash_pair(level[i], level[i + 1]) for i in range(0, len(level), 2)]
        current_index //= 2

    return MerkleProof(
        leaf=leaves[index],
        index=index,
        siblings=tuple(siblings),
        root=level[0],
    )


def root_from_path(leaf: int, index: int, siblings: Sequence[int]) -> int:
    """Fold a leaf up through its siblings and return the resulting root."""
    current = leaf
    current_index = index
    for sibling in siblings:
        if current_index % 2 == 0:
            current = hash_pair(current, sibling)
        else:
            current = hash_pair(sibling, current)
        current_index //= 2
    return current


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """True iff the proof's leaf and siblings hash up to its claimed root."""
    return root_from_path(proof.leaf, proof.index, proof.siblings) == proof.root


__all__ = [
    "TREE_DEPTH",
    "ZERO_LEAF",
    "zero_values",
    "empty_root",
    "tree_capacity",
    "MerkleProof",
    "compute_root",
    "build_merkle_proof",
    "root_from_path",
    "verify_merkle_proof",
]

"""
Merkle Proof Generation and Verification

A proof is the list of sibling hashes met while walking from a leaf to the
root. Sides are not stored: at each level the node's position parity tells
whether the sibling goes on the left or the right. A node carried up from an
odd-length layer has no sibling at that level and contributes no proof entry.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import EmptyTreeError, IndexOutOfRangeError, MalformedProofError
from .hashing import DEFAULT_HASHER, Hasher, is_digest
from .tree import MerkleTree

logger = logging.getLogger(__name__)


def _is_carried(pos: int, level_size: int) -> bool:
    return level_size % 2 == 1 and pos == level_size - 1


def _check_index(index: int, total_leaves: int) -> None:
    if total_leaves <= 0 or index < 0 or index >= total_leaves:
        raise IndexOutOfRangeError(index, total_leaves)


def generate_proof(tree: MerkleTree, index: int) -> List[bytes]:
    """
    Extract the sibling path for the leaf at `index`.

    Args:
        tree: A built Merkle tree
        index: 0-based leaf position

    Returns:
        Sibling hashes from the leaf level upwards

    Raises:
        EmptyTreeError: If the tree has no leaves
        IndexOutOfRangeError: If index is not in [0, leaf_count)

    Example:
        >>> tree = MerkleTree.from_leaves([l0, l1, l2, l3])
        >>> generate_proof(tree, 1)  # [l0, H(l2 ++ l3)]
    """
    if tree.leaf_count == 0:
        raise EmptyTreeError("Cannot generate a proof from an empty tree")
    _check_index(index, tree.leaf_count)

    proof = []
    pos = index
    for layer in tree.layers[:-1]:
        if not _is_carried(pos, len(layer)):
            proof.append(layer[pos ^ 1])
        pos //= 2

    logger.debug(f"Generated proof for leaf {index} with {len(proof)} siblings")
    return proof


def expected_proof_length(index: int, total_leaves: int) -> int:
    """
    Number of siblings a valid proof for `index` carries.

    This is the tree depth minus the number of levels at which the path node
    is carried up without a partner.

    Examples:
        >>> expected_proof_length(1, 4)  # Returns 2
        >>> expected_proof_length(2, 3)  # Returns 1
    """
    _check_index(index, total_leaves)

    length = 0
    pos, level_size = index, total_leaves
    while level_size > 1:
        if not _is_carried(pos, level_size):
            length += 1
        pos //= 2
        level_size = (level_size + 1) // 2
    return length


def _walk(
    leaf: bytes,
    index: int,
    total_leaves: int,
    proof: Sequence[bytes],
    hasher: Hasher,
) -> Tuple[bytes, int]:
    """Hash `leaf` up to the root along `proof`; returns the node and the siblings consumed."""
    current = leaf
    pos, level_size = index, total_leaves
    consumed = 0

    while level_size > 1:
        if not _is_carried(pos, level_size):
            if consumed == len(proof):
                raise MalformedProofError(
                    f"Proof has {consumed} siblings but leaf {index} of "
                    f"{total_leaves} needs {expected_proof_length(index, total_leaves)}"
                )
            sibling = proof[consumed]
            if not is_digest(sibling):
                raise MalformedProofError(f"Proof sibling {consumed} is not a 32-byte digest")
            consumed += 1
            if pos % 2 == 0:
                # Our node is on the left
                current = hasher.concat_and_hash(current, sibling)
            else:
                current = hasher.concat_and_hash(sibling, current)
        pos //= 2
        level_size = (level_size + 1) // 2

    return current, consumed


def compute_root_from_proof(
    leaf: bytes,
    index: int,
    total_leaves: int,
    proof: Sequence[bytes],
    hasher: Optional[Hasher] = None,
) -> bytes:
    """
    Rebuild the root implied by a leaf, its position and its sibling path.

    Args:
        leaf: 32-byte leaf digest
        index: 0-based position of the leaf
        total_leaves: Number of leaves in the committed tree
        proof: Sibling hashes as returned by generate_proof
        hasher: Hash primitive, SHA-256 when omitted

    Returns:
        The reconstructed 32-byte root

    Raises:
        IndexOutOfRangeError: If index is not in [0, total_leaves)
        MalformedProofError: If a sibling is not a 32-byte digest or the
            path does not have exactly the length the tree shape needs
    """
    _check_index(index, total_leaves)
    current, consumed = _walk(leaf, index, total_leaves, proof, hasher or DEFAULT_HASHER)
    if consumed != len(proof):
        raise MalformedProofError(
            f"Proof has {len(proof)} siblings but leaf {index} of "
            f"{total_leaves} needs {consumed}"
        )
    return current


def verify_proof(
    root: bytes,
    index: int,
    leaf: bytes,
    total_leaves: int,
    proof: Sequence[bytes],
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify a single-leaf inclusion proof against a published root.

    A proof that reaches the root but rebuilds a different one, or that
    still has siblings left once the root is reached, is a normal ``False``
    result. Only a path that runs out before the root raises.

    Args:
        root: Published 32-byte root
        index: Claimed leaf position
        leaf: Claimed 32-byte leaf
        total_leaves: Number of leaves in the committed tree
        proof: Sibling path
        hasher: Hash primitive, SHA-256 when omitted

    Returns:
        True if the path rebuilds `root` using every sibling

    Raises:
        IndexOutOfRangeError: If total_leaves is 0 or index is out of range
        MalformedProofError: If the path is exhausted before the root or a
            sibling is not a 32-byte digest

    Examples:
        >>> is_valid = verify_proof(tree.root(), 5, leaf, 8, tree.proof(5))
    """
    _check_index(index, total_leaves)
    computed, consumed = _walk(leaf, index, total_leaves, proof, hasher or DEFAULT_HASHER)
    if consumed != len(proof):
        logger.debug(
            f"Proof for leaf {index} of {total_leaves} has {len(proof) - consumed} "
            f"siblings left over after reaching the root"
        )
        return False
    return computed == root


@dataclass(frozen=True)
class InclusionClaim:
    """A claim that `leaf` sits at `index` of a `total_leaves`-leaf tree under `root`."""

    root: bytes
    leaf: bytes
    index: int
    total_leaves: int
    path: Tuple[bytes, ...] = ()

    def verify(self, hasher: Optional[Hasher] = None) -> bool:
        return verify_proof(self.root, self.index, self.leaf, self.total_leaves, self.path, hasher)

"""
Merkle Tree Construction

This module builds the layered hash structure committed to by a root.
Adjacent entries are paired left to right; when a layer has an odd number of
entries the last one is carried into the next layer unchanged. It is neither
duplicated nor padded with a zero hash, and the proof generator and verifier
follow the same rule.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .errors import EmptyTreeError
from .hashing import DEFAULT_HASHER, Hasher, is_digest

logger = logging.getLogger(__name__)


def build_layers(leaves: Sequence[bytes], hasher: Hasher) -> Tuple[Tuple[bytes, ...], ...]:
    """
    Hash a leaf layer up to a single-entry root layer.

    Args:
        leaves: Ordered 32-byte leaf digests
        hasher: Hash primitive used to combine siblings

    Returns:
        Tuple of layers, leaves first and the root layer last. An empty
        input yields a single empty layer.
    """
    layer = tuple(leaves)
    layers = [layer]
    while len(layer) > 1:
        parents: List[bytes] = []
        for i in range(0, len(layer) - 1, 2):
            parents.append(hasher.concat_and_hash(layer[i], layer[i + 1]))
        if len(layer) % 2 == 1:
            # Odd node is carried up unchanged
            parents.append(layer[-1])
        layer = tuple(parents)
        layers.append(layer)
    return tuple(layers)


def expected_layer_count(leaf_count: int) -> int:
    """
    Number of layers in a tree of `leaf_count` leaves.

    Equals ``floor(log2(n - 1)) + 2`` for ``n > 1`` and 1 for a single leaf.

    Examples:
        >>> expected_layer_count(4)  # Returns 3
        >>> expected_layer_count(5)  # Returns 4
    """
    if leaf_count <= 0:
        raise EmptyTreeError("A tree needs at least one leaf")
    return (leaf_count - 1).bit_length() + 1


def validate_tree_structure(layers: Sequence[Sequence[bytes]]) -> bool:
    """
    Validate that a list of layers forms a well shaped tree.

    Args:
        layers: Tree levels from leaves to root

    Returns:
        True if each layer halves the previous one (rounding up) and the
        top layer holds exactly one node
    """
    if not layers:
        return False

    for i in range(1, len(layers)):
        expected_size = (len(layers[i - 1]) + 1) // 2
        if len(layers[i]) != expected_size:
            return False

    return len(layers[-1]) == 1


class MerkleTree:
    """
    Immutable Merkle tree over an ordered sequence of 32-byte leaves.

    Build it once with ``from_leaves``; the layers are stored as tuples and
    never change afterwards.

    Example:
        >>> tree = MerkleTree.from_leaves([leaf_for_index(i) for i in range(4)])
        >>> proof = tree.proof(1)
        >>> len(proof)
        2
    """

    def __init__(self, layers: Tuple[Tuple[bytes, ...], ...], hasher: Hasher):
        self._layers = layers
        self.hasher = hasher

    @classmethod
    def from_leaves(cls, leaves: Sequence[bytes], hasher: Optional[Hasher] = None) -> "MerkleTree":
        """
        Build a tree from an ordered leaf sequence.

        Args:
            leaves: 32-byte leaf digests; their order defines the leaf index
            hasher: Hash primitive, SHA-256 when omitted

        Returns:
            The constructed tree

        Raises:
            ValueError: If any leaf is not a 32-byte digest
        """
        hasher = hasher or DEFAULT_HASHER
        for i, leaf in enumerate(leaves):
            if not is_digest(leaf):
                raise ValueError(f"Leaf {i} must be a 32-byte digest")

        layers = build_layers([bytes(leaf) for leaf in leaves], hasher)
        logger.debug(f"Built merkle tree with {len(layers[0])} leaves and {len(layers)} layers")
        return cls(layers, hasher)

    @property
    def layers(self) -> Tuple[Tuple[bytes, ...], ...]:
        return self._layers

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        return self._layers[0]

    @property
    def leaf_count(self) -> int:
        return len(self._layers[0])

    @property
    def depth(self) -> int:
        """Number of layer transitions between the leaves and the root."""
        return len(self._layers) - 1

    def root(self) -> bytes:
        """
        Return the 32-byte root.

        Raises:
            EmptyTreeError: If the tree was built from zero leaves
        """
        if self.leaf_count == 0:
            raise EmptyTreeError("Cannot take the root of an empty tree")
        return self._layers[-1][0]

    def proof(self, index: int) -> List[bytes]:
        """Sibling path for the leaf at `index`. See ``generate_proof``."""
        from .proof import generate_proof

        return generate_proof(self, index)

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={self.leaf_count}, depth={self.depth}, hasher={self.hasher.name})"


def build_merkle_tree(leaves: Sequence[bytes], hasher: Optional[Hasher] = None) -> MerkleTree:
    """Build a ``MerkleTree`` from `leaves`."""
    return MerkleTree.from_leaves(leaves, hasher)

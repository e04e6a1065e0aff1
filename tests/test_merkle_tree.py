"""
Unit Tests for Merkle Tree Construction

Covers the hash primitives, layer construction with odd-node carrying, and
the tree shape invariants.
"""

import math
import os
import sys
import unittest
from hashlib import sha256

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from merkle_inclusion.merkle import (
    CountingHasher,
    EmptyTreeError,
    Hasher,
    MerkleTree,
    Sha256Hasher,
    build_merkle_tree,
    expected_layer_count,
    leaf_for_index,
    validate_tree_structure,
)


def H(left: bytes, right: bytes) -> bytes:
    return sha256(left + right).digest()


def make_leaves(n):
    return [leaf_for_index(i) for i in range(n)]


class ReversingHasher(Hasher):
    """Toy primitive used to check that the tree never calls sha256 directly."""

    name = "reversed-sha256"

    def hash(self, data: bytes) -> bytes:
        return sha256(data[::-1]).digest()


class TestHashing(unittest.TestCase):

    def test_sha256_hasher(self):
        hasher = Sha256Hasher()
        self.assertEqual(hasher.hash(b"abc"), sha256(b"abc").digest())
        self.assertEqual(len(hasher.hash(b"")), 32)

    def test_concat_and_hash_has_no_separator(self):
        hasher = Sha256Hasher()
        left, right = b"\x01" * 32, b"\x02" * 32
        self.assertEqual(hasher.concat_and_hash(left, right), sha256(left + right).digest())
        self.assertNotEqual(hasher.concat_and_hash(left, right), hasher.concat_and_hash(right, left))

    def test_leaf_for_index_hashes_little_endian_word(self):
        self.assertEqual(leaf_for_index(0), sha256(b"\x00" * 8).digest())
        self.assertEqual(leaf_for_index(1), sha256(b"\x01" + b"\x00" * 7).digest())
        self.assertEqual(leaf_for_index(258), sha256(b"\x02\x01" + b"\x00" * 6).digest())

    def test_counting_hasher(self):
        hasher = CountingHasher()
        hasher.hash(b"a")
        hasher.concat_and_hash(b"b", b"c")
        self.assertEqual(hasher.count, 2)
        self.assertEqual(hasher.name, "sha256")
        hasher.reset()
        self.assertEqual(hasher.count, 0)


class TestMerkleTree(unittest.TestCase):

    def test_single_leaf_root_is_leaf(self):
        leaf = leaf_for_index(7)
        tree = MerkleTree.from_leaves([leaf])
        self.assertEqual(tree.root(), leaf)
        self.assertEqual(len(tree.layers), 1)
        self.assertEqual(tree.depth, 0)

    def test_two_leaves(self):
        l0, l1 = make_leaves(2)
        tree = MerkleTree.from_leaves([l0, l1])
        self.assertEqual(tree.root(), H(l0, l1))

    def test_four_leaves(self):
        l0, l1, l2, l3 = make_leaves(4)
        tree = MerkleTree.from_leaves([l0, l1, l2, l3])
        self.assertEqual(tree.layers[1], (H(l0, l1), H(l2, l3)))
        self.assertEqual(tree.root(), H(H(l0, l1), H(l2, l3)))

    def test_three_leaves_carries_odd_node(self):
        l0, l1, l2 = make_leaves(3)
        tree = MerkleTree.from_leaves([l0, l1, l2])
        # The last node is carried up as is: not duplicated, not hashed
        self.assertEqual(tree.layers[1], (H(l0, l1), l2))
        self.assertEqual(tree.root(), H(H(l0, l1), l2))

    def test_five_leaves_carries_through_two_levels(self):
        leaves = make_leaves(5)
        tree = MerkleTree.from_leaves(leaves)
        a = H(leaves[0], leaves[1])
        b = H(leaves[2], leaves[3])
        self.assertEqual(tree.layers[1], (a, b, leaves[4]))
        self.assertEqual(tree.layers[2], (H(a, b), leaves[4]))
        self.assertEqual(tree.root(), H(H(a, b), leaves[4]))

    def test_empty_tree_has_no_root(self):
        tree = MerkleTree.from_leaves([])
        self.assertEqual(tree.leaf_count, 0)
        with self.assertRaises(EmptyTreeError):
            tree.root()

    def test_layer_count_invariant(self):
        for n in range(1, 70):
            with self.subTest(n=n):
                tree = build_merkle_tree(make_leaves(n))
                if n == 1:
                    expected = 1
                else:
                    expected = int(math.floor(math.log2(n - 1))) + 2
                self.assertEqual(len(tree.layers), expected)
                self.assertEqual(expected_layer_count(n), expected)
                self.assertTrue(validate_tree_structure(tree.layers))

    def test_expected_layer_count_rejects_empty(self):
        with self.assertRaises(EmptyTreeError):
            expected_layer_count(0)

    def test_hash_count_is_linear(self):
        for n in (1, 2, 3, 8, 13, 100):
            with self.subTest(n=n):
                hasher = CountingHasher()
                MerkleTree.from_leaves(make_leaves(n), hasher)
                self.assertEqual(hasher.count, n - 1)

    def test_root_is_deterministic(self):
        leaves = make_leaves(37)
        self.assertEqual(
            MerkleTree.from_leaves(leaves).root(),
            MerkleTree.from_leaves(list(leaves)).root(),
        )

    def test_leaf_order_matters(self):
        leaves = make_leaves(4)
        swapped = [leaves[1], leaves[0], leaves[2], leaves[3]]
        self.assertNotEqual(
            MerkleTree.from_leaves(leaves).root(),
            MerkleTree.from_leaves(swapped).root(),
        )

    def test_rejects_non_digest_leaves(self):
        with self.assertRaises(ValueError):
            MerkleTree.from_leaves([b"\x00" * 31])
        with self.assertRaises(ValueError):
            MerkleTree.from_leaves([leaf_for_index(0), "not bytes"])

    def test_pluggable_hasher(self):
        leaves = make_leaves(4)
        hasher = ReversingHasher()
        tree = MerkleTree.from_leaves(leaves, hasher)
        left = hasher.concat_and_hash(leaves[0], leaves[1])
        right = hasher.concat_and_hash(leaves[2], leaves[3])
        self.assertEqual(tree.root(), hasher.concat_and_hash(left, right))
        self.assertNotEqual(tree.root(), MerkleTree.from_leaves(leaves).root())

    def test_layers_are_immutable(self):
        tree = MerkleTree.from_leaves(make_leaves(4))
        self.assertIsInstance(tree.layers, tuple)
        for layer in tree.layers:
            self.assertIsInstance(layer, tuple)

    def test_validate_tree_structure(self):
        self.assertFalse(validate_tree_structure([]))
        self.assertFalse(validate_tree_structure([[b"a"] * 4, [b"b"] * 3, [b"c"]]))
        self.assertFalse(validate_tree_structure([[b"a"] * 2]))
        self.assertTrue(validate_tree_structure([[b"a"] * 3, [b"b"] * 2, [b"c"]]))


if __name__ == "__main__":
    unittest.main(verbosity=2)

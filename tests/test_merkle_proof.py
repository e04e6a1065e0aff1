"""
Unit Tests for Merkle Proof Generation, Encoding and Verification
"""

import os
import sys
import unittest
from hashlib import sha256

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from merkle_inclusion.merkle import (
    EmptyTreeError,
    InclusionClaim,
    IndexOutOfRangeError,
    MalformedProofError,
    MerkleProofError,
    MerkleTree,
    compute_root_from_proof,
    decode_proof,
    encode_proof,
    expected_proof_length,
    generate_proof,
    leaf_for_index,
    verify_proof,
)


def H(left: bytes, right: bytes) -> bytes:
    return sha256(left + right).digest()


def make_leaves(n):
    return [leaf_for_index(i) for i in range(n)]


def flip_bit(data: bytes, bit: int) -> bytes:
    buf = bytearray(data)
    buf[bit // 8] ^= 1 << (bit % 8)
    return bytes(buf)


class TestProofGeneration(unittest.TestCase):

    def test_four_leaf_scenario(self):
        l0, l1, l2, l3 = make_leaves(4)
        tree = MerkleTree.from_leaves([l0, l1, l2, l3])
        root = H(H(l0, l1), H(l2, l3))

        proof = generate_proof(tree, 1)
        self.assertEqual(proof, [l0, H(l2, l3)])
        self.assertEqual(tree.root(), root)
        self.assertTrue(verify_proof(root, 1, l1, 4, proof))

    def test_three_leaf_scenario_skips_carried_level(self):
        l0, l1, l2 = make_leaves(3)
        tree = MerkleTree.from_leaves([l0, l1, l2])

        # Nothing for the carry transition, then the partner at level 1
        self.assertEqual(generate_proof(tree, 2), [H(l0, l1)])
        self.assertEqual(generate_proof(tree, 0), [l1, l2])
        self.assertEqual(generate_proof(tree, 1), [l0, l2])
        self.assertTrue(verify_proof(tree.root(), 2, l2, 3, [H(l0, l1)]))

    def test_single_leaf_proof_is_empty(self):
        leaf = leaf_for_index(0)
        tree = MerkleTree.from_leaves([leaf])
        self.assertEqual(generate_proof(tree, 0), [])
        self.assertTrue(verify_proof(leaf, 0, leaf, 1, []))

    def test_tree_proof_method(self):
        tree = MerkleTree.from_leaves(make_leaves(6))
        self.assertEqual(tree.proof(4), generate_proof(tree, 4))

    def test_out_of_range_index(self):
        tree = MerkleTree.from_leaves(make_leaves(5))
        for index in (-1, 5, 100):
            with self.subTest(index=index):
                with self.assertRaises(IndexOutOfRangeError):
                    generate_proof(tree, index)

    def test_empty_tree(self):
        with self.assertRaises(EmptyTreeError):
            generate_proof(MerkleTree.from_leaves([]), 0)

    def test_expected_proof_length_matches_generator(self):
        for n in range(1, 40):
            tree = MerkleTree.from_leaves(make_leaves(n))
            for i in range(n):
                with self.subTest(n=n, i=i):
                    self.assertEqual(expected_proof_length(i, n), len(generate_proof(tree, i)))


class TestProofVerification(unittest.TestCase):

    def test_completeness(self):
        for n in range(1, 34):
            leaves = make_leaves(n)
            tree = MerkleTree.from_leaves(leaves)
            root = tree.root()
            for i in range(n):
                with self.subTest(n=n, i=i):
                    proof = generate_proof(tree, i)
                    self.assertTrue(verify_proof(root, i, leaves[i], n, proof))
                    self.assertEqual(compute_root_from_proof(leaves[i], i, n, proof), root)

    def test_wrong_leaf_is_false(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        self.assertFalse(verify_proof(tree.root(), 3, leaves[4], 8, tree.proof(3)))

    def test_wrong_root_is_false(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        self.assertFalse(verify_proof(b"\x00" * 32, 3, leaves[3], 8, tree.proof(3)))

    def test_soundness_leaf_bit_flips(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        root, proof = tree.root(), tree.proof(5)
        for bit in range(256):
            with self.subTest(bit=bit):
                self.assertFalse(verify_proof(root, 5, flip_bit(leaves[5], bit), 8, proof))

    def test_soundness_sibling_bit_flips(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        root, proof = tree.root(), tree.proof(2)
        for k in range(len(proof)):
            for bit in range(256):
                with self.subTest(sibling=k, bit=bit):
                    tampered = list(proof)
                    tampered[k] = flip_bit(proof[k], bit)
                    self.assertFalse(verify_proof(root, 2, leaves[2], 8, tampered))

    def test_soundness_index_bit_flips(self):
        leaves = make_leaves(16)
        tree = MerkleTree.from_leaves(leaves)
        root = tree.root()
        for i in range(16):
            proof = tree.proof(i)
            for bit in range(4):
                with self.subTest(i=i, bit=bit):
                    self.assertFalse(verify_proof(root, i ^ (1 << bit), leaves[i], 16, proof))

    def test_soundness_index_bit_flips_with_carried_nodes(self):
        for n in (3, 5, 6, 7, 11, 13):
            leaves = make_leaves(n)
            tree = MerkleTree.from_leaves(leaves)
            root = tree.root()
            for i in range(n):
                proof = tree.proof(i)
                for bit in range(n.bit_length()):
                    j = i ^ (1 << bit)
                    if j >= n:
                        continue
                    with self.subTest(n=n, i=i, j=j):
                        if len(proof) < expected_proof_length(j, n):
                            # Path runs out before the root
                            with self.assertRaises(MalformedProofError):
                                verify_proof(root, j, leaves[i], n, proof)
                        else:
                            self.assertFalse(verify_proof(root, j, leaves[i], n, proof))

    def test_index_flip_onto_carried_leaf_is_false(self):
        leaves = make_leaves(5)
        tree = MerkleTree.from_leaves(leaves)
        self.assertFalse(verify_proof(tree.root(), 4, leaves[0], 5, tree.proof(0)))

    def test_index_equal_to_total_raises(self):
        leaves = make_leaves(4)
        tree = MerkleTree.from_leaves(leaves)
        with self.assertRaises(IndexOutOfRangeError):
            verify_proof(tree.root(), 4, leaves[3], 4, tree.proof(3))

    def test_zero_total_leaves_raises(self):
        leaf = leaf_for_index(0)
        with self.assertRaises(IndexOutOfRangeError):
            verify_proof(leaf, 0, leaf, 0, [])

    def test_negative_index_raises(self):
        leaf = leaf_for_index(0)
        with self.assertRaises(IndexOutOfRangeError):
            verify_proof(leaf, -1, leaf, 1, [])

    def test_short_proof_is_malformed(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        with self.assertRaises(MalformedProofError):
            verify_proof(tree.root(), 1, leaves[1], 8, tree.proof(1)[:-1])

    def test_long_proof_is_false(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        self.assertFalse(verify_proof(tree.root(), 1, leaves[1], 8, tree.proof(1) + [leaves[0]]))

    def test_long_proof_has_no_root(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        with self.assertRaises(MalformedProofError):
            compute_root_from_proof(leaves[1], 1, 8, tree.proof(1) + [leaves[0]])

    def test_sibling_that_is_not_a_digest_is_malformed(self):
        leaves = make_leaves(8)
        tree = MerkleTree.from_leaves(leaves)
        proof = tree.proof(1)
        for bad in (None, proof[0][:31], proof[0] + b"\x00"):
            with self.subTest(bad=bad):
                with self.assertRaises(MalformedProofError):
                    verify_proof(tree.root(), 1, leaves[1], 8, [bad] + proof[1:])

    def test_carried_node_proof_length_is_enforced(self):
        l0, l1, l2 = make_leaves(3)
        tree = MerkleTree.from_leaves([l0, l1, l2])
        # A full-depth path for the carried leaf does not fit the tree shape
        self.assertFalse(verify_proof(tree.root(), 2, l2, 3, [l1, H(l0, l1)]))
        with self.assertRaises(MalformedProofError):
            compute_root_from_proof(l2, 2, 3, [l1, H(l0, l1)])

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(IndexOutOfRangeError, MerkleProofError))
        self.assertTrue(issubclass(IndexOutOfRangeError, IndexError))
        self.assertTrue(issubclass(MalformedProofError, MerkleProofError))
        self.assertTrue(issubclass(MalformedProofError, ValueError))
        self.assertTrue(issubclass(EmptyTreeError, MerkleProofError))

    def test_inclusion_claim(self):
        leaves = make_leaves(7)
        tree = MerkleTree.from_leaves(leaves)
        claim = InclusionClaim(tree.root(), leaves[6], 6, 7, tuple(tree.proof(6)))
        self.assertTrue(claim.verify())
        forged = InclusionClaim(tree.root(), leaves[5], 6, 7, tuple(tree.proof(6)))
        self.assertFalse(forged.verify())


class TestProofCodec(unittest.TestCase):

    def test_encoding_is_plain_concatenation(self):
        proof = [b"\x01" * 32, b"\x02" * 32]
        self.assertEqual(encode_proof(proof), b"\x01" * 32 + b"\x02" * 32)
        self.assertEqual(encode_proof([]), b"")

    def test_round_trip_of_generated_proofs(self):
        for n in (1, 2, 3, 10, 33):
            tree = MerkleTree.from_leaves(make_leaves(n))
            for i in range(n):
                with self.subTest(n=n, i=i):
                    proof = tree.proof(i)
                    encoded = encode_proof(proof)
                    self.assertEqual(len(encoded), 32 * len(proof))
                    self.assertEqual(decode_proof(encoded), proof)

    def test_decode_rejects_partial_digest(self):
        for length in (1, 31, 33, 65):
            with self.subTest(length=length):
                with self.assertRaises(MalformedProofError):
                    decode_proof(b"\x00" * length)

    def test_encode_rejects_short_sibling(self):
        with self.assertRaises(MalformedProofError):
            encode_proof([b"\x00" * 32, b"\x00" * 16])


if __name__ == "__main__":
    unittest.main(verbosity=2)

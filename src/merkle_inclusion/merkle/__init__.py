"""
Merkle Commitment Engine

This package builds Merkle trees over 32-byte leaves and produces and checks
single-leaf inclusion proofs.

The package is organized into:
- hashing: pluggable 256-bit hash primitives and leaf derivation
- tree: immutable layered tree construction
- proof: sibling path generation and verification
- codec: canonical binary encoding of sibling paths
- errors: the exception taxonomy shared by all of the above
"""

from .errors import (
    MerkleProofError,
    EmptyTreeError,
    IndexOutOfRangeError,
    MalformedProofError,
)

from .hashing import (
    Hasher,
    Sha256Hasher,
    CountingHasher,
    DEFAULT_HASHER,
    leaf_for_index,
)

from .tree import (
    MerkleTree,
    build_merkle_tree,
    build_layers,
    expected_layer_count,
    validate_tree_structure,
)

from .proof import (
    InclusionClaim,
    generate_proof,
    expected_proof_length,
    compute_root_from_proof,
    verify_proof,
)

from .codec import (
    encode_proof,
    decode_proof,
)

__all__ = [
    # Errors
    "MerkleProofError",
    "EmptyTreeError",
    "IndexOutOfRangeError",
    "MalformedProofError",
    # Hashing
    "Hasher",
    "Sha256Hasher",
    "CountingHasher",
    "DEFAULT_HASHER",
    "leaf_for_index",
    # Tree
    "MerkleTree",
    "build_merkle_tree",
    "build_layers",
    "expected_layer_count",
    "validate_tree_structure",
    # Proofs
    "InclusionClaim",
    "generate_proof",
    "expected_proof_length",
    "compute_root_from_proof",
    "verify_proof",
    # Encoding
    "encode_proof",
    "decode_proof",
]

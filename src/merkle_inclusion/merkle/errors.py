"""
Merkle Proof Errors

Integration defects abort a check with one of these exceptions. A proof that
is well formed but does not rebuild the published root is not an error; the
verifier reports it as ``False``.
"""


class MerkleProofError(Exception):
    """Base class for errors raised by the Merkle commitment engine."""
    pass


class EmptyTreeError(MerkleProofError):
    """Raised when a root or proof is requested from a tree with no leaves."""
    pass


class IndexOutOfRangeError(MerkleProofError, IndexError):
    """Raised when a leaf index is not in ``[0, total_leaves)``."""

    def __init__(self, index: int, total_leaves: int):
        self.index = index
        self.total_leaves = total_leaves
        super().__init__(
            f"Leaf index {index} out of range for a tree of {total_leaves} leaves"
        )


class MalformedProofError(MerkleProofError, ValueError):
    """Raised when proof bytes or a sibling path cannot describe the claimed tree."""
    pass

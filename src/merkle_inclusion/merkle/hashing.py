"""
Hash Primitives

The tree, proof generator and verifier never call a hash function directly;
they take a ``Hasher`` so the 256-bit primitive can be swapped without touching
the tree logic. SHA-256 is the default.
"""

from hashlib import sha256

from ..constants import DIGEST_SIZE
from ..serialization import serialize_word


class Hasher:
    """
    Deterministic 256-bit hash over arbitrary byte strings.

    Subclasses implement ``hash``. Parent nodes are the hash of the raw
    concatenation of the two children, with no separator or length prefix.
    """

    name = "abstract"

    def hash(self, data: bytes) -> bytes:
        raise NotImplementedError

    def concat_and_hash(self, left: bytes, right: bytes) -> bytes:
        """Hash of ``left ++ right``."""
        return self.hash(left + right)


class Sha256Hasher(Hasher):
    """SHA-256, as used by the guest program."""

    name = "sha256"

    def hash(self, data: bytes) -> bytes:
        return sha256(data).digest()


class CountingHasher(Hasher):
    """
    Wraps another hasher and counts how many digests it produced.

    The count stands in for a cycle count when the guest program runs
    in-process.
    """

    def __init__(self, inner: Hasher = None):
        self.inner = inner or Sha256Hasher()
        self.name = self.inner.name
        self.count = 0

    def hash(self, data: bytes) -> bytes:
        self.count += 1
        return self.inner.hash(data)

    def reset(self) -> None:
        self.count = 0


DEFAULT_HASHER = Sha256Hasher()


def leaf_for_index(index: int, hasher: Hasher = None) -> bytes:
    """
    Derive the leaf committed at position `index`.

    The leaf is the hash of the index encoded as an 8-byte little-endian word.

    Args:
        index: Non-negative leaf position
        hasher: Hash primitive, SHA-256 when omitted

    Returns:
        32-byte leaf digest

    Examples:
        >>> leaf_for_index(0) == sha256(b"\\x00" * 8).digest()
        True
    """
    hasher = hasher or DEFAULT_HASHER
    return hasher.hash(serialize_word(index))


def is_digest(value: bytes) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE

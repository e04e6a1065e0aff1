"""
Proof Encoding

The wire form of a sibling path is the plain concatenation of its 32-byte
entries. There are no separators and no length prefix; the path length is
the byte length divided by 32.
"""

from typing import List, Sequence

from ..constants import DIGEST_SIZE
from .errors import MalformedProofError
from .hashing import is_digest


def encode_proof(proof: Sequence[bytes]) -> bytes:
    """
    Encode a sibling path to bytes.

    Args:
        proof: Sibling hashes, each exactly 32 bytes

    Returns:
        ``32 * len(proof)`` bytes

    Raises:
        MalformedProofError: If a sibling is not 32 bytes long
    """
    for i, sibling in enumerate(proof):
        if not is_digest(sibling):
            raise MalformedProofError(f"Proof entry {i} must be {DIGEST_SIZE} bytes")
    return b"".join(bytes(sibling) for sibling in proof)


def decode_proof(data: bytes) -> List[bytes]:
    """
    Decode proof bytes back into a sibling path.

    Raises:
        MalformedProofError: If the length is not a multiple of 32
    """
    if len(data) % DIGEST_SIZE != 0:
        raise MalformedProofError(
            f"Proof length {len(data)} is not a multiple of {DIGEST_SIZE} bytes"
        )
    return [bytes(data[i : i + DIGEST_SIZE]) for i in range(0, len(data), DIGEST_SIZE)]

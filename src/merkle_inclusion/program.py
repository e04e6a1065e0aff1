"""
Inclusion Check Guest Program

This module is the program whose execution the external prover attests. It
reads a claim from an input channel, checks it, and commits
``root ++ leaf ++ validity`` as its only output.

Channel framing matches the zkVM stdin the program was written against:
fixed-size digests are raw bytes, integers are 8-byte little-endian words and
byte strings carry a word length prefix.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import DIGEST_SIZE, INVALID_BYTE, PUBLIC_VALUES_SIZE, VALID_BYTE, WORD_SIZE
from .merkle import Hasher, MerkleProofError, decode_proof, verify_proof
from .serialization import deserialize_word, serialize_word

logger = logging.getLogger(__name__)


class ChannelError(MerkleProofError):
    """Raised when the input channel does not hold the expected fields."""
    pass


class InputChannel:
    """
    Append-only buffer written by the host and read once by the guest.

    Example:
        >>> stdin = InputChannel()
        >>> stdin.write_digest(root)
        >>> stdin.write_word(42)
        >>> InputChannel.from_bytes(stdin.to_bytes()).read_digest() == root
        True
    """

    def __init__(self, data: bytes = b""):
        self._buffer = bytearray(data)
        self._cursor = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "InputChannel":
        return cls(data)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)

    # Host side

    def write_digest(self, value: bytes) -> None:
        if len(value) != DIGEST_SIZE:
            raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(value)}")
        self._buffer += value

    def write_bytes(self, value: bytes) -> None:
        self._buffer += serialize_word(len(value))
        self._buffer += value

    def write_word(self, value: int) -> None:
        self._buffer += serialize_word(value)

    # Guest side

    def _take(self, size: int, what: str) -> bytes:
        end = self._cursor + size
        if end > len(self._buffer):
            raise ChannelError(
                f"Input channel exhausted reading {what}: need {size} bytes, "
                f"{len(self._buffer) - self._cursor} left"
            )
        chunk = bytes(self._buffer[self._cursor:end])
        self._cursor = end
        return chunk

    def read_digest(self, what: str = "digest") -> bytes:
        return self._take(DIGEST_SIZE, what)

    def read_word(self, what: str = "word") -> int:
        return deserialize_word(self._take(WORD_SIZE, what))

    def read_bytes(self, what: str = "bytes") -> bytes:
        length = self.read_word(f"{what} length")
        return self._take(length, what)

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self._cursor


class OutputChannel:
    """Buffer the guest commits its public values to."""

    def __init__(self):
        self._buffer = bytearray()

    def commit_slice(self, data: bytes) -> None:
        self._buffer += data

    def as_slice(self) -> bytes:
        return bytes(self._buffer)


@dataclass(frozen=True)
class ProgramOutput:
    """Decoded public values of one program run."""

    root: bytes
    leaf: bytes
    is_valid: bool

    def to_bytes(self) -> bytes:
        return self.root + self.leaf + (VALID_BYTE if self.is_valid else INVALID_BYTE)

    @classmethod
    def from_bytes(cls, public_values: bytes) -> "ProgramOutput":
        """
        Parse the 65 committed bytes.

        Raises:
            ValueError: If the buffer is not exactly 65 bytes long
        """
        if len(public_values) != PUBLIC_VALUES_SIZE:
            raise ValueError(
                f"Public values must be {PUBLIC_VALUES_SIZE} bytes, got {len(public_values)}"
            )
        return cls(
            root=bytes(public_values[0:DIGEST_SIZE]),
            leaf=bytes(public_values[DIGEST_SIZE:2 * DIGEST_SIZE]),
            is_valid=public_values[2 * DIGEST_SIZE] != 0,
        )


def write_program_inputs(
    stdin: InputChannel,
    root: bytes,
    leaf: bytes,
    proof_bytes: bytes,
    leaf_index: int,
    total_leaves: int,
) -> InputChannel:
    """Write the five program inputs in the order the guest reads them."""
    stdin.write_digest(root)
    stdin.write_digest(leaf)
    stdin.write_bytes(proof_bytes)
    stdin.write_word(leaf_index)
    stdin.write_word(total_leaves)
    return stdin


def run_program(
    stdin: InputChannel,
    stdout: Optional[OutputChannel] = None,
    hasher: Optional[Hasher] = None,
) -> ProgramOutput:
    """
    Run the inclusion check against an input channel.

    Args:
        stdin: Channel holding root, leaf, proof bytes, leaf index and
            total leaf count, in that order
        stdout: Channel to commit the public values to; a fresh one is
            used when omitted
        hasher: Hash primitive, SHA-256 when omitted

    Returns:
        The committed output

    Raises:
        ChannelError: If the input channel is short
        MalformedProofError: If the proof cannot be decoded or does not fit
            the claimed tree shape
        IndexOutOfRangeError: If the leaf index is out of range

    Nothing is committed when an exception is raised.
    """
    stdout = stdout if stdout is not None else OutputChannel()

    root = stdin.read_digest("root")
    leaf = stdin.read_digest("leaf")
    proof_bytes = stdin.read_bytes("proof")
    leaf_index = stdin.read_word("leaf index")
    total_leaves = stdin.read_word("total leaves")

    proof = decode_proof(proof_bytes)
    is_valid = verify_proof(root, leaf_index, leaf, total_leaves, proof, hasher)
    logger.info(f"Inclusion check for leaf {leaf_index} of {total_leaves}: valid={is_valid}")

    output = ProgramOutput(root=root, leaf=leaf, is_valid=is_valid)
    stdout.commit_slice(output.to_bytes())
    return output

"""
Word Serialization Functions

Integers crossing the host/guest boundary are encoded as fixed-width
little-endian words, including the length prefix of a byte string.
"""

from .constants import MAX_WORD, WORD_SIZE


def serialize_word(value: int) -> bytes:
    """
    Serialize an unsigned platform word to its little-endian form.

    Args:
        value: Integer value (0 <= value < 2^64)

    Returns:
        8-byte little-endian representation

    Raises:
        ValueError: If value is negative
        OverflowError: If value does not fit in a word

    Examples:
        >>> serialize_word(1)
        b'\\x01\\x00\\x00\\x00\\x00\\x00\\x00\\x00'
    """
    if value < 0:
        raise ValueError("word values must be non-negative")
    if value > MAX_WORD:
        raise OverflowError("Value too large for a platform word")

    return value.to_bytes(WORD_SIZE, "little")


def deserialize_word(data: bytes) -> int:
    """
    Deserialize a little-endian platform word.

    Args:
        data: Exactly WORD_SIZE bytes

    Returns:
        The decoded unsigned integer
    """
    if len(data) != WORD_SIZE:
        raise ValueError(f"Expected {WORD_SIZE} bytes, got {len(data)} bytes")
    return int.from_bytes(data, "little")

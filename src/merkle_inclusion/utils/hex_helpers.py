"""
Hex String Utilities

Digests cross the CLI, REST and fixture boundaries as ``0x``-prefixed hex
strings. These helpers convert and validate them.
"""

from typing import Optional


def hex_to_bytes(hex_str: str, expected_bytes: Optional[int] = None) -> bytes:
    """
    Convert a hex string to bytes.

    Args:
        hex_str: Hex string (with or without '0x' prefix)
        expected_bytes: Optional exact byte length to enforce

    Returns:
        Bytes representation of the hex string

    Raises:
        ValueError: If the string is not hex or has the wrong length

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\\x12\\x34'
        >>> hex_to_bytes("1234")
        b'\\x12\\x34'
    """
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]

    # Pad to even length
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str

    try:
        data = bytes.fromhex(hex_str)
    except ValueError:
        raise ValueError(f"Invalid hex string: 0x{hex_str}")

    if expected_bytes is not None and len(data) != expected_bytes:
        raise ValueError(f"Expected {expected_bytes} bytes, got {len(data)} bytes")
    return data


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a hex string.

    Examples:
        >>> bytes_to_hex(b'\\x12\\x34')
        "0x1234"
        >>> bytes_to_hex(b'\\x12\\x34', prefix=False)
        "1234"
    """
    hex_str = data.hex()
    return f"0x{hex_str}" if prefix else hex_str


def validate_hex_length(hex_str: str, expected_bytes: int) -> bool:
    """
    Validate that a hex string represents the expected number of bytes.

    Returns:
        True if `hex_str` is '0x'-prefixed, hex and exactly `expected_bytes` long
    """
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        return False

    hex_part = hex_str[2:]
    if not all(c in "0123456789abcdefABCDEF" for c in hex_part):
        return False
    return len(hex_part) == expected_bytes * 2

"""
Utility Functions

Hex string conversion and validation used at the CLI, REST and fixture
boundaries.
"""

from .hex_helpers import (
    hex_to_bytes,
    bytes_to_hex,
    validate_hex_length,
)

__all__ = [
    'hex_to_bytes',
    'bytes_to_hex',
    'validate_hex_length',
]

"""
Merkle Inclusion Constants

This module contains the fixed sizes and defaults shared by the Merkle
commitment engine, the guest program channels and the host tooling.
"""

# ====================
# Digest Sizes
# ====================

# Size in bytes of every leaf, internal node and root
DIGEST_SIZE = 32

# ====================
# Channel Framing
# ====================

# Platform word used for integers and length prefixes on the input channel
WORD_SIZE = 8

# Largest value a platform word can carry
MAX_WORD = 2**64 - 1

# Public values committed by the guest program: root ++ leaf ++ validity byte
PUBLIC_VALUES_SIZE = 2 * DIGEST_SIZE + 1

VALID_BYTE = b"\x01"
INVALID_BYTE = b"\x00"

# ====================
# Host Defaults
# ====================

# Default number of generated leaves for the CLI and the REST API
DEFAULT_TOTAL_LEAVES = 1 << 20

# Identifier of the guest program registered with the prover service
PROGRAM_ID = "merkle-inclusion-program"

# Default output directory for on-chain verifier fixtures
DEFAULT_FIXTURE_DIR = "contracts/src/fixtures"

# Largest tree the REST API builds per request
MAX_API_TOTAL_LEAVES = 1 << 20

"""
Merkle Inclusion Proofs

Commit to an ordered set of 32-byte leaves with a Merkle tree and prove that
a single leaf is included under a published root. The check runs as a small
guest program whose only output is ``root ++ leaf ++ validity``, so its
execution can be proven by an external succinct-proof service.
"""

__version__ = "0.1.0"

"""
Models Package

This package contains the Pydantic models of the REST API and of the
on-chain verifier fixture.

Usage:
    from merkle_inclusion.models import VerifyProofRequest, MerkleProofFixture

    request = VerifyProofRequest(root="0x...", leaf="0x...", leaf_index=0, total_leaves=1)
"""

from .api_models import (
    ErrorResponse,
    HealthResponse,
    GenerateProofRequest,
    GenerateProofResponse,
    VerifyProofRequest,
    VerifyProofResponse,
)
from .fixture_models import MerkleProofFixture

__all__ = [
    'ErrorResponse',
    'HealthResponse',
    'GenerateProofRequest',
    'GenerateProofResponse',
    'VerifyProofRequest',
    'VerifyProofResponse',
    'MerkleProofFixture',
]

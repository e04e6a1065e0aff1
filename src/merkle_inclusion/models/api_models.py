"""
API Models

This module defines Pydantic models for API request and response validation.
Digests and proofs travel as 0x-prefixed hex strings.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..constants import DIGEST_SIZE, MAX_API_TOTAL_LEAVES, MAX_WORD
from ..utils import validate_hex_length


def _check_digest(v: str) -> str:
    if not validate_hex_length(v, DIGEST_SIZE):
        raise ValueError("Must be a 32-byte hex string starting with '0x'")
    return v.lower()


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""
    status: str = Field(..., description="Service status")
    prover_api: bool = Field(..., description="Prover service connectivity")
    version: str = Field(default="0.1.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class GenerateProofRequest(BaseModel):
    """
    Request model for proof generation over the generated leaf set.

    Attributes:
        total_leaves: Number of leaves to commit to
        leaf_index: Leaf to prove; random when omitted
        seed: Seed for the random pick
    """
    total_leaves: int = Field(..., gt=0, le=MAX_API_TOTAL_LEAVES, description="Number of leaves")
    leaf_index: Optional[int] = Field(default=None, ge=0, description="Leaf to prove")
    seed: Optional[int] = Field(default=None, description="Seed for random leaf selection")


class GenerateProofResponse(BaseModel):
    """Response model carrying a proof and the program input channel."""
    root: str = Field(..., description="Merkle root as hex string")
    leaf: str = Field(..., description="Proven leaf as hex string")
    leaf_index: int = Field(..., description="Leaf index")
    total_leaves: int = Field(..., description="Number of leaves in the tree")
    proof: List[str] = Field(..., description="Sibling hashes as hex strings")
    proof_bytes: str = Field(..., description="Encoded proof as hex string")
    stdin: str = Field(..., description="Program input channel bytes as hex string")


class VerifyProofRequest(BaseModel):
    """
    Request model for running the inclusion check program.

    Attributes:
        root: Published root
        leaf: Claimed leaf
        proof: Encoded proof (concatenated 32-byte siblings) as hex
        leaf_index: Claimed leaf position
        total_leaves: Number of leaves in the committed tree
    """
    root: str = Field(..., description="Merkle root as hex string")
    leaf: str = Field(..., description="Claimed leaf as hex string")
    proof: str = Field(default="0x", description="Encoded proof as hex string")
    leaf_index: int = Field(..., ge=0, le=MAX_WORD, description="Claimed leaf index")
    total_leaves: int = Field(..., ge=0, le=MAX_WORD, description="Number of leaves in the tree")

    @field_validator('root', 'leaf')
    @classmethod
    def validate_digest(cls, v):
        """Validate digests are 32-byte hex strings."""
        return _check_digest(v)

    @field_validator('proof')
    @classmethod
    def validate_proof(cls, v):
        """Validate the proof is a hex string; its length is checked by the program."""
        if not v.startswith('0x'):
            raise ValueError("Proof must be a hex string starting with '0x'")
        if not all(c in "0123456789abcdefABCDEF" for c in v[2:]) or len(v) % 2 != 0:
            raise ValueError("Proof must contain whole hex-encoded bytes")
        return v.lower()


class VerifyProofResponse(BaseModel):
    """Response model for an inclusion check run."""
    root: str = Field(..., description="Committed root as hex string")
    leaf: str = Field(..., description="Committed leaf as hex string")
    is_valid: bool = Field(..., description="Whether the proof rebuilds the root")
    public_values: str = Field(..., description="65 committed bytes as hex string")
    hash_count: int = Field(..., description="Hash invocations during the run")

    class Config:
        json_schema_extra = {
            "example": {
                "root": "0x5e1d9b5f1bd1cfa1c1a1d2eec7e6e7a25b0f7b1b2f0cc4c9c4f1f0e0d9c8b7a6",
                "leaf": "0xaf5570f5a1810b7af78caf4bc70a660f0df51e42baf91d4de5b2328de0e83dfc",
                "is_valid": True,
                "public_values": "0x5e1d...a6af55...fc01",
                "hash_count": 20
            }
        }

"""
Prover Service Integration Package

This package provides the HTTP surfaces of the project:

- ProverClient: client for the external succinct-proof service
- rest_api: FastAPI application exposing proof generation and checking

Usage:
    from merkle_inclusion.api import ProverClient

    client = ProverClient()
    keys = client.setup()
"""

from .prover_client import (
    ProverClient,
    ProverAPIError,
    ProofSystem,
    ProvingKeys,
    ProofWithPublicValues,
)

__all__ = [
    'ProverClient',
    'ProverAPIError',
    'ProofSystem',
    'ProvingKeys',
    'ProofWithPublicValues',
]

"""
REST API for Merkle Inclusion Proofs

This module provides a FastAPI-based REST API for generating inclusion
proofs over the generated leaf set and for running the inclusion check
program on caller-supplied inputs.
"""

import logging
import traceback
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..main import execute_program, prepare_program_inputs
from ..merkle import MerkleProofError
from ..models.api_models import (
    ErrorResponse,
    GenerateProofRequest,
    GenerateProofResponse,
    HealthResponse,
    VerifyProofRequest,
    VerifyProofResponse,
)
from ..program import InputChannel, write_program_inputs
from ..utils import bytes_to_hex, hex_to_bytes
from .prover_client import ProverAPIError, ProverClient

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Merkle Inclusion Proofs API",
    description="""
    Generate and check single-leaf Merkle inclusion proofs.

    ## Features
    - **Proof generation**: Build a tree over generated leaves and return the
      sibling path for one leaf, plus the program input channel bytes
    - **Inclusion check**: Run the inclusion check program on a root, leaf,
      encoded proof, leaf index and leaf count and return its 65-byte output

    A proof that does not rebuild the root is reported as `is_valid: false`.
    Malformed proofs and out-of-range indices are rejected with `400`.
    """,
    version=__version__,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    }
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global prover client instance
prover_client = None


def get_prover_client() -> Optional[ProverClient]:
    """Dependency returning the prover client, or None when it is not configured."""
    global prover_client
    if prover_client is None:
        try:
            prover_client = ProverClient()
        except ValueError as e:
            logger.warning(f"Prover service not configured: {e}")
            return None
    return prover_client


@app.exception_handler(MerkleProofError)
async def merkle_error_handler(request, exc: MerkleProofError):
    """Handle malformed proofs, empty trees and out-of-range indices."""
    logger.error(f"Inclusion check error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="INCLUSION_CHECK_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="VALIDATION_ERROR",
            details={"error_type": "ValueError"}
        ).model_dump()
    )


@app.exception_handler(ProverAPIError)
async def prover_api_exception_handler(request, exc: ProverAPIError):
    """Handle prover service errors."""
    logger.error(f"Prover API error: {exc}")
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(
            error=str(exc),
            code="PROVER_API_ERROR",
            details={"error_type": "ProverAPIError"}
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Merkle Inclusion Proofs API",
        "version": __version__,
        "description": "Generate and check Merkle inclusion proofs",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(client: Optional[ProverClient] = Depends(get_prover_client)):
    """
    Health check endpoint.

    The inclusion check runs locally, so the service is healthy even when the
    prover service is not configured or unreachable.
    """
    prover_status = client.health_check() if client is not None else False
    return HealthResponse(
        status="healthy",
        prover_api=prover_status,
        version=__version__
    )


@app.post("/proofs/generate", response_model=GenerateProofResponse)
def generate_proof_endpoint(request: GenerateProofRequest):
    """
    Generate an inclusion proof over the generated leaf set.

    Leaf ``i`` is the SHA-256 hash of ``i`` as an 8-byte little-endian word.
    The response carries the sibling path, its encoding and the full program
    input channel, ready to hand to a prover.
    """
    logger.info(
        f"Generating proof for leaf {request.leaf_index} of {request.total_leaves}"
    )
    inputs = prepare_program_inputs(
        request.total_leaves, leaf_index=request.leaf_index, seed=request.seed
    )
    return GenerateProofResponse(
        root=bytes_to_hex(inputs.root),
        leaf=bytes_to_hex(inputs.leaf),
        leaf_index=inputs.leaf_index,
        total_leaves=inputs.total_leaves,
        proof=[bytes_to_hex(step) for step in inputs.proof],
        proof_bytes=bytes_to_hex(inputs.proof_bytes),
        stdin=bytes_to_hex(inputs.stdin.to_bytes()),
    )


@app.post("/proofs/verify", response_model=VerifyProofResponse)
async def verify_proof_endpoint(request: VerifyProofRequest):
    """
    Run the inclusion check program on the supplied claim.

    **Response Structure:**
    - `is_valid`: whether the proof rebuilds the root
    - `public_values`: the 65 bytes the program commits (root, leaf, validity)
    - `hash_count`: hash invocations during the run
    """
    stdin = write_program_inputs(
        InputChannel(),
        hex_to_bytes(request.root),
        hex_to_bytes(request.leaf),
        hex_to_bytes(request.proof),
        request.leaf_index,
        request.total_leaves,
    )
    result = execute_program(stdin)

    return VerifyProofResponse(
        root=bytes_to_hex(result.output.root),
        leaf=bytes_to_hex(result.output.leaf),
        is_valid=result.output.is_valid,
        public_values=bytes_to_hex(result.public_values),
        hash_count=result.report.hash_count,
    )


def run_server(host: str = "127.0.0.1", port: int = 8000, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        dev: Enable development mode with auto-reload
    """
    logger.info(f"Starting Merkle Inclusion API server on {host}:{port}")
    uvicorn.run(
        "merkle_inclusion.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info"
    )


if __name__ == "__main__":
    run_server(dev=True)

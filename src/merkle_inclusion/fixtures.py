"""
On-chain Verifier Fixtures

Writes the JSON fixture that Solidity verifier tests load: the committed
root, leaf and validity flag, the program verifying key, the raw public
values and the proof bytes.
"""

import logging
import os
from typing import Optional

from .api.prover_client import ProofSystem, ProofWithPublicValues
from .config import load_settings
from .models import MerkleProofFixture
from .utils import bytes_to_hex

logger = logging.getLogger(__name__)


def build_proof_fixture(proof: ProofWithPublicValues, vkey: str) -> MerkleProofFixture:
    """
    Build the fixture for a proof.

    Args:
        proof: Proof and public values returned by the prover service
        vkey: Verifying key of the program (bytes32 hex)

    Returns:
        The populated fixture model
    """
    output = proof.output()
    return MerkleProofFixture(
        root=bytes_to_hex(output.root),
        leaf=bytes_to_hex(output.leaf),
        is_valid=output.is_valid,
        vkey=vkey,
        public_values=bytes_to_hex(proof.public_values),
        proof=bytes_to_hex(proof.proof),
    )


def fixture_path(system: ProofSystem, fixture_dir: str) -> str:
    return os.path.join(fixture_dir, f"{ProofSystem(system).value}-fixture.json")


def create_proof_fixture(
    proof: ProofWithPublicValues,
    vkey: str,
    system: ProofSystem,
    fixture_dir: Optional[str] = None,
) -> MerkleProofFixture:
    """
    Build a fixture and save it as ``<system>-fixture.json``.

    Args:
        proof: Proof and public values returned by the prover service
        vkey: Verifying key of the program
        system: Proof system the proof was generated with
        fixture_dir: Output directory; MERKLE_FIXTURE_DIR when omitted

    Returns:
        The fixture that was written
    """
    fixture_dir = fixture_dir or load_settings().fixture_dir
    fixture = build_proof_fixture(proof, vkey)

    os.makedirs(fixture_dir, exist_ok=True)
    path = fixture_path(system, fixture_dir)
    with open(path, "w") as f:
        f.write(fixture.to_json())

    logger.info(f"Wrote {ProofSystem(system).value} fixture to {path}")
    return fixture

"""
Merkle Inclusion - Host workflow

This module prepares the inputs of the inclusion check guest program and runs
it in-process. The CLI, the REST API and the prover integration all go through
these functions.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .merkle import (
    CountingHasher,
    Hasher,
    MerkleTree,
    encode_proof,
    generate_proof,
    leaf_for_index,
)
from .program import InputChannel, ProgramOutput, OutputChannel, run_program, write_program_inputs

logger = logging.getLogger(__name__)


@dataclass
class ProgramInputs:
    """Container for everything written to the guest program's input channel."""
    root: bytes
    leaf: bytes
    proof: List[bytes]
    proof_bytes: bytes
    leaf_index: int
    total_leaves: int
    stdin: InputChannel

    def metadata(self) -> Dict[str, Any]:
        return {
            "total_leaves": self.total_leaves,
            "leaf_index": self.leaf_index,
            "proof_length": len(self.proof),
            "root": f"0x{self.root.hex()}",
            "leaf": f"0x{self.leaf.hex()}",
        }


@dataclass
class ExecutionReport:
    """Cost of one in-process run; hash invocations stand in for cycles."""
    hash_count: int
    input_bytes: int


@dataclass
class ExecutionResult:
    """Public values and report of an in-process run."""
    public_values: bytes
    output: ProgramOutput
    report: ExecutionReport


def generate_leaves(total_leaves: int, hasher: Optional[Hasher] = None) -> List[bytes]:
    """
    Generate the committed leaf set.

    Leaf ``i`` is the hash of ``i`` encoded as an 8-byte little-endian word.
    """
    if total_leaves < 0:
        raise ValueError("total_leaves must be non-negative")
    return [leaf_for_index(i, hasher) for i in range(total_leaves)]


def prepare_program_inputs(
    total_leaves: int,
    leaf_index: Optional[int] = None,
    seed: Optional[int] = None,
    hasher: Optional[Hasher] = None,
) -> ProgramInputs:
    """
    Build the tree over generated leaves and write a proof for one of them.

    Args:
        total_leaves: Number of leaves to commit to
        leaf_index: Leaf to prove; picked at random when omitted
        seed: Seed for the random pick, for reproducible runs

    Returns:
        ProgramInputs with the input channel already written

    Raises:
        ValueError: If total_leaves is not positive
        IndexOutOfRangeError: If leaf_index is outside the tree
    """
    if total_leaves <= 0:
        raise ValueError(f"total_leaves must be positive, got {total_leaves}")

    leaves = generate_leaves(total_leaves, hasher)
    tree = MerkleTree.from_leaves(leaves, hasher)
    root = tree.root()

    if leaf_index is None:
        leaf_index = random.Random(seed).randrange(total_leaves)
        logger.info(f"Selected random leaf index {leaf_index}")

    proof = generate_proof(tree, leaf_index)
    proof_bytes = encode_proof(proof)
    leaf = leaves[leaf_index]

    stdin = write_program_inputs(
        InputChannel(), root, leaf, proof_bytes, leaf_index, total_leaves
    )

    return ProgramInputs(
        root=root,
        leaf=leaf,
        proof=proof,
        proof_bytes=proof_bytes,
        leaf_index=leaf_index,
        total_leaves=total_leaves,
        stdin=stdin,
    )


def execute_program(stdin: InputChannel, hasher: Optional[Hasher] = None) -> ExecutionResult:
    """
    Run the guest program in-process on a copy of `stdin`.

    Args:
        stdin: Input channel as produced by prepare_program_inputs

    Returns:
        ExecutionResult with the committed public values and a report
    """
    counting = CountingHasher(hasher)
    stdout = OutputChannel()
    raw = stdin.to_bytes()

    output = run_program(InputChannel.from_bytes(raw), stdout, counting)

    return ExecutionResult(
        public_values=stdout.as_slice(),
        output=output,
        report=ExecutionReport(hash_count=counting.count, input_bytes=len(raw)),
    )

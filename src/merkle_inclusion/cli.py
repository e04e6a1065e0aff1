#!/usr/bin/env python3
"""
Merkle Inclusion CLI

Command-line interface for running the inclusion check program locally,
proving its execution with the external prover service, and emitting
fixtures for on-chain verification.
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .api.prover_client import ProofSystem, ProverAPIError, ProverClient
from .config import load_settings
from .constants import MAX_WORD
from .fixtures import create_proof_fixture
from .main import ExecutionResult, ProgramInputs, execute_program, prepare_program_inputs
from .merkle import MerkleProofError, decode_proof
from .program import InputChannel, write_program_inputs
from .utils import bytes_to_hex, hex_to_bytes
from .visualize import print_proof_path

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _default_total_leaves() -> int:
    return load_settings().total_leaves


def _prepare(total_leaves: int, leaf_index: Optional[int], seed: Optional[int]) -> ProgramInputs:
    with console.status(f"[cyan]Building Merkle tree over {total_leaves} leaves...[/cyan]"):
        inputs = prepare_program_inputs(total_leaves, leaf_index=leaf_index, seed=seed)
    console.print(f"Total Leaves: {total_leaves}")
    return inputs


def print_execution_result(result: ExecutionResult, inputs: Optional[ProgramInputs], format_output: str = "table"):
    """Print an execution result in table or JSON form."""
    output = result.output
    if format_output == "json":
        payload = {
            "root": bytes_to_hex(output.root),
            "leaf": bytes_to_hex(output.leaf),
            "is_valid": output.is_valid,
            "public_values": bytes_to_hex(result.public_values),
            "hash_count": result.report.hash_count,
        }
        if inputs is not None:
            payload["metadata"] = inputs.metadata()
        console.print_json(json.dumps(payload, indent=2))
        return

    table = Table(title="Inclusion Check Results")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Merkle Root", bytes_to_hex(output.root))
    table.add_row("Leaf", bytes_to_hex(output.leaf))
    table.add_row("Is Valid", str(output.is_valid))
    if inputs is not None:
        table.add_row("Leaf Index", str(inputs.leaf_index))
        table.add_row("Proof Steps", str(len(inputs.proof)))
    table.add_row("Hash Operations", str(result.report.hash_count))
    table.add_row("Input Bytes", str(result.report.input_bytes))

    console.print(table)


total_leaves_option = click.option(
    "--total-leaves",
    type=click.IntRange(min=1),
    default=_default_total_leaves,
    help="Number of generated leaves to commit to (MERKLE_TOTAL_LEAVES)",
)
leaf_index_option = click.option(
    "--leaf-index", type=click.IntRange(min=0), help="Leaf to prove (random if omitted)"
)
seed_option = click.option("--seed", type=int, help="Seed for the random leaf selection")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    Merkle Inclusion CLI - prove that a leaf belongs to a committed Merkle tree.

    Leaves are generated as sha256(i as 8-byte little-endian) for every index
    below --total-leaves. The inclusion check program either runs locally
    (execute) or is proven by the external prover service (prove, evm).
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@total_leaves_option
@leaf_index_option
@seed_option
@click.option(
    "--format",
    "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def execute(total_leaves: int, leaf_index: Optional[int], seed: Optional[int], format_output: str):
    """Run the inclusion check program locally without generating a proof."""
    try:
        inputs = _prepare(total_leaves, leaf_index, seed)
        result = execute_program(inputs.stdin)
        console.print("[green]Program executed successfully.[/green]")
        print_execution_result(result, inputs, format_output)
    except (MerkleProofError, ValueError) as e:
        logger.error(f"Error executing inclusion check: {e}")
        raise click.ClickException(str(e))


@cli.command()
@total_leaves_option
@leaf_index_option
@seed_option
@click.option("--prover-url", envvar="PROVER_RPC_URL", help="Prover service URL")
def prove(total_leaves: int, leaf_index: Optional[int], seed: Optional[int], prover_url: Optional[str]):
    """Generate a core proof of the inclusion check and verify it."""
    try:
        inputs = _prepare(total_leaves, leaf_index, seed)
        client = ProverClient(base_url=prover_url)

        keys = client.setup()
        with console.status("[cyan]Generating proof...[/cyan]"):
            proof = client.prove(keys, inputs.stdin, ProofSystem.CORE)
        console.print("[green]Successfully generated proof![/green]")

        if not client.verify(proof, keys.vkey):
            raise click.ClickException("Prover service rejected the generated proof")
        console.print("[green]Successfully verified proof![/green]")

        output = proof.output()
        console.print(f"Merkle Root: {bytes_to_hex(output.root)}")
        console.print(f"Leaf: {bytes_to_hex(output.leaf)}")
        console.print(f"Is Valid: {output.is_valid}")
    except (MerkleProofError, ProverAPIError, ValueError) as e:
        logger.error(f"Error proving inclusion check: {e}")
        raise click.ClickException(str(e))


@cli.command()
@total_leaves_option
@leaf_index_option
@seed_option
@click.option(
    "--system",
    type=click.Choice([ProofSystem.GROTH16.value, ProofSystem.PLONK.value]),
    default=ProofSystem.GROTH16.value,
    help="Proof system for the on-chain verifiable proof",
)
@click.option("--fixture-dir", envvar="MERKLE_FIXTURE_DIR", help="Directory to write the fixture to")
@click.option("--prover-url", envvar="PROVER_RPC_URL", help="Prover service URL")
def evm(
    total_leaves: int,
    leaf_index: Optional[int],
    seed: Optional[int],
    system: str,
    fixture_dir: Optional[str],
    prover_url: Optional[str],
):
    """Generate an EVM-verifiable proof and write its fixture."""
    try:
        proof_system = ProofSystem(system)
        inputs = _prepare(total_leaves, leaf_index, seed)
        console.print(f"Proof System: {proof_system.value}")

        client = ProverClient(base_url=prover_url)
        keys = client.setup()
        with console.status(f"[cyan]Generating {proof_system.value} proof...[/cyan]"):
            proof = client.prove(keys, inputs.stdin, proof_system)

        fixture = create_proof_fixture(proof, keys.vkey, proof_system, fixture_dir)

        table = Table(title=f"{proof_system.value.title()} Fixture")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Merkle Root", fixture.root)
        table.add_row("Leaf", fixture.leaf)
        table.add_row("Is Valid", str(fixture.is_valid))
        table.add_row("Verification Key", fixture.vkey)
        table.add_row("Public Values", fixture.public_values)
        table.add_row("Proof Bytes", f"{len(proof.proof)} bytes")
        console.print(table)
    except (MerkleProofError, ProverAPIError, ValueError) as e:
        logger.error(f"Error generating EVM proof: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.argument("root")
@click.argument("leaf")
@click.argument("leaf_index", type=click.IntRange(min=0, max=MAX_WORD))
@click.argument("total_leaves", type=click.IntRange(min=0, max=MAX_WORD))
@click.option("--proof", "proof_hex", default="0x", help="Encoded proof (concatenated siblings) as hex")
@click.option(
    "--format",
    "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def verify(root: str, leaf: str, leaf_index: int, total_leaves: int, proof_hex: str, format_output: str):
    """
    Check a claimed leaf against a published root.

    ROOT and LEAF are 32-byte hex strings. A proof that does not rebuild ROOT
    prints "Is Valid: False"; a malformed proof is an error.
    """
    try:
        stdin = write_program_inputs(
            InputChannel(),
            hex_to_bytes(root, 32),
            hex_to_bytes(leaf, 32),
            hex_to_bytes(proof_hex),
            leaf_index,
            total_leaves,
        )
        result = execute_program(stdin)
        print_execution_result(result, None, format_output)
    except (MerkleProofError, ValueError) as e:
        logger.error(f"Error verifying inclusion proof: {e}")
        raise click.ClickException(str(e))


@cli.command()
@total_leaves_option
@leaf_index_option
@seed_option
def visualize(total_leaves: int, leaf_index: Optional[int], seed: Optional[int]):
    """Show the path of a proof from its leaf up to the root."""
    try:
        inputs = _prepare(total_leaves, leaf_index, seed)
        print_proof_path(
            inputs.leaf,
            inputs.leaf_index,
            inputs.total_leaves,
            decode_proof(inputs.proof_bytes),
            root=inputs.root,
            console=console,
        )
    except (MerkleProofError, ValueError) as e:
        logger.error(f"Error visualizing proof: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, type=int, help="Port to bind to")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: str, port: int, dev: bool):
    """Start the REST API server."""
    from .api.rest_api import run_server

    try:
        console.print(
            Panel(
                f"Starting Merkle Inclusion API Server\n\n"
                f"🚀 Server: http://{host}:{port}\n"
                f"📖 Docs: http://{host}:{port}/docs\n"
                f"❤️ Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    cli()

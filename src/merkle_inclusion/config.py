"""
Runtime Configuration

Settings are read from environment variables, with a local ``.env`` file
loaded first when present. Command-line options take precedence over the
values here.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .constants import DEFAULT_FIXTURE_DIR, DEFAULT_TOTAL_LEAVES

# Load environment variables
load_dotenv()


@dataclass
class Settings:
    """
    Project settings.

    Attributes:
        total_leaves: Default number of generated leaves
        fixture_dir: Directory fixtures are written to
        prover_network: 'mainnet' or 'testnet'
        prover_url: Base URL of the prover service, if configured
        prover_api_key: Bearer token for the prover service
        prover_timeout: HTTP timeout in seconds for prover calls
    """
    total_leaves: int = DEFAULT_TOTAL_LEAVES
    fixture_dir: str = DEFAULT_FIXTURE_DIR
    prover_network: str = "testnet"
    prover_url: Optional[str] = None
    prover_api_key: Optional[str] = None
    prover_timeout: float = 600.0


def load_settings() -> Settings:
    """Build ``Settings`` from the current environment."""
    network = os.getenv("PROVER_NETWORK", "testnet")
    if network.lower() == "mainnet":
        prover_url = os.getenv("PROVER_RPC_URL_MAINNET")
    else:
        prover_url = os.getenv("PROVER_RPC_URL_TESTNET")

    return Settings(
        total_leaves=int(os.getenv("MERKLE_TOTAL_LEAVES", DEFAULT_TOTAL_LEAVES)),
        fixture_dir=os.getenv("MERKLE_FIXTURE_DIR", DEFAULT_FIXTURE_DIR),
        prover_network=network,
        prover_url=prover_url,
        prover_api_key=os.getenv("PROVER_API_KEY"),
        prover_timeout=float(os.getenv("PROVER_TIMEOUT", "600")),
    )

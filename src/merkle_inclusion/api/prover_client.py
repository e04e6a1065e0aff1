"""
Prover Service Client

This module provides a client for the external succinct-proof service that
proves executions of the inclusion check program. The service receives the
program's input channel bytes and returns a proof together with the public
values the program committed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests

from ..config import Settings, load_settings
from ..constants import PROGRAM_ID
from ..program import InputChannel, ProgramOutput
from ..utils import bytes_to_hex, hex_to_bytes

logger = logging.getLogger(__name__)


class ProverAPIError(Exception):
    """Exception raised for prover service related errors."""
    pass


class ProofSystem(str, Enum):
    """Proof systems offered by the prover service."""
    CORE = "core"
    PLONK = "plonk"
    GROTH16 = "groth16"


@dataclass
class ProvingKeys:
    """Keys returned by program setup."""
    proving_key: str
    vkey: str


@dataclass
class ProofWithPublicValues:
    """A proof of one program execution and the values it committed."""
    proof: bytes
    public_values: bytes
    system: ProofSystem

    def output(self) -> ProgramOutput:
        return ProgramOutput.from_bytes(self.public_values)


class ProverClient:
    """
    Client for the succinct-proof service.

    Provides setup, proving and verification calls with error handling that
    turns every transport problem into ``ProverAPIError``.
    """

    def __init__(self, base_url: Optional[str] = None, settings: Optional[Settings] = None):
        """
        Initialize the prover client.

        Args:
            base_url: Base URL of the prover service. If None, uses the
                PROVER_RPC_URL_* variable for the configured network.
            settings: Settings to use instead of reading the environment
        """
        settings = settings or load_settings()

        self.base_url = base_url or settings.prover_url
        if not self.base_url:
            env_var = (
                "PROVER_RPC_URL_MAINNET"
                if settings.prover_network.lower() == "mainnet"
                else "PROVER_RPC_URL_TESTNET"
            )
            raise ValueError(f"{env_var} environment variable is not set")
        self.base_url = self.base_url.rstrip("/")
        self.timeout = settings.prover_timeout

        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })
        if settings.prover_api_key:
            self.session.headers['Authorization'] = f"Bearer {settings.prover_api_key}"

        logger.info(f"Initialized ProverClient with base_url: {self.base_url}")

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.ConnectionError as e:
            raise ProverAPIError(
                f"Failed to connect to prover service at {self.base_url}. "
                f"Check that the service is reachable or run with 'execute' "
                f"to check inclusion without a proof. Original error: {e}"
            )
        except requests.Timeout as e:
            raise ProverAPIError(
                f"Timeout after {self.timeout}s waiting for prover service at "
                f"{self.base_url}. Original error: {e}"
            )
        except requests.RequestException as e:
            raise ProverAPIError(f"Request to prover service failed: {e}")
        except ValueError as e:
            raise ProverAPIError(f"Prover service returned invalid JSON: {e}")

    def setup(self, program_id: str = PROGRAM_ID) -> ProvingKeys:
        """
        Register the program and fetch its proving and verifying keys.

        Raises:
            ProverAPIError: If the request fails or the response lacks keys
        """
        logger.info(f"Setting up program {program_id}")
        data = self._post(f"/v1/programs/{program_id}/setup", {})
        try:
            return ProvingKeys(proving_key=data["proving_key"], vkey=data["vkey"])
        except KeyError as e:
            raise ProverAPIError(f"Invalid setup response: missing {e}")

    def prove(
        self,
        keys: ProvingKeys,
        stdin: InputChannel,
        system: ProofSystem = ProofSystem.CORE,
    ) -> ProofWithPublicValues:
        """
        Request a proof of one execution over `stdin`.

        Args:
            keys: Keys from setup
            stdin: Written program input channel
            system: Proof system to wrap the proof in

        Returns:
            The proof and the committed public values

        Raises:
            ProverAPIError: If proving fails
        """
        system = ProofSystem(system)
        logger.info(f"Requesting {system.value} proof ({len(stdin.to_bytes())} input bytes)")
        data = self._post("/v1/proofs", {
            "proving_key": keys.proving_key,
            "stdin": bytes_to_hex(stdin.to_bytes()),
            "system": system.value,
        })
        try:
            result = ProofWithPublicValues(
                proof=hex_to_bytes(data["proof"]),
                public_values=hex_to_bytes(data["public_values"]),
                system=system,
            )
        except (KeyError, ValueError) as e:
            raise ProverAPIError(f"Invalid proof response: {e}")

        logger.info(f"Received {system.value} proof of {len(result.proof)} bytes")
        return result

    def verify(self, proof: ProofWithPublicValues, vkey: str) -> bool:
        """
        Ask the service to check a proof against a verifying key.

        Raises:
            ProverAPIError: If the request fails
        """
        data = self._post("/v1/proofs/verify", {
            "proof": bytes_to_hex(proof.proof),
            "public_values": bytes_to_hex(proof.public_values),
            "system": proof.system.value,
            "vkey": vkey,
        })
        return bool(data.get("valid", False))

    def health_check(self) -> bool:
        """
        Check if the prover service is reachable.

        Returns:
            True if the service answers its health endpoint, False otherwise
        """
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=10)
            return response.status_code == 200
        except requests.RequestException:
            return False

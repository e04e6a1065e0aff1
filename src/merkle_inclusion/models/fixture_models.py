"""
Fixture Models

Pydantic model of the JSON fixture consumed by on-chain verifier tests. Keys
are serialized in camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field


class MerkleProofFixture(BaseModel):
    """
    A proof of one program execution, ready for on-chain verification.

    Attributes:
        root: Committed root as hex
        leaf: Committed leaf as hex
        is_valid: Committed validity flag
        vkey: Verifying key of the program
        public_values: All 65 committed bytes as hex
        proof: Proof bytes as hex
    """
    model_config = ConfigDict(populate_by_name=True)

    root: str
    leaf: str
    is_valid: bool = Field(..., alias="isValid")
    vkey: str
    public_values: str = Field(..., alias="publicValues")
    proof: str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

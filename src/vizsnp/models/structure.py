"""Pydantic models for PDBe and UniProt mapping responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StructureCandidate(BaseModel):
    """A PDB chain overlapping a UniProt accession (PDBe best_structures entry)."""

    model_config = ConfigDict(extra="ignore")

    pdb_id: str
    chain_id: str
    coverage: float | None = None
    resolution: float | None = None
    experimental_method: str | None = None
    start: int | None = None
    end: int | None = None
    unp_start: int | None = None
    unp_end: int | None = None

    @property
    def structure_key(self) -> str:
        return f"{self.pdb_id}_{self.chain_id}"


class ProteinIdMapping(BaseModel):
    """One ``from`` → ``to`` pair of a UniProt ID mapping job."""

    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")

    @field_validator("to_id", mode="before")
    @classmethod
    def extract_accession(cls, v: Any) -> Any:
        # UniProtKB targets return the whole entry instead of a bare accession
        if isinstance(v, dict):
            return v.get("primaryAccession", v.get("uniProtkbId"))
        return v

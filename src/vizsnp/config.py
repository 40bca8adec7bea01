"""Runtime settings for VizSNP.

Values come from keyword arguments, then ``VIZSNP_*`` environment variables
(a ``.env`` file is loaded first), then the defaults below.
"""

import os
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from vizsnp.errors import ConfigError

ENV_PREFIX = "VIZSNP_"

DEFAULT_BATCH_SIZE = 200
DEFAULT_LIMIT = 1000
DEFAULT_SPECIES = "human"

# Ensembl production names, including strain suffixes such as mus_musculus_c57bl6nj
SPECIES_PATTERN = r"^[a-z0-9_]+$"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    """Service endpoints and pipeline limits."""

    vep_url: str = Field("https://rest.ensembl.org", description="Ensembl REST base URL")
    pdbe_url: str = Field("https://www.ebi.ac.uk", description="PDBe API base URL")
    uniprot_url: str = Field("https://rest.uniprot.org", description="UniProt REST base URL")
    icn3d_url: str = Field(
        "https://www.ncbi.nlm.nih.gov/Structure/icn3d/full.html",
        description="iCn3D viewer page",
    )

    species: str = Field(DEFAULT_SPECIES, pattern=SPECIES_PATTERN)
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1, description="Variants per VEP request")
    limit: int = Field(DEFAULT_LIMIT, ge=1, description="Maximum variants read from the VCF")

    timeout: float = Field(30.0, gt=0, description="HTTP request timeout in seconds")
    max_retries: int = Field(3, ge=1, description="Attempts for transport-level failures")
    poll_interval: float = Field(1.0, gt=0, description="Seconds between ID mapping polls")
    poll_timeout: float = Field(300.0, gt=0, description="Upper bound for one ID mapping job")
    deadline: float | None = Field(None, gt=0, description="Upper bound for a whole run")
    high_impact_only: bool = Field(True, description="Keep only deleterious / probably damaging variants")

    log_level: str = Field("INFO", description="One of CRITICAL, ERROR, WARNING, INFO, DEBUG")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @classmethod
    def load(cls, **overrides: Any) -> "Settings":
        """Build settings, converting validation failures into ConfigError."""
        values = {k: v for k, v in overrides.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}")

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Load settings from the environment, with explicit overrides taking precedence."""
        # Look for .env from the working directory, not from the installed package
        load_dotenv(find_dotenv(usecwd=True))

        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.load(**values)

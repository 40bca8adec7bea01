"""PDBe best-structures client.

ARCHITECTURE:
    UniProt accessions → POST /pdbe/api/mappings/best_structures → StructureCandidate lists

PDBe orders each list by coverage of the protein and then by resolution;
that order is kept as-is and index 0 is treated as the best structure.
"""

import logging

from pydantic import ValidationError

from vizsnp.api.base import BaseAPIClient
from vizsnp.errors import RemoteError
from vizsnp.models.structure import StructureCandidate

logger = logging.getLogger(__name__)


class PDBeAPIError(RemoteError):
    """Exception raised for PDBe API errors."""

    pass


class PDBeClient(BaseAPIClient):
    """Client for the PDBe SIFTS mapping API.

    API Documentation: https://www.ebi.ac.uk/pdbe/api/doc/sifts.html
    """

    BASE_URL = "https://www.ebi.ac.uk"
    SERVICE_NAME = "PDBe"
    error_class = PDBeAPIError

    def __init__(self, base_url: str = BASE_URL, **kwargs) -> None:
        super().__init__(base_url, **kwargs)

    async def get_best_structures(
        self, accessions: list[str]
    ) -> dict[str, list[StructureCandidate]]:
        """Get the ordered PDB structures covering each UniProt accession.

        Args:
            accessions: UniProt accessions without version suffix

        Returns:
            Mapping accession → candidates (best first). Accessions with no
            structure are absent.

        Raises:
            PDBeAPIError: On an error status (other than 404) or malformed body
        """
        if not accessions:
            return {}

        url = f"{self.base_url}/pdbe/api/mappings/best_structures"
        response = await self._send(
            "POST",
            url,
            content=",".join(accessions),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        # PDBe answers 404 when none of the accessions has a structure
        if response.status_code == 404:
            logger.debug(f"No PDB structures for {len(accessions)} accessions")
            return {}

        data = self._json(response)
        if not isinstance(data, dict):
            raise PDBeAPIError(f"Expected a mapping from PDBe, got {type(data).__name__}")

        structures: dict[str, list[StructureCandidate]] = {}
        try:
            for accession, candidates in data.items():
                if not candidates:
                    continue
                structures[accession] = [
                    StructureCandidate.model_validate(c) for c in candidates
                ]
        except (ValidationError, TypeError) as e:
            raise PDBeAPIError(f"Unexpected PDBe response shape: {e}")

        logger.debug(f"PDBe mapped {len(structures)}/{len(accessions)} accessions")
        return structures

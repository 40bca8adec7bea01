"""Ensembl VEP client for variant consequence predictions.

ARCHITECTURE:
    VEP query lines → POST /vep/{species}/region → ConsequencePrediction (one per line)

The region endpoint answers positionally: element i of the response belongs
to line i of the request. Nothing here reorders, batches or truncates;
batch sizing happens upstream.

Key Design:
- Async HTTP with connection pooling (httpx.AsyncClient)
- Structured parsing to typed ConsequencePrediction models
- Error statuses surface as VEPAPIError without retries
"""

import logging

from pydantic import ValidationError

from vizsnp.api.base import BaseAPIClient
from vizsnp.errors import RemoteError
from vizsnp.models.consequence import ConsequencePrediction

logger = logging.getLogger(__name__)


class VEPAPIError(RemoteError):
    """Exception raised for Ensembl VEP API errors."""

    pass


class VEPClient(BaseAPIClient):
    """Client for the Ensembl REST VEP region endpoint.

    API Documentation: https://rest.ensembl.org/documentation/info/vep_region_post
    """

    BASE_URL = "https://rest.ensembl.org"
    SERVICE_NAME = "Ensembl VEP"
    error_class = VEPAPIError

    HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}

    def __init__(self, base_url: str = BASE_URL, **kwargs) -> None:
        super().__init__(base_url, **kwargs)

    async def get_variant_consequences(
        self, variants: list[str], species: str = "human"
    ) -> list[ConsequencePrediction]:
        """Predict consequences for a list of VEP region query lines.

        Args:
            variants: Lines like "1 100 . A T,G ."
            species: Ensembl species name or alias

        Returns:
            One ConsequencePrediction per input line, in input order

        Raises:
            VEPAPIError: On an error status or a response that does not line up
        """
        if not variants:
            return []

        url = f"{self.base_url}/vep/{species}/region"
        response = await self._send(
            "POST",
            url,
            params={"uniprot": 1},
            json={"variants": variants},
            headers=self.HEADERS,
        )
        data = self._json(response)

        if not isinstance(data, list):
            raise VEPAPIError(f"Expected a list from VEP, got {type(data).__name__}")
        if len(data) != len(variants):
            raise VEPAPIError(
                f"VEP returned {len(data)} results for {len(variants)} variants"
            )

        try:
            predictions = [ConsequencePrediction.model_validate(item) for item in data]
        except ValidationError as e:
            raise VEPAPIError(f"Unexpected VEP response shape: {e}")

        logger.debug(f"VEP resolved {len(predictions)} variants for {species}")
        return predictions

"""UniProt ID mapping client.

ARCHITECTURE:
    IDs → POST /idmapping/run → jobId → poll GET /idmapping/status/{jobId} → ProteinIdMapping

Mapping is an asynchronous job on the UniProt side: submit once, then poll
at a fixed interval until the status carries a ``results`` field.

Key Design:
- Poll loop driven by tenacity (fixed wait, bounded by total delay)
- Exceeding the bound raises PipelineTimeoutError instead of waiting forever
- Cancelling the awaiting task stops the loop at the next await
"""

import logging
from typing import Any

from pydantic import ValidationError
from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_delay, wait_fixed

from vizsnp.api.base import BaseAPIClient
from vizsnp.errors import PipelineTimeoutError, RemoteError
from vizsnp.models.structure import ProteinIdMapping

logger = logging.getLogger(__name__)


class UniProtAPIError(RemoteError):
    """Exception raised for UniProt API errors."""

    pass


class UniProtClient(BaseAPIClient):
    """Client for the UniProt ID mapping service.

    API Documentation: https://www.uniprot.org/help/id_mapping
    """

    BASE_URL = "https://rest.uniprot.org"
    SERVICE_NAME = "UniProt"
    error_class = UniProtAPIError

    DEFAULT_POLL_INTERVAL = 1.0
    DEFAULT_POLL_TIMEOUT = 300.0
    FAILED_STATUSES = {"ERROR", "FAILED"}

    def __init__(
        self,
        base_url: str = BASE_URL,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
        **kwargs,
    ) -> None:
        super().__init__(base_url, **kwargs)
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout

    async def submit_job(self, ids: list[str], from_db: str, to_db: str) -> str:
        """Submit an ID mapping job and return its job ID."""
        response = await self._send(
            "POST",
            f"{self.base_url}/idmapping/run",
            data={"from": from_db, "to": to_db, "ids": ",".join(ids)},
        )
        data = self._json(response)

        job_id = data.get("jobId") if isinstance(data, dict) else None
        if not job_id:
            raise UniProtAPIError("No jobId returned from ID mapping submission")

        logger.debug(f"UniProt ID mapping job submitted: {job_id}")
        return job_id

    async def get_job_status(self, job_id: str) -> dict[str, Any]:
        """Fetch the status of a job; a finished job redirects to its results."""
        response = await self._send(
            "GET",
            f"{self.base_url}/idmapping/status/{job_id}",
            follow_redirects=True,
        )
        status = self._json(response)
        if not isinstance(status, dict):
            raise UniProtAPIError(f"Unexpected status for job {job_id}: {status!r}")

        job_status = status.get("jobStatus")
        if job_status in self.FAILED_STATUSES:
            raise UniProtAPIError(f"ID mapping job {job_id} failed with status: {job_status}")
        return status

    async def wait_for_results(
        self,
        job_id: str,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> list[Any]:
        """Poll a job until its ``results`` field is populated.

        Raises:
            PipelineTimeoutError: If the job is not done within ``timeout`` seconds
            UniProtAPIError: If the job fails or a poll request errors
        """
        interval = poll_interval if poll_interval is not None else self.poll_interval
        bound = timeout if timeout is not None else self.poll_timeout

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_result(lambda status: status.get("results") is None),
                wait=wait_fixed(interval),
                stop=stop_after_delay(bound),
            ):
                with attempt:
                    status = await self.get_job_status(job_id)
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(status)
        except RetryError:
            raise PipelineTimeoutError(f"ID mapping job {job_id} not finished after {bound}s")

        return status["results"]

    async def get_protein_ids(
        self,
        ids: list[str],
        from_db: str = "Ensembl",
        to_db: str = "UniProtKB-Swiss-Prot",
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> list[ProteinIdMapping]:
        """Map identifiers to protein accessions.

        Args:
            ids: Identifiers to map (e.g. Ensembl gene IDs)
            from_db: Source database name
            to_db: Target database name
            poll_interval: Seconds between status polls
            timeout: Upper bound in seconds for the whole job

        Returns:
            One mapping per resolved identifier, in service order
        """
        if not ids:
            return []

        job_id = await self.submit_job(ids, from_db, to_db)
        results = await self.wait_for_results(job_id, poll_interval=poll_interval, timeout=timeout)

        try:
            mappings = [ProteinIdMapping.model_validate(r) for r in results]
        except ValidationError as e:
            raise UniProtAPIError(f"Unexpected ID mapping results: {e}")

        logger.info(f"UniProt mapped {len(mappings)} of {len(ids)} identifiers ({from_db} → {to_db})")
        return mappings

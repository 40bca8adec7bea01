"""Pipeline driver wiring reader, batcher, VEP, PDBe and the assembler.

ARCHITECTURE:
    VCF + tabix → read_variants → batch → VEPClient → RecordAssembler (+ PDBeClient) → PipelineResult

Key Design:
- Async context manager for HTTP session lifecycle
- Batches run strictly one after another; output keeps file order
- A failed remote call costs one batch (recorded as BatchError), not the run
- File, format and configuration errors abort the run
- Optional deadline bounds the whole run
"""

import asyncio
import logging
import re
import threading
import time
from pathlib import Path

from vizsnp.api.pdbe import PDBeClient
from vizsnp.api.uniprot import UniProtClient
from vizsnp.api.vep import VEPClient
from vizsnp.assembler import RecordAssembler, TranscriptSelector, first_eligible
from vizsnp.config import SPECIES_PATTERN, Settings
from vizsnp.errors import ConfigError, PipelineTimeoutError, RemoteError
from vizsnp.models.annotated import BatchError, PipelineResult
from vizsnp.models.structure import ProteinIdMapping
from vizsnp.reader import read_variants
from vizsnp.utils.batching import batch
from vizsnp.utils.logging_config import RunEventLogger, get_run_logger

logger = logging.getLogger(__name__)


class VizSNPEngine:
    """
    Engine for the VCF annotation pipeline.

    Use with 'async with' so HTTP sessions are opened once per run and
    closed on every exit path.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        select_transcript: TranscriptSelector = first_eligible,
        enable_logging: bool = True,
    ):
        self.settings = settings or Settings()
        client_options = {"timeout": self.settings.timeout, "max_retries": self.settings.max_retries}
        self.vep_client = VEPClient(self.settings.vep_url, **client_options)
        self.pdbe_client = PDBeClient(self.settings.pdbe_url, **client_options)
        self.uniprot_client = UniProtClient(
            self.settings.uniprot_url,
            poll_interval=self.settings.poll_interval,
            poll_timeout=self.settings.poll_timeout,
            **client_options,
        )
        self.assembler = RecordAssembler(
            self.pdbe_client,
            select_transcript=select_transcript,
            high_impact_only=self.settings.high_impact_only,
            icn3d_url=self.settings.icn3d_url,
        )
        self.run_logger: RunEventLogger | None = get_run_logger() if enable_logging else None

    async def __aenter__(self):
        """Initialize HTTP client sessions for connection pooling."""
        await self.vep_client.__aenter__()
        await self.pdbe_client.__aenter__()
        await self.uniprot_client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close HTTP client sessions to prevent resource leaks."""
        await self.vep_client.__aexit__(exc_type, exc_val, exc_tb)
        await self.pdbe_client.__aexit__(exc_type, exc_val, exc_tb)
        await self.uniprot_client.__aexit__(exc_type, exc_val, exc_tb)

    async def run(
        self,
        vcf_path: str | Path,
        index_path: str | Path | None = None,
        limit: int | None = None,
        text_filter: str | None = None,
        species: str | None = None,
        deadline: float | None = None,
    ) -> PipelineResult:
        """Annotate the variants of an indexed VCF.

        Args:
            vcf_path: bgzip-compressed VCF
            index_path: Tabix index; defaults to ``<vcf_path>.tbi``
            limit: Maximum variants to read (settings default when None)
            text_filter: Keep only VCF lines containing this substring
            species: Ensembl species (settings default when None)
            deadline: Seconds allowed for the whole run (settings default when None)

        Raises:
            PipelineTimeoutError: If the deadline passes
            VariantFileError, FormatError, ConfigError: Abort the run
        """
        deadline = deadline if deadline is not None else self.settings.deadline
        coro = self._run(vcf_path, index_path, limit, text_filter, species)
        if deadline is None:
            return await coro

        try:
            return await asyncio.wait_for(coro, timeout=deadline)
        except asyncio.TimeoutError:
            raise PipelineTimeoutError(f"Pipeline did not finish within {deadline}s")

    async def _run(
        self,
        vcf_path: str | Path,
        index_path: str | Path | None,
        limit: int | None,
        text_filter: str | None,
        species: str | None,
    ) -> PipelineResult:
        species = species or self.settings.species
        if not re.fullmatch(SPECIES_PATTERN, species or ""):
            raise ConfigError(f"Invalid species: {species!r}")

        start = time.monotonic()
        # The worker thread cannot be cancelled; tell it to stop and close the file
        stop = threading.Event()
        try:
            variants = await asyncio.to_thread(
                read_variants,
                vcf_path,
                index_path,
                limit=limit if limit is not None else self.settings.limit,
                text_filter=text_filter,
                stop=stop,
            )
        except asyncio.CancelledError:
            stop.set()
            raise
        result = PipelineResult(variants_read=len(variants))

        for batch_index, chunk in enumerate(batch(variants, self.settings.batch_size)):
            result.batches += 1
            queries = [variant.to_query() for variant in chunk]
            if self.run_logger:
                self.run_logger.log_batch_start(batch_index, len(queries), species)

            try:
                predictions = await self.vep_client.get_variant_consequences(queries, species)
                assembled = await self.assembler.assemble(predictions)
            except RemoteError as e:
                if self.run_logger:
                    self.run_logger.log_batch_error(batch_index, len(queries), e)
                else:
                    logger.error(f"Batch {batch_index} failed: {e}")
                result.batch_errors.append(
                    BatchError(
                        batch_index=batch_index,
                        variant_count=len(queries),
                        error_type=type(e).__name__,
                        message=str(e),
                    )
                )
                continue

            result.records.extend(assembled.records)
            result.record_errors.extend(assembled.errors)
            if self.run_logger:
                self.run_logger.log_batch_done(
                    batch_index, len(queries), len(assembled.records), len(assembled.errors)
                )

        result.elapsed_seconds = time.monotonic() - start
        logger.info(
            f"Annotated {len(result.records)}/{result.variants_read} variants "
            f"in {result.elapsed_seconds:.1f}s"
        )
        return result

    async def map_protein_ids(
        self,
        ids: list[str],
        from_db: str = "Ensembl",
        to_db: str = "UniProtKB-Swiss-Prot",
        timeout: float | None = None,
    ) -> list[ProteinIdMapping]:
        """Map identifiers (e.g. Ensembl gene IDs) to UniProt accessions."""
        return await self.uniprot_client.get_protein_ids(ids, from_db=from_db, to_db=to_db, timeout=timeout)

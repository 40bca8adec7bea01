"""Indexed VCF reader.

ARCHITECTURE:
    VCF (bgzip) + tabix index → pysam.TabixFile → per-contig fetch → VariantRecord

Reference sequences are visited in index order and lines within each
sequence come back position-sorted, so the output order is the file order.

Key Design:
- Lazy generator; handles are released on exhaustion, early stop or error
- Stops fetching further contigs as soon as ``limit`` records were produced
- Optional literal substring filter on the raw line (e.g. a gene name)
- An optional stop event ends a read running in a worker thread early
"""

import logging
import threading
from pathlib import Path
from typing import Iterator

import pysam
from pydantic import ValidationError

from vizsnp.config import DEFAULT_LIMIT
from vizsnp.errors import ConfigError, FormatError, VariantFileError
from vizsnp.models.variant import VariantRecord

logger = logging.getLogger(__name__)

MISSING = "."
HEADER_LINE_PREFIX = "#CHROM"
REQUIRED_COLUMNS = 5


def parse_vcf_line(line: str) -> VariantRecord:
    """Parse one tab-separated VCF data line.

    Only the first five columns are used; INFO and sample columns are ignored.

    Raises:
        FormatError: If the line has too few columns or an invalid position
    """
    columns = line.rstrip("\r\n").split("\t")
    if len(columns) < REQUIRED_COLUMNS:
        raise FormatError(f"Expected at least {REQUIRED_COLUMNS} columns in VCF line: {line!r}")

    chrom, pos, variant_id, ref, alt = columns[:REQUIRED_COLUMNS]
    try:
        position = int(pos)
    except ValueError:
        raise FormatError(f"Invalid position {pos!r} in VCF line: {line!r}")

    # ID may hold several ';'-separated identifiers
    first_id = variant_id.split(";")[0] if variant_id and variant_id != MISSING else None
    alleles = tuple(alt.split(",")) if alt and alt != MISSING else ()

    try:
        return VariantRecord(chrom=chrom, pos=position, id=first_id, ref=ref, alt=alleles)
    except ValidationError as e:
        raise FormatError(f"Invalid VCF record {line!r}: {e}")


def _open(vcf_path: str | Path, index_path: str | Path | None) -> pysam.TabixFile:
    try:
        if index_path is None:
            return pysam.TabixFile(str(vcf_path))
        return pysam.TabixFile(str(vcf_path), index=str(index_path))
    except OSError as e:
        raise VariantFileError(f"Cannot open {vcf_path} (index: {index_path or 'default'}): {e}")


def _check_header(tbx: pysam.TabixFile, vcf_path: str | Path) -> list[str]:
    """Validate the header and return the reference sequences from the index."""
    try:
        header = list(tbx.header)
    except (OSError, UnicodeDecodeError) as e:
        raise FormatError(f"Cannot read VCF header of {vcf_path}: {e}")

    if not any(line.startswith(HEADER_LINE_PREFIX) for line in header):
        raise FormatError(f"VCF header of {vcf_path} has no {HEADER_LINE_PREFIX} line")

    contigs = list(tbx.contigs)
    if not contigs:
        raise FormatError(f"Index of {vcf_path} declares no reference sequences")
    return contigs


def iter_variants(
    vcf_path: str | Path,
    index_path: str | Path | None = None,
    limit: int = DEFAULT_LIMIT,
    text_filter: str | None = None,
    stop: threading.Event | None = None,
) -> Iterator[VariantRecord]:
    """Lazily yield variants from an indexed VCF in index order.

    Args:
        vcf_path: bgzip-compressed VCF
        index_path: Tabix index; defaults to ``<vcf_path>.tbi``
        limit: Maximum number of records to yield
        text_filter: Keep only lines containing this literal substring
        stop: When set, reading ends before the next line and the file is closed

    Raises:
        ConfigError: If limit is smaller than 1
        VariantFileError: If the file or index cannot be read
        FormatError: If the header or a data line is malformed
    """
    if limit < 1:
        raise ConfigError(f"Limit must be at least 1, got {limit}")

    tbx = _open(vcf_path, index_path)
    try:
        contigs = _check_header(tbx, vcf_path)
        logger.debug(f"Reading {vcf_path}: {len(contigs)} reference sequences")

        produced = 0
        for contig in contigs:
            try:
                for line in tbx.fetch(contig):
                    if stop is not None and stop.is_set():
                        logger.debug(f"Read of {vcf_path} stopped after {produced} variants")
                        return
                    if text_filter and text_filter not in line:
                        continue
                    yield parse_vcf_line(line)
                    produced += 1
                    if produced >= limit:
                        logger.debug(f"Reached limit of {limit} variants at {contig}")
                        return
            except OSError as e:
                raise VariantFileError(f"Failed reading {contig} from {vcf_path}: {e}")
    finally:
        tbx.close()


def read_variants(
    vcf_path: str | Path,
    index_path: str | Path | None = None,
    limit: int = DEFAULT_LIMIT,
    text_filter: str | None = None,
    stop: threading.Event | None = None,
) -> list[VariantRecord]:
    """Read at most ``limit`` variants from an indexed VCF (see ``iter_variants``)."""
    variants = list(
        iter_variants(vcf_path, index_path, limit=limit, text_filter=text_filter, stop=stop)
    )
    logger.info(f"Read {len(variants)} variants from {vcf_path}")
    return variants

"""Pytest configuration and fixtures."""

from datetime import date
from pathlib import Path

import httpx
import pysam
import pytest

VCF_HEADER = [
    "##fileformat=VCFv4.2",
    "##contig=<ID=chr1,length=248956422>",
    "##contig=<ID=chr2,length=242193529>",
    '##INFO=<ID=GENE,Number=1,Type=String,Description="Gene symbol">',
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
]

VCF_LINES = [
    "chr1\t100\t.\tA\tT,G\t50\tPASS\tGENE=BRCA2",
    "chr1\t200\trs123;rs456\tC\tT\t50\tPASS\tGENE=TP53",
    "chr1\t300\trs789\tG\tA\t50\tPASS\tGENE=BRCA2",
    "chr2\t50\t.\tT\tC\t50\tPASS\tGENE=EGFR",
    "chr2\t150\trs999\tA\tG\t50\tPASS\tGENE=BRCA2",
]


def write_indexed_vcf(directory: Path, lines: list[str], header: list[str] | None = None) -> Path:
    """Write a VCF, bgzip it and build its tabix index. Returns the .vcf.gz path."""
    path = directory / "variants.vcf"
    content = "\n".join((VCF_HEADER if header is None else header) + lines) + "\n"
    path.write_text(content)
    return Path(pysam.tabix_index(str(path), preset="vcf", force=True))


def http_response(status_code: int = 200, json=None, url: str = "https://example.org") -> httpx.Response:
    """Build a real httpx response bound to a request (needed by raise_for_status)."""
    return httpx.Response(status_code, json=json, request=httpx.Request("POST", url))


@pytest.fixture
def indexed_vcf(tmp_path):
    """Indexed VCF with three chr1 variants and two chr2 variants."""
    return write_indexed_vcf(tmp_path, VCF_LINES)


@pytest.fixture
def fixed_day():
    return date(2024, 3, 7)


@pytest.fixture
def vep_response():
    """VEP region response for three variants.

    A has no transcript consequences, B is deleterious with a SwissProt
    accession, C is the same change but tolerated and benign.
    """
    consequence_b = {
        "gene_id": "ENSG00000139618",
        "transcript_id": "ENST00000380152",
        "swissprot": ["P12345.2"],
        "amino_acids": "A/V",
        "protein_start": 42,
        "protein_end": 42,
        "sift_prediction": "deleterious",
        "sift_score": 0.01,
        "polyphen_prediction": "possibly_damaging",
        "polyphen_score": 0.6,
        "consequence_terms": ["missense_variant"],
        "impact": "MODERATE",
    }
    consequence_c = dict(
        consequence_b,
        sift_prediction="tolerated",
        sift_score=0.4,
        polyphen_prediction="benign",
        polyphen_score=0.01,
    )
    return [
        {"input": "1 100 . A T,G .", "most_severe_consequence": "intergenic_variant"},
        {"input": "1 200 rs123 C T .", "transcript_consequences": [consequence_b]},
        {"input": "1 300 rs789 G A .", "transcript_consequences": [consequence_c]},
    ]


@pytest.fixture
def best_structures_response():
    """PDBe best_structures response for P12345."""
    return {
        "P12345": [
            {
                "pdb_id": "1abc",
                "chain_id": "A",
                "coverage": 0.92,
                "resolution": 1.8,
                "experimental_method": "X-ray diffraction",
                "start": 1,
                "end": 300,
                "unp_start": 5,
                "unp_end": 304,
            },
            {"pdb_id": "2xyz", "chain_id": "B", "coverage": 0.92, "resolution": 1.8},
        ]
    }

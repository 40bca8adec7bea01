"""Variant data models."""

from pydantic import BaseModel, ConfigDict, Field

CONTIG_PREFIX = "chr"


class VariantRecord(BaseModel):
    """One data line of a VCF file."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "chrom": "chr7",
                "pos": 140453136,
                "id": "rs113488022",
                "ref": "A",
                "alt": ["T"],
            }
        },
    )

    chrom: str = Field(..., description="Reference sequence name (e.g., chr7)")
    pos: int = Field(..., ge=1, description="1-based position")
    id: str | None = Field(None, description="Variant identifier (first value of the ID column)")
    ref: str = Field(..., description="Reference allele")
    alt: tuple[str, ...] = Field(default_factory=tuple, description="Alternate alleles")

    def to_query(self) -> str:
        """Format as a VEP region query line: ``chrom pos id ref alt .``.

        >>> VariantRecord(chrom="chr1", pos=100, ref="A", alt=("T", "G")).to_query()
        '1 100 . A T,G .'
        """
        chrom = self.chrom
        if chrom.startswith(CONTIG_PREFIX):
            chrom = chrom[len(CONTIG_PREFIX):]
        alt = ",".join(self.alt) if self.alt else "."
        return " ".join([chrom, str(self.pos), self.id or ".", self.ref, alt, "."])

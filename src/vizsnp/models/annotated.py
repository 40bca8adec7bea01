"""Annotated output records and pipeline results."""

from pydantic import BaseModel, ConfigDict, Field

from vizsnp.models.consequence import TranscriptConsequence, is_high_impact
from vizsnp.models.structure import StructureCandidate


class AnnotatedVariant(BaseModel):
    """Final record linking a variant to its consequence, structure and viewer links."""

    model_config = ConfigDict(frozen=True)

    variant: str = Field(..., description="VEP query line the record was built from")
    gene_id: str | None = Field(None, description="Ensembl gene ID")
    swissprot_id: str = Field(..., description="UniProt accession without version suffix")
    pdb_id: str | None = Field(None, description="Best structure as {pdb_id}_{chain_id}")
    amino_acid_mutation: str = Field(..., description="Protein change, e.g. A42V")

    sift_prediction: str | None = None
    sift_score: float | None = None
    polyphen_prediction: str | None = None
    polyphen_score: float | None = None

    icn3d_pdb: str = Field("", description="iCn3D link for the experimental structure")
    icn3d_alphafold: str = Field("", description="iCn3D link for the AlphaFold model")

    pdb_structures: list[StructureCandidate] = Field(default_factory=list)
    consequence: TranscriptConsequence

    def is_high_impact(self) -> bool:
        return is_high_impact(self.sift_prediction, self.polyphen_prediction)


class RecordError(BaseModel):
    """A prediction that was skipped while assembling records."""

    variant: str
    error_type: str
    message: str


class BatchError(BaseModel):
    """A batch whose remote calls failed; its variants have no records."""

    batch_index: int
    variant_count: int
    error_type: str
    message: str


class PipelineResult(BaseModel):
    """Ordered records of one pipeline run plus everything that was skipped."""

    records: list[AnnotatedVariant] = Field(default_factory=list)
    record_errors: list[RecordError] = Field(default_factory=list)
    batch_errors: list[BatchError] = Field(default_factory=list)
    variants_read: int = 0
    batches: int = 0
    elapsed_seconds: float | None = None

    def has_errors(self) -> bool:
        return bool(self.record_errors or self.batch_errors)

    def to_report(self) -> str:
        """Simple report output."""
        report = f"\nRead {self.variants_read} variants in {self.batches} batches"
        if self.elapsed_seconds is not None:
            report += f" ({self.elapsed_seconds:.1f}s)"
        report += "\n"
        report += f"Annotated: {len(self.records)}"
        high_impact = sum(1 for r in self.records if r.is_high_impact())
        with_structure = sum(1 for r in self.records if r.pdb_id)
        report += f" | High impact: {high_impact} | With PDB structure: {with_structure}\n"

        for record in self.records:
            line = f"  {record.variant} → {record.swissprot_id} {record.amino_acid_mutation}"
            if record.pdb_id:
                line += f" [{record.pdb_id}]"
            predictions = []
            if record.sift_prediction:
                predictions.append(f"SIFT: {record.sift_prediction}")
            if record.polyphen_prediction:
                predictions.append(f"PolyPhen: {record.polyphen_prediction}")
            if predictions:
                line += f" ({', '.join(predictions)})"
            report += line + "\n"

        if self.batch_errors:
            report += f"\nFailed batches: {len(self.batch_errors)}\n"
            for error in self.batch_errors:
                report += f"  - Batch {error.batch_index} ({error.variant_count} variants): {error.message}\n"
        if self.record_errors:
            report += f"\nSkipped records: {len(self.record_errors)}\n"
            for error in self.record_errors[:5]:
                report += f"  - {error.variant}: {error.message}\n"
            if len(self.record_errors) > 5:
                report += f"  ... and {len(self.record_errors) - 5} more\n"

        return report

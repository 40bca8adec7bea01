"""Tests for data models."""

import pytest
from pydantic import ValidationError

from vizsnp.models import (
    AnnotatedVariant,
    BatchError,
    ConsequencePrediction,
    PipelineResult,
    ProteinIdMapping,
    RecordError,
    StructureCandidate,
    TranscriptConsequence,
    VariantRecord,
    is_high_impact,
)


class TestVariantRecord:
    """Tests for VariantRecord."""

    def test_to_query_strips_prefix_and_fills_missing_id(self):
        """Test the VEP query line for a multi-allelic variant without ID."""
        record = VariantRecord(chrom="chr1", pos=100, id=None, ref="A", alt=("T", "G"))
        assert record.to_query() == "1 100 . A T,G ."

    def test_to_query_with_id(self):
        """Test the VEP query line keeps the identifier."""
        record = VariantRecord(chrom="7", pos=140453136, id="rs113488022", ref="A", alt=("T",))
        assert record.to_query() == "7 140453136 rs113488022 A T ."

    def test_to_query_without_alt(self):
        """Test a record without alternate alleles uses a dot."""
        record = VariantRecord(chrom="chrX", pos=5, ref="G")
        assert record.to_query() == "X 5 . G . ."

    def test_frozen(self):
        """Test records are immutable."""
        record = VariantRecord(chrom="chr1", pos=1, ref="A", alt=("T",))
        with pytest.raises(ValidationError):
            record.pos = 2

    def test_position_must_be_positive(self):
        """Test positions are 1-based."""
        with pytest.raises(ValidationError):
            VariantRecord(chrom="chr1", pos=0, ref="A")


class TestTranscriptConsequence:
    """Tests for transcript eligibility."""

    def test_eligible_with_sift_only(self):
        consequence = TranscriptConsequence(swissprot=["P12345"], sift_prediction="tolerated")
        assert consequence.is_eligible()

    def test_eligible_with_polyphen_only(self):
        consequence = TranscriptConsequence(swissprot=["P12345"], polyphen_prediction="benign")
        assert consequence.is_eligible()

    def test_not_eligible_without_accession(self):
        consequence = TranscriptConsequence(sift_prediction="deleterious")
        assert not consequence.is_eligible()

    def test_not_eligible_without_prediction(self):
        consequence = TranscriptConsequence(swissprot=["P12345"])
        assert not consequence.is_eligible()

    def test_unknown_fields_ignored(self):
        """Test VEP fields we do not model are dropped."""
        prediction = ConsequencePrediction.model_validate(
            {
                "input": "1 100 . A T .",
                "assembly_name": "GRCh38",
                "transcript_consequences": [{"gene_id": "ENSG1", "cdna_start": 12}],
            }
        )
        assert prediction.transcript_consequences[0].gene_id == "ENSG1"

    def test_missing_transcript_consequences(self):
        prediction = ConsequencePrediction.model_validate({"input": "1 100 . A T ."})
        assert prediction.transcript_consequences == []


class TestHighImpact:
    """Tests for the high-impact predicate."""

    @pytest.mark.parametrize(
        "sift, polyphen, expected",
        [
            ("deleterious", None, True),
            (None, "probably_damaging", True),
            (None, "probably damaging", True),
            ("tolerated", "probably_damaging", True),
            ("deleterious_low_confidence", None, False),
            ("deleterious_low_confidence", "possibly_damaging", False),
            ("deleterious_low_confidence", "probably_damaging", True),
            ("tolerated", "benign", False),
            ("tolerated", "possibly_damaging", False),
            (None, None, False),
        ],
    )
    def test_is_high_impact(self, sift, polyphen, expected):
        assert is_high_impact(sift, polyphen) is expected


class TestStructureModels:
    """Tests for PDBe and UniProt models."""

    def test_structure_key(self):
        candidate = StructureCandidate(pdb_id="1abc", chain_id="B", coverage=0.5)
        assert candidate.structure_key == "1abc_B"

    def test_protein_id_mapping_plain(self):
        mapping = ProteinIdMapping.model_validate({"from": "ENSG00000141510", "to": "P04637"})
        assert mapping.from_id == "ENSG00000141510"
        assert mapping.to_id == "P04637"

    def test_protein_id_mapping_entry(self):
        """Test UniProtKB targets that return full entries."""
        mapping = ProteinIdMapping.model_validate(
            {"from": "ENSG00000141510", "to": {"primaryAccession": "P04637", "uniProtkbId": "P53_HUMAN"}}
        )
        assert mapping.to_id == "P04637"


class TestPipelineResult:
    """Tests for PipelineResult."""

    def _record(self, **kwargs):
        values = dict(
            variant="1 200 rs123 C T .",
            swissprot_id="P12345",
            amino_acid_mutation="A42V",
            sift_prediction="deleterious",
            consequence=TranscriptConsequence(swissprot=["P12345"], sift_prediction="deleterious"),
        )
        values.update(kwargs)
        return AnnotatedVariant(**values)

    def test_has_errors(self):
        result = PipelineResult(records=[self._record()])
        assert not result.has_errors()

        result.batch_errors.append(
            BatchError(batch_index=0, variant_count=3, error_type="VEPAPIError", message="boom")
        )
        assert result.has_errors()

    def test_to_report(self):
        result = PipelineResult(
            records=[self._record(pdb_id="1abc_A"), self._record(sift_prediction="tolerated")],
            record_errors=[RecordError(variant="1 5 . A T .", error_type="FormatError", message="bad")],
            variants_read=3,
            batches=1,
            elapsed_seconds=1.5,
        )
        report = result.to_report()

        assert "Read 3 variants in 1 batches (1.5s)" in report
        assert "Annotated: 2" in report
        assert "High impact: 1" in report
        assert "With PDB structure: 1" in report
        assert "P12345 A42V [1abc_A]" in report
        assert "Skipped records: 1" in report

    def test_record_high_impact(self):
        assert self._record().is_high_impact()
        assert not self._record(sift_prediction="tolerated").is_high_impact()

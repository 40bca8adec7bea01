"""Data models for VizSNP."""

from vizsnp.models.annotated import AnnotatedVariant, BatchError, PipelineResult, RecordError
from vizsnp.models.consequence import ConsequencePrediction, TranscriptConsequence, is_high_impact
from vizsnp.models.structure import ProteinIdMapping, StructureCandidate
from vizsnp.models.variant import VariantRecord

__all__ = [
    "VariantRecord",
    "TranscriptConsequence",
    "ConsequencePrediction",
    "is_high_impact",
    "StructureCandidate",
    "ProteinIdMapping",
    "AnnotatedVariant",
    "RecordError",
    "BatchError",
    "PipelineResult",
]

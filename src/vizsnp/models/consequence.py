"""Pydantic models for Ensembl VEP region responses."""

from pydantic import BaseModel, ConfigDict, Field

HIGH_IMPACT_SIFT = {"deleterious"}
HIGH_IMPACT_POLYPHEN = {"probably_damaging", "probably damaging"}


class TranscriptConsequence(BaseModel):
    """Predicted effect of a variant on one transcript."""

    model_config = ConfigDict(extra="ignore")

    gene_id: str | None = None
    gene_symbol: str | None = None
    transcript_id: str | None = None
    swissprot: list[str] = Field(default_factory=list)
    amino_acids: str | None = None
    protein_start: int | None = None
    protein_end: int | None = None
    consequence_terms: list[str] = Field(default_factory=list)
    impact: str | None = None

    sift_prediction: str | None = None
    sift_score: float | None = None
    polyphen_prediction: str | None = None
    polyphen_score: float | None = None

    def is_eligible(self) -> bool:
        """A consequence is usable when it names a protein and has a prediction."""
        has_prediction = bool(self.sift_prediction or self.polyphen_prediction)
        return bool(self.swissprot) and has_prediction


class ConsequencePrediction(BaseModel):
    """VEP result for one input variant line."""

    model_config = ConfigDict(extra="ignore")

    input: str
    id: str | None = None
    most_severe_consequence: str | None = None
    transcript_consequences: list[TranscriptConsequence] = Field(default_factory=list)


def is_high_impact(sift_prediction: str | None, polyphen_prediction: str | None) -> bool:
    """Deleterious by SIFT or probably damaging by PolyPhen."""
    if sift_prediction and sift_prediction.lower() in HIGH_IMPACT_SIFT:
        return True
    return bool(polyphen_prediction and polyphen_prediction.lower() in HIGH_IMPACT_POLYPHEN)

"""Record assembly: join VEP consequences with PDBe structures.

ARCHITECTURE:
    ConsequencePrediction[] → select transcript → accession + mutation
        → one PDBe lookup for all accessions → AnnotatedVariant[] (+ iCn3D links)

Key Design:
- Transcript selection is a plain callable (default: first eligible, in VEP order)
- Structures are looked up once per call for the distinct accessions
- Structure candidate 0 is always the selected structure
- By default only high-impact records are kept; with high_impact_only=False
  low-impact records are kept too, with empty viewer links
- A malformed record is skipped and reported as a RecordError; the rest of
  the batch is unaffected
"""

import logging
import re
from datetime import date
from typing import Callable

from pydantic import BaseModel, Field

from vizsnp import icn3d
from vizsnp.api.pdbe import PDBeClient
from vizsnp.errors import FormatError
from vizsnp.models.annotated import AnnotatedVariant, RecordError
from vizsnp.models.consequence import ConsequencePrediction, TranscriptConsequence, is_high_impact
from vizsnp.models.structure import StructureCandidate

logger = logging.getLogger(__name__)

TranscriptSelector = Callable[[list[TranscriptConsequence]], TranscriptConsequence | None]

_VERSION_SUFFIX = re.compile(r"\.\d+$")


def first_eligible(consequences: list[TranscriptConsequence]) -> TranscriptConsequence | None:
    """Pick the first consequence with a protein accession and a prediction."""
    return next((c for c in consequences if c.is_eligible()), None)


def normalize_accession(accession: str) -> str:
    """Strip the version suffix: P12345.2 → P12345."""
    return _VERSION_SUFFIX.sub("", accession.strip())


def parse_amino_acid_change(amino_acids: str | None) -> tuple[str, str]:
    """Split a VEP amino-acid change such as "A/V" into ("A", "V").

    Raises:
        FormatError: Unless the string splits into exactly two non-empty parts
    """
    parts = (amino_acids or "").split("/")
    if len(parts) != 2 or not all(parts):
        raise FormatError(f"Malformed amino acid change: {amino_acids!r}")
    return parts[0], parts[1]


class _Draft(BaseModel):
    """A record before structures are known."""

    prediction: ConsequencePrediction
    consequence: TranscriptConsequence
    accession: str
    position: int
    reference: str
    mutant: str

    @property
    def mutation(self) -> str:
        return f"{self.reference}{self.position}{self.mutant}"


class AssemblyResult(BaseModel):
    """Records built from one batch of predictions, in prediction order."""

    records: list[AnnotatedVariant] = Field(default_factory=list)
    errors: list[RecordError] = Field(default_factory=list)


class RecordAssembler:
    """Builds AnnotatedVariant records from VEP predictions."""

    def __init__(
        self,
        structure_client: PDBeClient,
        select_transcript: TranscriptSelector = first_eligible,
        high_impact_only: bool = True,
        icn3d_url: str = icn3d.ICN3D_URL,
        today: date | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            structure_client: Source of best PDB structures per accession
            select_transcript: Policy choosing one transcript consequence
            high_impact_only: Drop records that are neither deleterious nor probably damaging
            icn3d_url: iCn3D viewer page used for links
            today: Fixed date for links; defaults to the current day
        """
        self.structure_client = structure_client
        self.select_transcript = select_transcript
        self.high_impact_only = high_impact_only
        self.icn3d_url = icn3d_url
        self.today = today

    def _draft(self, prediction: ConsequencePrediction) -> _Draft | None:
        consequence = self.select_transcript(prediction.transcript_consequences)
        if consequence is None:
            return None

        reference, mutant = parse_amino_acid_change(consequence.amino_acids)
        if consequence.protein_start is None:
            raise FormatError(f"Missing protein position for {consequence.amino_acids!r}")

        return _Draft(
            prediction=prediction,
            consequence=consequence,
            accession=normalize_accession(consequence.swissprot[0]),
            position=consequence.protein_start,
            reference=reference,
            mutant=mutant,
        )

    def _build(
        self, draft: _Draft, candidates: list[StructureCandidate], today: date
    ) -> AnnotatedVariant:
        consequence = draft.consequence
        best = candidates[0] if candidates else None

        icn3d_pdb = ""
        icn3d_alphafold = ""
        if is_high_impact(consequence.sift_prediction, consequence.polyphen_prediction):
            icn3d_alphafold = icn3d.alphafold_link(
                draft.accession, draft.position, draft.mutant, today, self.icn3d_url
            )
            if best is not None:
                icn3d_pdb = icn3d.pdb_link(best, draft.position, draft.mutant, today, self.icn3d_url)

        return AnnotatedVariant(
            variant=draft.prediction.input,
            gene_id=consequence.gene_id,
            swissprot_id=draft.accession,
            pdb_id=best.structure_key if best else None,
            amino_acid_mutation=draft.mutation,
            sift_prediction=consequence.sift_prediction,
            sift_score=consequence.sift_score,
            polyphen_prediction=consequence.polyphen_prediction,
            polyphen_score=consequence.polyphen_score,
            icn3d_pdb=icn3d_pdb,
            icn3d_alphafold=icn3d_alphafold,
            pdb_structures=candidates,
            consequence=consequence,
        )

    async def assemble(self, predictions: list[ConsequencePrediction]) -> AssemblyResult:
        """Assemble records for a batch of predictions.

        Predictions without an eligible transcript are dropped silently, as
        are low-impact ones when ``high_impact_only`` is set.
        Predictions with malformed data are dropped and reported in
        ``AssemblyResult.errors``.

        Raises:
            PDBeAPIError: If the structure lookup fails
        """
        result = AssemblyResult()

        drafts: list[_Draft] = []
        for prediction in predictions:
            try:
                draft = self._draft(prediction)
            except FormatError as e:
                logger.warning(f"Skipping {prediction.input}: {e}")
                result.errors.append(
                    RecordError(variant=prediction.input, error_type=type(e).__name__, message=str(e))
                )
                continue
            if draft is None:
                continue
            if self.high_impact_only and not is_high_impact(
                draft.consequence.sift_prediction, draft.consequence.polyphen_prediction
            ):
                logger.debug(f"Dropping low-impact variant {prediction.input}")
                continue
            drafts.append(draft)

        if not drafts:
            return result

        accessions = list(dict.fromkeys(d.accession for d in drafts))
        structures = await self.structure_client.get_best_structures(accessions)

        today = self.today or date.today()
        for draft in drafts:
            result.records.append(self._build(draft, structures.get(draft.accession, []), today))

        return result

"""iCn3D viewer links highlighting a missense mutation.

A link opens a structure in iCn3D and runs a command script that adds one
annotation track per predictor (SIFT, PolyPhen) at the mutated residue and
models the mutant side chain with its interactions (``scap interaction``).

Two flavours exist: an experimental PDB chain (``pdbid``) and the AlphaFold
model of the UniProt accession (``afid``), which is always chain A.
"""

from datetime import date
from urllib.parse import quote

from vizsnp.models.structure import StructureCandidate

ICN3D_URL = "https://www.ncbi.nlm.nih.gov/Structure/icn3d/full.html"
ICN3D_VERSION = "3.12.0"
ALPHAFOLD_CHAIN = "A"

VIEWER_DIRECTIVES = [
    "view annotations",
    "set annotation cdd",
    "set view detailed view",
]
PREDICTOR_TRACKS = ["SIFT", "PolyPhen"]

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def format_date(day: date) -> str:
    """Date as year, month and day without zero padding (2024-03-07 → 202437)."""
    return f"{day.year}{day.month}{day.day}"


def encode_params(params: dict[str, str | list[str]]) -> str:
    """Encode query parameters; list values are comma-joined before encoding."""
    parts = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        encoded_key = quote(str(key), safe=_URI_COMPONENT_SAFE)
        encoded_value = quote(str(value), safe=_URI_COMPONENT_SAFE)
        parts.append(f"{encoded_key}={encoded_value}")
    return "&".join(parts)


def build_command(chain_key: str, position: int, mutant: str) -> str:
    """Semicolon-joined iCn3D script for one mutated residue."""
    commands = list(VIEWER_DIRECTIVES)
    for title in PREDICTOR_TRACKS:
        commands.append(f"add track | chainid {chain_key} | title {title} | text {position} {mutant}")
    commands.append(f"scap interaction {chain_key}_{position}_{mutant}")
    return "; ".join(commands)


def build_url(
    id_param: str,
    identifier: str,
    chain_key: str,
    position: int,
    mutant: str,
    today: date | None = None,
    base_url: str = ICN3D_URL,
) -> str:
    params = {
        id_param: identifier,
        "date": format_date(today or date.today()),
        "v": ICN3D_VERSION,
        "command": build_command(chain_key, position, mutant),
    }
    return f"{base_url}?{encode_params(params)}"


def pdb_link(
    structure: StructureCandidate,
    position: int,
    mutant: str,
    today: date | None = None,
    base_url: str = ICN3D_URL,
) -> str:
    """Link for an experimentally resolved PDB chain."""
    return build_url(
        "pdbid", structure.pdb_id, structure.structure_key, position, mutant, today, base_url
    )


def alphafold_link(
    accession: str,
    position: int,
    mutant: str,
    today: date | None = None,
    base_url: str = ICN3D_URL,
) -> str:
    """Link for the AlphaFold model of a UniProt accession."""
    chain_key = f"{accession}_{ALPHAFOLD_CHAIN}"
    return build_url("afid", accession, chain_key, position, mutant, today, base_url)

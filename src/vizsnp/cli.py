"""Command-line interface for VizSNP.

ARCHITECTURE:
    CLI Commands → VizSNPEngine → report on stdout / JSON output

Key Design:
- Typer framework for auto-help and type validation
- asyncio.run() bridges sync CLI → async engine
- Settings from VIZSNP_* environment variables, overridden by options
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from vizsnp.config import Settings
from vizsnp.engine import VizSNPEngine
from vizsnp.errors import VizSNPError
from vizsnp.utils.logging_config import configure_logging

app = typer.Typer(
    name="vizsnp",
    help="Annotate VCF variants with predicted consequences, PDB structures and iCn3D links",
    add_completion=False,
)


def _load_settings(**overrides) -> Settings:
    try:
        return Settings.from_env(**overrides)
    except VizSNPError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def annotate(
    vcf: Path = typer.Argument(..., help="bgzip-compressed, tabix-indexed VCF file"),
    index: Optional[Path] = typer.Option(None, "--index", "-i", help="Tabix index (default: <vcf>.tbi)"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum variants to read"),
    text_filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Keep VCF lines containing this text (e.g. a gene)"),
    species: Optional[str] = typer.Option(None, "--species", "-s", help="Ensembl species"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", "-b", help="Variants per VEP request"),
    deadline: Optional[float] = typer.Option(None, "--deadline", help="Seconds allowed for the whole run"),
    high_impact_only: bool = typer.Option(True, "--high-impact-only/--all", help="Keep only deleterious or probably damaging variants"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSON file"),
    log: bool = typer.Option(True, "--log/--no-log", help="Write batch events to ./logs"),
) -> None:
    """Annotate the variants of an indexed VCF file."""
    if not vcf.exists():
        print(f"Error: VCF file not found: {vcf}")
        raise typer.Exit(1)
    if index is not None and not index.exists():
        print(f"Error: Index file not found: {index}")
        raise typer.Exit(1)

    settings = _load_settings(
        limit=limit,
        species=species,
        batch_size=batch_size,
        deadline=deadline,
        high_impact_only=high_impact_only,
    )
    configure_logging(settings.log_level)

    async def run_annotation() -> None:
        print(f"\nAnnotating {vcf}...")
        async with VizSNPEngine(settings=settings, enable_logging=log) as engine:
            result = await engine.run(vcf, index_path=index, text_filter=text_filter)

        print(result.to_report())

        if output:
            output_data = [record.model_dump(mode="json") for record in result.records]
            with open(output, "w") as f:
                json.dump(output_data, f, indent=2)
            print(f"Saved {len(output_data)} records to {output}")

    try:
        asyncio.run(run_annotation())
    except VizSNPError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


@app.command("map-ids")
def map_ids(
    ids: List[str] = typer.Argument(..., help="Identifiers to map (e.g. Ensembl gene IDs)"),
    from_db: str = typer.Option("Ensembl", "--from", help="Source database"),
    to_db: str = typer.Option("UniProtKB-Swiss-Prot", "--to", help="Target database"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Seconds to wait for the mapping job"),
) -> None:
    """Map identifiers to UniProt accessions with the UniProt ID mapping service."""
    settings = _load_settings(poll_timeout=timeout)
    configure_logging(settings.log_level)

    async def run_mapping() -> None:
        async with VizSNPEngine(settings=settings, enable_logging=False) as engine:
            mappings = await engine.map_protein_ids(ids, from_db=from_db, to_db=to_db)

        for mapping in mappings:
            print(f"{mapping.from_id}\t{mapping.to_id}")
        print(f"\nMapped {len(mappings)} of {len(ids)} identifiers")

    try:
        asyncio.run(run_mapping())
    except VizSNPError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from vizsnp import __version__
    print(f"VizSNP version {__version__}")


if __name__ == "__main__":
    app()

"""Typer CLI for snpEff mutation extraction.

Usage:
    # Default FKS1 hotspots, gene CAB11_002014, drop synonymous variants
    snpeff-extract calls.ann.vcf.gz -o mutations.csv

    # Custom regions and genes
    snpeff-extract calls.ann.vcf.gz -o mutations.parquet \\
        --region erg11:1000-1200 --region erg11:1500 --gene CAB11_001234

    # Print to the console instead of writing a file
    snpeff-extract calls.ann.vcf
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from snpeff_extract import __version__
from snpeff_extract.config import DEFAULT_EXCLUDE_EFFECTS, Settings, build_regions
from snpeff_extract.exceptions import SnpeffExtractError
from snpeff_extract.logging_config import setup_logging

app = typer.Typer(
    name="snpeff-extract",
    help="Extract per-sample mutation calls from a snpEff-annotated VCF",
    add_completion=False,
)

console = Console()


class OutputFormat(str, Enum):
    """Output file format."""

    csv = "csv"
    tsv = "tsv"
    parquet = "parquet"


def print_results(results) -> None:
    """Render the result table on the console."""
    if results.empty:
        console.print("[yellow]No mutations found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    for column in results.columns:
        table.add_column(column)
    for row in results.itertuples(index=False):
        table.add_row(*(str(value) for value in row))
    console.print(table)


@app.command()
def extract(
    vcf: Annotated[
        Path,
        typer.Argument(
            help="snpEff annotated VCF (.vcf or .vcf.gz)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output", "-o",
            help="Output file (default: print table to console)",
            dir_okay=False,
        ),
    ] = None,
    region: Annotated[
        Optional[List[str]],
        typer.Option(
            "--region", "-r",
            help="Region as NAME:START-END or NAME:POS; repeat to add more (default: FKS1 hotspots)",
        ),
    ] = None,
    gene: Annotated[
        Optional[List[str]],
        typer.Option(
            "--gene", "-g",
            help="snpEff gene ID to keep; repeat to add more (default: CAB11_002014)",
        ),
    ] = None,
    exclude_effects: Annotated[
        str,
        typer.Option(
            "--exclude-effects", "-e",
            help="Regular expression of snpEff effects to drop",
        ),
    ] = DEFAULT_EXCLUDE_EFFECTS,
    output_format: Annotated[
        Optional[OutputFormat],
        typer.Option(
            "--output-format",
            help="Output format (default: inferred from --output suffix)",
        ),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--log-dir",
            help="Directory for detailed log files",
            file_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", "-v",
            help="Show detailed logging on the console",
        ),
    ] = False,
) -> None:
    """Extract mutation calls, one row per (sample, mutation).

    Sites are restricted to the given regions, annotations to the given genes
    with a protein-level change whose effect is not excluded, and samples to
    those whose called sequence matches the annotated allele.
    """
    from snpeff_extract.pipeline import run_extraction

    log_file = setup_logging(
        log_dir=str(log_dir) if log_dir else None,
        console_level=logging.INFO if verbose else logging.WARNING,
    )

    console.print(f"[bold]snpEff mutation extractor[/bold] v{__version__}\n", style="blue")
    if log_file:
        console.print(f"Log file:         {log_file}")

    try:
        overrides = {}
        if region:
            overrides["regions"] = build_regions(region)
        if gene:
            overrides["genes"] = gene
        settings = Settings(
            vcf_path=vcf,
            exclude_effects=exclude_effects,
            output_path=output,
            output_format=output_format.value if output_format else None,
            log_dir=log_dir,
            **overrides,
        )
    except (SnpeffExtractError, ValidationError) as e:
        console.print(f"[red]ERROR:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"VCF:              {settings.vcf_path}")
    console.print(f"Regions:          {', '.join(settings.regions)}")
    console.print(f"Genes:            {', '.join(settings.genes)}")
    console.print(f"Excluded effects: {settings.exclude_effects}\n")

    try:
        results = run_extraction(settings)
    except SnpeffExtractError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(code=1)

    if output is None:
        print_results(results)
    else:
        console.print(f"[green]Wrote {len(results)} rows to {output}[/green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

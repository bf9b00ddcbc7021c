"""
CLI Entry Point: Exposes the indelctx functionality via command line.
"""

from pathlib import Path

import typer
from rich.console import Console

from . import __version__
from .models.core import ClassifierConfig, OutputFormat
from .pipeline import Pipeline
from .utils.logging import setup_logging

app = typer.Typer(help="indelctx: indel context classification for mutational signatures")


@app.callback()
def main():
    """
    indelctx: indel context classification for mutational signatures
    """
    pass


def sample_name_from_path(path: Path) -> str:
    """Sample name is the VCF file name without its .vcf / .vcf.gz suffix."""
    name = path.name
    for suffix in (".vcf.gz", ".vcf.bgz", ".vcf", ".bcf"):
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return path.stem


@app.command()
def version():
    """Show the indelctx version."""
    typer.echo(f"py-indelctx {__version__}")


@app.command()
def classify(
    vcf_files: list[Path] = typer.Option(
        ..., "--vcf", "-v", help="Path to VCF file with indels. Can be specified multiple times."
    ),
    reference: Path = typer.Option(..., "--fasta", "-f", help="Path to reference FASTA file"),
    output_dir: Path = typer.Option(
        ..., "--output-dir", "-o", help="Directory to write output files"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TSV, "--format", help="Output format (tsv or vcf)"
    ),
    threads: int = typer.Option(1, "--threads", "-t", help="Number of samples processed in parallel"),
    progress: bool = typer.Option(False, "--progress", help="Show a progress bar"),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Enable verbose debug logging"
    ),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """
    Classify the indels of one or more VCF files into context categories.
    """
    setup_logging(verbose=verbose, log_file=str(log_file) if log_file else None)
    console = Console()

    # Map VCFs to sample names
    vcfs_dict: dict[str, Path] = {}
    for vcf_path in vcf_files:
        if not vcf_path.exists():
            console.print(f"[bold red]Error: VCF file not found: {vcf_path}[/bold red]")
            raise typer.Exit(code=1)
        sample_name = sample_name_from_path(vcf_path)
        if sample_name in vcfs_dict:
            console.print(
                f"[bold red]Error: Duplicate sample name '{sample_name}' "
                f"({vcfs_dict[sample_name]} and {vcf_path})[/bold red]"
            )
            raise typer.Exit(code=1)
        vcfs_dict[sample_name] = vcf_path

    try:
        config = ClassifierConfig(
            variant_files=vcfs_dict,
            reference_fasta=reference,
            output_dir=output_dir,
            output_format=output_format,
            threads=threads,
            show_progress=progress,
        )

        pipeline = Pipeline(config)
        pipeline.run()

    except Exception as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()

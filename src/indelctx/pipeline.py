"""
Pipeline Orchestrator: Manages the execution flow of indelctx.

This module handles:
1. Validating variant sets (chromosome naming, indel-only, bi-allelic).
2. Classifying each set through the four size-specific classifiers.
3. Merging and coordinate-sorting the classified variants.
4. Running the file-based workflow (VCF in, per-sample tables out).
"""

import logging
from collections.abc import Mapping, Sequence
from functools import partial
from pathlib import Path

from rich.console import Console

from .context import (
    classify_1bp_deletions,
    classify_1bp_insertions,
    classify_large_deletions,
    classify_large_insertions,
    partition_by_size,
)
from .io.input import VcfReader
from .io.output import OutputWriter, TsvWriter, VcfWriter
from .models.core import ClassifiedVariant, ClassifierConfig, OutputFormat, Variant
from .parallel import parallel_map
from .reference import FastaReference, ReferenceProvider
from .utils.logging import log_call, timed
from .validation import check_chromosomes, validate_variant_set

logger = logging.getLogger(__name__)

__all__ = ["Pipeline", "classify_variant_set", "get_indel_context", "sort_variants"]

VariantSets = Sequence[Variant] | Mapping[str, Sequence[Variant]]
ClassifiedSets = list[ClassifiedVariant] | dict[str, list[ClassifiedVariant]]


def sort_variants(
    variants: Sequence[ClassifiedVariant], reference: ReferenceProvider
) -> list[ClassifiedVariant]:
    """Sort by chromosome (in reference order), then position."""
    chrom_order = {chrom: i for i, chrom in enumerate(reference.references)}
    return sorted(
        variants,
        key=lambda v: (chrom_order.get(v.chrom, len(chrom_order)), v.chrom, v.pos, v.end, v.ref, v.alt),
    )


@log_call()
def classify_variant_set(
    variants: Sequence[Variant], reference: ReferenceProvider
) -> list[ClassifiedVariant]:
    """
    Classify one validated variant set.

    Args:
        variants: Bi-allelic indels.
        reference: Sequence provider for the variants' genome.

    Returns:
        One classified variant per input record, coordinate-sorted.
    """
    partition = partition_by_size(variants)
    classified = [
        *classify_1bp_deletions(partition.deletions_1bp, reference),
        *classify_1bp_insertions(partition.insertions_1bp, reference),
        *classify_large_deletions(partition.large_deletions, reference),
        *classify_large_insertions(partition.large_insertions, reference),
    ]
    return sort_variants(classified, reference)


def get_indel_context(
    variants: VariantSets,
    reference: ReferenceProvider,
    n_jobs: int = 1,
    show_progress: bool = False,
) -> ClassifiedSets:
    """
    Determine the indel context of every variant.

    Accepts a single variant set or a mapping of sample name to variant set
    and returns the same shape. All sets are validated before any sequence
    is fetched, so an invalid record in any set aborts the whole call.

    Args:
        variants: A sequence of variants, or a mapping of sample name to sequence.
        reference: Sequence provider; must be safe for concurrent reads when n_jobs > 1.
        n_jobs: Number of sets classified concurrently.
        show_progress: Show a progress bar over sets.

    Returns:
        Classified variants, sorted by coordinate within each set.

    Raises:
        ChromosomeMismatchError: A variant chromosome is unknown to the reference.
        MultiAllelicVariantError: A record has more than one alternate allele.
        UnsupportedVariantTypeError: A record is not an indel.
    """
    is_named = isinstance(variants, Mapping)
    named_sets = list(variants.items()) if is_named else [("", variants)]

    check_chromosomes((vs for _, vs in named_sets), reference)
    for name, variant_set in named_sets:
        try:
            validate_variant_set(variant_set)
        except ValueError:
            if is_named:
                logger.error("Validation failed for sample '%s'", name)
            raise

    with timed(f"Classifying {len(named_sets)} variant set(s)", logger):
        classified_sets = parallel_map(
            partial(classify_variant_set, reference=reference),
            [vs for _, vs in named_sets],
            n_jobs=n_jobs,
            description="Classifying indels",
            show_progress=show_progress,
        )

    for (name, _), classified in zip(named_sets, classified_sets):
        logger.info(
            "Classified %d indel(s)%s", len(classified), f" for sample '{name}'" if is_named else ""
        )

    if is_named:
        return {name: classified for (name, _), classified in zip(named_sets, classified_sets)}
    return classified_sets[0]


class Pipeline:
    def __init__(self, config: ClassifierConfig):
        self.config = config
        self.console = Console()

    def run(self) -> dict[str, Path]:
        """
        Execute the pipeline.

        Returns:
            Mapping of sample name to the written output file.
        """
        self.console.print("[bold blue]Starting indelctx pipeline[/bold blue]")
        self.console.print(f"Output directory: {self.config.output_dir}")

        # 1. Load Variants
        with self.console.status("[bold green]Loading variants...[/bold green]"):
            variant_sets = self._load_variants()

        n_total = sum(len(vs) for vs in variant_sets.values())
        self.console.print(
            f"Loaded [bold]{n_total}[/bold] variants from {len(variant_sets)} sample(s)."
        )

        # 2. Classify
        with FastaReference(self.config.reference_fasta) as reference:
            classified_sets = get_indel_context(
                variant_sets,
                reference,
                n_jobs=self.config.threads,
                show_progress=self.config.show_progress,
            )

        # 3. Write Output
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        outputs = {}
        for sample_name, classified in classified_sets.items():
            outputs[sample_name] = self._write_output(sample_name, classified)

        self.console.print("[bold green]Pipeline completed successfully.[/bold green]")
        return outputs

    def _load_variants(self) -> dict[str, list[Variant]]:
        """Load one variant set per sample."""
        variant_sets = {}
        for sample_name, path in self.config.variant_files.items():
            with VcfReader(path) as reader:
                variant_sets[sample_name] = list(reader)
            logger.debug("Loaded %d variant(s) for %s from %s", len(variant_sets[sample_name]), sample_name, path)
        return variant_sets

    def _write_output(self, sample_name: str, classified: list[ClassifiedVariant]) -> Path:
        """Write results to output file."""
        ext = self.config.output_format.value
        output_path = self.config.output_dir / f"{sample_name}.indel_context.{ext}"
        writer: OutputWriter
        if self.config.output_format == OutputFormat.VCF:
            writer = VcfWriter(output_path, sample_name=sample_name)
        else:
            writer = TsvWriter(output_path)

        with writer:
            for variant in classified:
                writer.write(variant)

        logger.info("Results for %s written to %s", sample_name, output_path)
        return output_path

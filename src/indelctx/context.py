"""
Indel context classification.

Each indel is routed by ``mut_size = len(alt) - len(ref)`` into one of four
sub-classifiers:

- 1bp deletions and insertions are labelled by their (strand-collapsed) base
  and the length of the homopolymer run they sit in.
- Larger insertions are labelled by size and the number of times the
  inserted unit repeats downstream.
- Larger deletions are labelled by size and the number of repeats of the
  deleted unit. Deletions outside a repeat are checked for microhomology
  with the bases on either side of the deleted segment.

All counts are left-anchored: only repeats contiguous with the variant count.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

from .core.kernel import FlankKernel
from .models.core import ClassifiedVariant, IndelClass, Variant
from .reference import ReferenceProvider
from .utils.logging import timed

logger = logging.getLogger(__name__)

__all__ = [
    "HOMOPOLYMER_DELETION_FLANK",
    "HOMOPOLYMER_INSERTION_FLANK",
    "REPEAT_FLANK_UNITS",
    "SizePartition",
    "canonical_base",
    "count_leading_repeats",
    "count_leading_matches",
    "partition_by_size",
    "classify_1bp_deletions",
    "classify_1bp_insertions",
    "classify_large_insertions",
    "classify_large_deletions",
]

# Flank lengths. The deleted base is itself one repeat instance, so deletions
# need one base less than insertions to reach the same maximum count.
HOMOPOLYMER_DELETION_FLANK = 19
HOMOPOLYMER_INSERTION_FLANK = 20
REPEAT_FLANK_UNITS = 20

_CANONICAL_BASES = {"A": "T", "G": "C"}


class SizePartition(NamedTuple):
    """Variants of one set split by structural class."""
    deletions_1bp: list[Variant]
    insertions_1bp: list[Variant]
    large_deletions: list[Variant]
    large_insertions: list[Variant]


def canonical_base(base: str) -> str:
    """
    Collapse a base onto its pyrimidine representative.

    >>> canonical_base("A")
    'T'
    >>> canonical_base("C")
    'C'
    """
    return _CANONICAL_BASES.get(base, base)


def count_leading_repeats(seq: str, unit: str) -> int:
    """
    Count how many times ``unit`` tiles ``seq`` from position 0.

    Tiling stops at the first mismatch or when fewer than ``len(unit)``
    bases remain. Occurrences not contiguous with the start are ignored.

    >>> count_leading_repeats("ACACAGAC", "AC")
    2
    >>> count_leading_repeats("AAA", "AA")
    1
    """
    if not unit:
        return 0
    n_repeats = 0
    size = len(unit)
    while seq.startswith(unit, n_repeats * size):
        n_repeats += 1
    return n_repeats


def count_leading_matches(query: str, target: str) -> int:
    """
    Count positions matching between ``query`` and ``target`` before the first mismatch.

    Positions beyond the end of the shorter string do not match.
    """
    n_matches = 0
    for q, t in zip(query, target):
        if q != t:
            break
        n_matches += 1
    return n_matches


def partition_by_size(variants: Sequence[Variant]) -> SizePartition:
    """Split validated indels into the four structural classes."""
    partition = SizePartition([], [], [], [])
    for variant in variants:
        mut_size = variant.mut_size
        if mut_size == -1:
            partition.deletions_1bp.append(variant)
        elif mut_size == 1:
            partition.insertions_1bp.append(variant)
        elif mut_size < -1:
            partition.large_deletions.append(variant)
        elif mut_size > 1:
            partition.large_insertions.append(variant)
        else:
            raise ValueError(f"Not an indel: {variant.chrom}:{variant.pos} {variant.ref}>{variant.alt}")
    return partition


def classify_1bp_deletions(
    variants: Sequence[Variant], reference: ReferenceProvider
) -> list[ClassifiedVariant]:
    """
    Classify 1bp deletions by homopolymer length.

    The deleted base counts as one instance of the run, so a deletion
    outside any homopolymer has length 1.
    """
    if not variants:
        return []

    with timed(f"Fetching flanks of {len(variants)} 1bp deletion(s)", logger):
        flanks = FlankKernel.fetch_downstream(
            variants, [HOMOPOLYMER_DELETION_FLANK] * len(variants), reference
        )

    results = []
    for variant, flank in zip(variants, flanks):
        base = variant.ref[1:]
        homopolymer_length = count_leading_repeats(flank, base) + 1
        results.append(
            ClassifiedVariant.from_variant(
                variant,
                indel_class=IndelClass.DELETION_1BP,
                category=f"{canonical_base(base)}_deletion",
                subfeature=homopolymer_length,
            )
        )

    logger.debug("Classified %d 1bp deletion(s)", len(results))
    return results


def classify_1bp_insertions(
    variants: Sequence[Variant], reference: ReferenceProvider
) -> list[ClassifiedVariant]:
    """Classify 1bp insertions by the homopolymer length of the inserted base in the reference."""
    if not variants:
        return []

    with timed(f"Fetching flanks of {len(variants)} 1bp insertion(s)", logger):
        flanks = FlankKernel.fetch_downstream(
            variants, [HOMOPOLYMER_INSERTION_FLANK] * len(variants), reference
        )

    results = []
    for variant, flank in zip(variants, flanks):
        base = variant.alt[1:]
        results.append(
            ClassifiedVariant.from_variant(
                variant,
                indel_class=IndelClass.INSERTION_1BP,
                category=f"{canonical_base(base)}_insertion",
                subfeature=count_leading_repeats(flank, base),
            )
        )

    logger.debug("Classified %d 1bp insertion(s)", len(results))
    return results


def classify_large_insertions(
    variants: Sequence[Variant], reference: ReferenceProvider
) -> list[ClassifiedVariant]:
    """Classify insertions larger than 1bp by the number of downstream repeats of the inserted unit."""
    if not variants:
        return []

    units = [v.alt[1:] for v in variants]
    with timed(f"Fetching flanks of {len(variants)} insertion(s) larger than 1bp", logger):
        flanks = FlankKernel.fetch_downstream(
            variants, [len(unit) * REPEAT_FLANK_UNITS for unit in units], reference
        )

    results = []
    for variant, unit, flank in zip(variants, units, flanks):
        results.append(
            ClassifiedVariant.from_variant(
                variant,
                indel_class=IndelClass.INSERTION,
                category=f"{variant.mut_size}bp_insertion",
                subfeature=count_leading_repeats(flank, unit),
            )
        )

    logger.debug("Classified %d insertion(s) larger than 1bp", len(results))
    return results


def classify_large_deletions(
    variants: Sequence[Variant], reference: ReferenceProvider
) -> list[ClassifiedVariant]:
    """
    Classify deletions larger than 1bp.

    Deletions in a repeat (the deleted unit recurs directly downstream) are
    labelled ``<N>bp_deletion`` with the repeat count, including the deleted
    copy. The remaining deletions are scanned for microhomology: the deleted
    bases are compared with the bases right after the deletion, and in
    reverse with the bases right before it. The longer of the two leading
    matches is the microhomology length.
    """
    if not variants:
        return []

    units = [v.ref[1:] for v in variants]
    with timed(f"Fetching flanks of {len(variants)} deletion(s) larger than 1bp", logger):
        flanks = FlankKernel.fetch_downstream(
            variants, [len(unit) * REPEAT_FLANK_UNITS for unit in units], reference
        )
    repeat_counts = [count_leading_repeats(flank, unit) + 1 for unit, flank in zip(units, flanks)]

    # There is always at least one repeat: the deleted bases themselves.
    candidates = [i for i, n_repeats in enumerate(repeat_counts) if n_repeats == 1]
    left_flanks = {}
    if candidates:
        with timed(f"Fetching upstream flanks of {len(candidates)} deletion(s)", logger):
            upstream = FlankKernel.fetch_upstream(
                [variants[i] for i in candidates], [len(units[i]) for i in candidates], reference
            )
        left_flanks = dict(zip(candidates, upstream))

    results = []
    n_microhomology = 0
    for i, variant in enumerate(variants):
        size = -variant.mut_size
        indel_class = IndelClass.DELETION
        category = f"{size}bp_deletion"
        subfeature = repeat_counts[i]

        if i in left_flanks:
            unit = units[i]
            right_mh = count_leading_matches(unit, flanks[i])
            left_mh = count_leading_matches(unit[::-1], left_flanks[i][::-1])
            microhomology_length = max(right_mh, left_mh)
            if microhomology_length > 0:
                indel_class = IndelClass.DELETION_MICROHOMOLOGY
                category = f"{size}bp_deletion_with_microhomology"
                subfeature = microhomology_length
                n_microhomology += 1

        results.append(
            ClassifiedVariant.from_variant(
                variant, indel_class=indel_class, category=category, subfeature=subfeature
            )
        )

    logger.debug(
        "Classified %d deletion(s) larger than 1bp (%d in repeats, %d with microhomology)",
        len(results),
        len(results) - len(candidates),
        n_microhomology,
    )
    return results

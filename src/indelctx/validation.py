"""Input validation for indel variant sets.

Validation is whole-set: a single unsupported record aborts the call before
any reference sequence is fetched.
"""

import logging
import re
from collections.abc import Iterable, Sequence

from .errors import ChromosomeMismatchError, MultiAllelicVariantError, UnsupportedVariantTypeError
from .models.core import Variant
from .reference import ReferenceProvider

logger = logging.getLogger(__name__)

__all__ = [
    "is_standard_chromosome",
    "normalize_chromosome_name_to_format",
    "detect_naming_style",
    "check_chromosomes",
    "validate_variant_set",
]

_STANDARD_CHROMOSOMES = {str(i) for i in range(1, 23)} | {"X", "Y", "M", "MT"}


def is_standard_chromosome(chrom: str) -> bool:
    """
    Check if chromosome is a standard one (1-22, X, Y, M, MT), with or without prefix.

    Alternative contigs (KI270728.1, etc.) are not standard.
    """
    if not chrom:
        return False
    base_chrom = re.sub(r"^chr", "", chrom, flags=re.IGNORECASE).upper()
    return base_chrom in _STANDARD_CHROMOSOMES


def normalize_chromosome_name_to_format(chrom: str, target_format: str) -> str:
    """
    Add or strip the "chr" prefix of a standard chromosome.

    Args:
        chrom: Original chromosome name
        target_format: "chr_prefix" or "no_prefix"

    Returns:
        Renamed chromosome; non-standard contigs are returned unchanged.
    """
    if not is_standard_chromosome(chrom):
        return chrom

    if target_format == "chr_prefix":
        return chrom if chrom.startswith("chr") else f"chr{chrom}"
    return chrom[3:] if chrom.startswith("chr") else chrom


def detect_naming_style(chromosomes: Iterable[str]) -> str:
    """
    Detect the chromosome naming style of a collection of names.

    Only standard chromosomes are considered.

    Returns:
        "chr_prefix", "no_prefix", "mixed" or "unknown" (no standard chromosomes)
    """
    styles = {
        "chr_prefix" if chrom.startswith("chr") else "no_prefix"
        for chrom in chromosomes
        if is_standard_chromosome(chrom)
    }
    if not styles:
        return "unknown"
    if len(styles) > 1:
        return "mixed"
    return styles.pop()


def check_chromosomes(
    variant_sets: Iterable[Sequence[Variant]], reference: ReferenceProvider
) -> None:
    """
    Check that every variant chromosome is known to the reference.

    Raises:
        ChromosomeMismatchError: If any chromosome is missing from the reference.
    """
    variant_chroms: set[str] = set()
    for variants in variant_sets:
        variant_chroms.update(v.chrom for v in variants)

    ref_chroms = set(reference.references)
    missing = variant_chroms - ref_chroms
    if not missing:
        logger.debug("Chromosome check passed for %d chromosome(s)", len(variant_chroms))
        return

    var_style = detect_naming_style(variant_chroms)
    ref_style = detect_naming_style(ref_chroms)
    logger.error(f"Chromosome naming mismatch: variants={var_style}, reference={ref_style}")

    message = (
        f"The chromosome names of the variants and the reference do not match. "
        f"Not found in reference: {sorted(missing)}. "
        f"Variant naming: {var_style}, reference naming: {ref_style}."
    )
    if ref_style in ("chr_prefix", "no_prefix"):
        renamed = {normalize_chromosome_name_to_format(c, ref_style) for c in missing}
        if renamed <= ref_chroms:
            action = "adding" if ref_style == "chr_prefix" else "removing"
            message += f" Try {action} the 'chr' prefix on the variant chromosomes."
    raise ChromosomeMismatchError(missing, message)


def validate_variant_set(variants: Sequence[Variant]) -> None:
    """
    Check that a variant set contains only bi-allelic indels.

    Raises:
        MultiAllelicVariantError: If any record has more than one alternate allele.
        UnsupportedVariantTypeError: If any record has REF and ALT of equal length.
    """
    multi_allelic = [v for v in variants if v.is_multi_allelic]
    if multi_allelic:
        raise MultiAllelicVariantError(multi_allelic)

    not_indels = [v for v in variants if len(v.ref) == len(v.alt)]
    if not_indels:
        raise UnsupportedVariantTypeError(not_indels)

"""Exceptions raised while validating and classifying indels."""

from collections.abc import Iterable

from .models.core import Variant

__all__ = [
    "IndelContextError",
    "UnsupportedVariantTypeError",
    "MultiAllelicVariantError",
    "ChromosomeMismatchError",
]


def _describe(variant: Variant) -> str:
    return f"{variant.chrom}:{variant.pos} {variant.ref}>{variant.alt}"


class IndelContextError(ValueError):
    """Base class for errors that abort classification of a variant set."""


class UnsupportedVariantTypeError(IndelContextError):
    """A record is not an indel (REF and ALT have the same length)."""

    def __init__(self, variants: Iterable[Variant]):
        self.variants = list(variants)
        shown = ", ".join(_describe(v) for v in self.variants[:5])
        more = f" and {len(self.variants) - 5} more" if len(self.variants) > 5 else ""
        super().__init__(
            f"Found {len(self.variants)} variant(s) that are not indels: {shown}{more}. "
            "Only insertions and deletions can be classified; remove SNVs and MNVs first."
        )


class MultiAllelicVariantError(IndelContextError):
    """A record carries more than one alternate allele."""

    def __init__(self, variants: Iterable[Variant]):
        self.variants = list(variants)
        shown = ", ".join(_describe(v) for v in self.variants[:5])
        more = f" and {len(self.variants) - 5} more" if len(self.variants) > 5 else ""
        super().__init__(
            f"Found {len(self.variants)} multi-allelic variant(s): {shown}{more}. "
            "Split multi-allelic records into one record per alternate allele first."
        )


class ChromosomeMismatchError(IndelContextError):
    """Variant chromosome names do not match the reference naming."""

    def __init__(self, chromosomes: Iterable[str], message: str):
        self.chromosomes = sorted(chromosomes)
        super().__init__(message)

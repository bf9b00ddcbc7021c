"""
indelctx - Indel context classification for mutational signature analysis.

Classifies insertions and deletions by the reference sequence around them:
homopolymer length for 1bp indels, repeat count for larger indels and
microhomology length for larger deletions outside repeats.

Example usage:
    $ indelctx classify -v sample.vcf.gz -f reference.fa -o output/

    >>> from indelctx import InMemoryReference, Variant, get_indel_context
    >>> ref = InMemoryReference({"chr1": "GGGGCAAATGGGG"})
    >>> get_indel_context([Variant(chrom="chr1", pos=5, ref="CA", alt="C")], ref)[0].category
    'T_deletion'
"""

__version__ = "0.3.0"

from .errors import (
    ChromosomeMismatchError,
    IndelContextError,
    MultiAllelicVariantError,
    UnsupportedVariantTypeError,
)
from .models.core import ClassifiedVariant, ClassifierConfig, IndelClass, OutputFormat, Variant
from .pipeline import Pipeline, get_indel_context
from .reference import FastaReference, InMemoryReference, ReferenceProvider

__all__ = [
    "__version__",
    "ChromosomeMismatchError",
    "ClassifiedVariant",
    "ClassifierConfig",
    "FastaReference",
    "InMemoryReference",
    "IndelClass",
    "IndelContextError",
    "MultiAllelicVariantError",
    "OutputFormat",
    "Pipeline",
    "ReferenceProvider",
    "UnsupportedVariantTypeError",
    "Variant",
    "get_indel_context",
]

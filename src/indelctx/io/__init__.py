"""
I/O module for indelctx.

Provides a VCF reader for input variants and writers for classified variants.
"""

from .input import VariantReader, VcfReader
from .output import OutputWriter, TsvWriter, VcfWriter

__all__ = [
    "OutputWriter",
    "TsvWriter",
    "VariantReader",
    "VcfReader",
    "VcfWriter",
]

"""
Data models for indelctx.

Provides Pydantic models for variants, classified variants and configuration.
"""

from .core import (
    ClassifiedVariant,
    ClassifierConfig,
    GenomicInterval,
    IndelClass,
    OutputFormat,
    Variant,
)

__all__ = [
    "ClassifiedVariant",
    "ClassifierConfig",
    "GenomicInterval",
    "IndelClass",
    "OutputFormat",
    "Variant",
]

"""
Core data models for indelctx.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


_SEQUENCE_ALLELE = re.compile(r"[ACGTN]+")


def is_sequence_allele(allele: str) -> bool:
    """
    Check that an allele is plain sequence.

    Symbolic alleles (<DEL>, <INS>), breakends and the spanning-deletion
    allele "*" are not.
    """
    return _SEQUENCE_ALLELE.fullmatch(allele.upper()) is not None


class IndelClass(str, Enum):
    """Structural class of an indel, decided by its size."""
    DELETION_1BP = "1bp_deletion"
    INSERTION_1BP = "1bp_insertion"
    DELETION = "Nbp_deletion"
    DELETION_MICROHOMOLOGY = "Nbp_deletion_with_microhomology"
    INSERTION = "Nbp_insertion"


class GenomicInterval(BaseModel):
    """
    Represents a 1-based, closed genomic interval [start, end].

    An interval with ``end == start - 1`` is empty. Flanks clipped entirely
    past a chromosome end collapse to such an interval.
    """
    model_config = ConfigDict(frozen=True)

    chrom: str
    start: int = Field(ge=1, description="1-based start position (inclusive)")
    end: int = Field(ge=0, description="1-based end position (inclusive)")

    @model_validator(mode="after")
    def validate_interval(self) -> "GenomicInterval":
        if self.end < self.start - 1:
            raise ValueError(f"End position ({self.end}) must be >= start position - 1 ({self.start - 1})")
        return self

    def __len__(self) -> int:
        return self.end - self.start + 1


class Variant(BaseModel):
    """
    A VCF-style indel record.

    ``pos`` is the 1-based position of the first REF base (the anchor).
    Several alternate alleles may be given comma-separated, as in a VCF ALT
    column; such records are multi-allelic and are rejected by validation.
    """
    model_config = ConfigDict(frozen=True)

    chrom: str = Field(min_length=1)
    pos: int = Field(ge=1, description="1-based position of the anchor base")
    ref: str = Field(min_length=1)
    alt: str = Field(min_length=1)

    # Original input metadata (optional)
    original_id: str | None = None

    @field_validator("ref", "alt")
    @classmethod
    def validate_allele(cls, v: str) -> str:
        v = v.upper()
        # ALT may list several alleles, comma-separated
        if not all(is_sequence_allele(allele) for allele in v.split(",")):
            raise ValueError(f"Allele must consist of A, C, G, T or N: {v!r}")
        return v

    @property
    def end(self) -> int:
        """Last reference base covered by the record."""
        return self.pos + len(self.ref) - 1

    @property
    def mut_size(self) -> int:
        """Length change caused by the variant; negative for deletions."""
        return len(self.alt) - len(self.ref)

    @property
    def is_multi_allelic(self) -> bool:
        return "," in self.alt

    @property
    def interval(self) -> GenomicInterval:
        return GenomicInterval(chrom=self.chrom, start=self.pos, end=self.end)


class ClassifiedVariant(Variant):
    """A variant annotated with its indel context."""
    indel_class: IndelClass
    category: str
    subfeature: int = Field(ge=0, description="Homopolymer length, repeat count or microhomology length")

    @classmethod
    def from_variant(
        cls, variant: Variant, indel_class: IndelClass, category: str, subfeature: int
    ) -> "ClassifiedVariant":
        return cls(
            **variant.model_dump(include=set(Variant.model_fields)),
            indel_class=indel_class,
            category=category,
            subfeature=subfeature,
        )


class OutputFormat(str, Enum):
    TSV = "tsv"
    VCF = "vcf"


class ClassifierConfig(BaseModel):
    """
    Global configuration for an indelctx run.
    """
    # Input
    variant_files: dict[str, Path]  # sample_name -> vcf_path
    reference_fasta: Path

    # Output
    output_dir: Path
    output_format: OutputFormat = OutputFormat.TSV

    # Performance
    threads: int = Field(default=1, ge=1)
    show_progress: bool = False

    @field_validator("reference_fasta")
    @classmethod
    def validate_file_exists(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"File not found: {v}")
        return v

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: Path) -> Path:
        if v.is_file():
            raise ValueError(f"Output path must be a directory, not a file: {v}")
        return v

    @model_validator(mode="after")
    def validate_variant_files(self) -> "ClassifierConfig":
        if not self.variant_files:
            raise ValueError("At least one variant file is required")
        for name, path in self.variant_files.items():
            if not path.exists():
                raise ValueError(f"Variant file for sample '{name}' not found: {path}")
        return self

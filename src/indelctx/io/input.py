"""
Input Adapters: Reading variants from VCF files.

Records are converted into ``Variant`` objects with their VCF (1-based)
position. Multi-allelic records keep all alternate alleles, comma-separated,
so that validation can reject them rather than silently splitting them.
Records with symbolic (<DEL>), breakend or spanning-deletion (*) alleles carry
no sequence to classify and are skipped with a warning.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pysam

from ..models.core import Variant, is_sequence_allele

logger = logging.getLogger(__name__)


class VariantReader:
    """Abstract base class for variant readers."""

    def __iter__(self) -> Iterator[Variant]:
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class VcfReader(VariantReader):
    """Reads variants from a VCF file (.vcf or .vcf.gz)."""

    def __init__(self, path: Path):
        self.path = path
        self._vcf = pysam.VariantFile(str(path))

    def __iter__(self) -> Iterator[Variant]:
        n_skipped = 0
        n_symbolic = 0
        for record in self._vcf:
            if not record.alts:
                n_skipped += 1
                continue
            if not all(is_sequence_allele(allele) for allele in (record.ref, *record.alts)):
                n_symbolic += 1
                continue

            # pysam record.pos is the 1-based VCF POS
            yield Variant(
                chrom=record.chrom,
                pos=record.pos,
                ref=record.ref,
                alt=",".join(record.alts),
                original_id=record.id,
            )

        if n_skipped:
            logger.warning("Skipped %d record(s) without ALT allele in %s", n_skipped, self.path)
        if n_symbolic:
            logger.warning(
                "Skipped %d record(s) with symbolic or spanning-deletion alleles in %s",
                n_symbolic,
                self.path,
            )

    def close(self):
        self._vcf.close()

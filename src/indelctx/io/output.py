"""
Output Writers: Formatting classified indels as TSV or VCF.
"""

import csv
from pathlib import Path

from ..models.core import ClassifiedVariant


class OutputWriter:
    """Abstract base class for output writers."""

    def write(self, variant: ClassifiedVariant):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class TsvWriter(OutputWriter):
    """Writes classified variants to a tab-separated table."""

    fieldnames = ["chrom", "pos", "ref", "alt", "id", "indel_class", "category", "subfeature"]

    def __init__(self, path: Path):
        self.path = path
        self.file = open(path, "w", newline="")
        self.writer = csv.DictWriter(self.file, fieldnames=self.fieldnames, delimiter="\t")
        self.writer.writeheader()

    def write(self, variant: ClassifiedVariant):
        self.writer.writerow(
            {
                "chrom": variant.chrom,
                "pos": variant.pos,
                "ref": variant.ref,
                "alt": variant.alt,
                "id": variant.original_id or ".",
                "indel_class": variant.indel_class.value,
                "category": variant.category,
                "subfeature": variant.subfeature,
            }
        )

    def close(self):
        self.file.close()


class VcfWriter(OutputWriter):
    """Writes classified variants to a sites-only VCF with the context in INFO."""

    def __init__(self, path: Path, sample_name: str = "SAMPLE"):
        self.path = path
        self.sample_name = sample_name
        self.file = open(path, "w")
        self._headers_written = False

    def _write_header(self):
        headers = [
            "##fileformat=VCFv4.2",
            "##source=indelctx",
            f"##sample={self.sample_name}",
            '##INFO=<ID=INDEL_CLASS,Number=1,Type=String,Description="Structural indel class">',
            '##INFO=<ID=CATEGORY,Number=1,Type=String,Description="Indel context category">',
            '##INFO=<ID=SUBFEATURE,Number=1,Type=Integer,Description="Repeat count or microhomology length">',
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
        ]
        self.file.write("\n".join(headers) + "\n")
        self._headers_written = True

    def write(self, variant: ClassifiedVariant):
        if not self._headers_written:
            self._write_header()

        info = (
            f"INDEL_CLASS={variant.indel_class.value};"
            f"CATEGORY={variant.category};"
            f"SUBFEATURE={variant.subfeature}"
        )
        row = [
            variant.chrom,
            str(variant.pos),
            variant.original_id or ".",
            variant.ref,
            variant.alt,
            ".",  # QUAL
            ".",  # FILTER
            info,
        ]
        self.file.write("\t".join(row) + "\n")

    def close(self):
        # An empty sample still gets a valid VCF
        if not self._headers_written:
            self._write_header()
        self.file.close()

"""Pytest configuration and fixtures."""

import sys
import tempfile
from collections.abc import Generator
from pathlib import Path

import pysam
import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from indelctx.reference import InMemoryReference  # noqa: E402

# Small genome used by FASTA-backed tests.
#   chr1: 1bp deletion of A at pos 6 in an A-run (CA>C at pos 5)
#   chr2: 3bp deletion of CGT at pos 6-8 followed by CGA (2bp microhomology)
TEST_GENOME = {
    "chr1": "GGGGCAAATGGGGGGGGGGGGGGGGGGGGG",
    "chr2": "GGGGACGTCGATTTTTTTTTTTTTTT",
}


def write_fasta(path: Path, sequences: dict[str, str]) -> Path:
    """Write and index a FASTA file."""
    with open(path, "w") as f:
        for chrom, seq in sequences.items():
            f.write(f">{chrom}\n{seq}\n")
    pysam.faidx(str(path))
    return path


def write_vcf(path: Path, records: list[tuple], contigs: dict[str, int]) -> Path:
    """Write a minimal VCF from (chrom, pos, ref, alt) tuples."""
    with open(path, "w") as f:
        f.write("##fileformat=VCFv4.2\n")
        for chrom, length in contigs.items():
            f.write(f"##contig=<ID={chrom},length={length}>\n")
        f.write("#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n")
        for chrom, pos, ref, alt in records:
            f.write(f"{chrom}\t{pos}\t.\t{ref}\t{alt}\t.\tPASS\t.\n")
    return path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_fasta(temp_dir: Path) -> Path:
    """Indexed FASTA of TEST_GENOME."""
    return write_fasta(temp_dir / "reference.fa", TEST_GENOME)


@pytest.fixture
def sample_vcf(temp_dir: Path) -> Path:
    """VCF with one indel per TEST_GENOME chromosome, deliberately unsorted."""
    return write_vcf(
        temp_dir / "tumor1.vcf",
        [("chr2", 5, "ACGT", "A"), ("chr1", 5, "CA", "C")],
        {chrom: len(seq) for chrom, seq in TEST_GENOME.items()},
    )


@pytest.fixture
def memory_reference() -> InMemoryReference:
    return InMemoryReference(TEST_GENOME)

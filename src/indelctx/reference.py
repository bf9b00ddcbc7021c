"""
Reference Sequence Providers.

A provider answers interval queries against a read-only reference genome.
Coordinates are 1-based and closed, matching VCF positions. Queries that run
past either end of a chromosome are clipped to the chromosome bounds.

Two implementations are provided:
- ``FastaReference``: an indexed FASTA file read through pysam.
- ``InMemoryReference``: a mapping of chromosome name to sequence.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path

import pysam

logger = logging.getLogger(__name__)

__all__ = ["ReferenceProvider", "FastaReference", "InMemoryReference"]


class ReferenceProvider(ABC):
    """Read-only interval access to a reference genome."""

    @property
    @abstractmethod
    def references(self) -> tuple[str, ...]:
        """Chromosome names in reference order."""

    @abstractmethod
    def chromosome_length(self, chrom: str) -> int:
        """Length of ``chrom``. Raises KeyError for unknown chromosomes."""

    @abstractmethod
    def _fetch(self, chrom: str, start: int, end: int) -> str:
        """Fetch an already-clipped, non-empty 1-based closed interval."""

    def get_sequence(self, chrom: str, start: int, end: int) -> str:
        """
        Get the upper-case sequence of ``chrom`` over [start, end] (1-based, inclusive).

        The interval is clipped to [1, chromosome_length]. An interval that is
        empty after clipping yields "".
        """
        length = self.chromosome_length(chrom)
        start = max(start, 1)
        end = min(end, length)
        if end < start:
            return ""
        return self._fetch(chrom, start, end).upper()

    def get_sequences(self, intervals: Iterable[tuple[str, int, int]]) -> list[str]:
        """Batched form of ``get_sequence`` for (chrom, start, end) triples."""
        return [self.get_sequence(chrom, start, end) for chrom, start, end in intervals]

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FastaReference(ReferenceProvider):
    """
    Reference backed by an indexed FASTA file.

    pysam file handles are not safe to share between threads, so each thread
    lazily opens its own handle. The index (``.fai``) is created if missing.
    """

    def __init__(self, fasta_path: str | Path):
        self.path = Path(fasta_path)
        if not self.path.exists():
            raise FileNotFoundError(f"Reference FASTA file not found: {self.path}")

        fai_path = Path(f"{self.path}.fai")
        if not fai_path.exists():
            logger.info("Indexing reference FASTA %s", self.path)
            pysam.faidx(str(self.path))

        self._local = threading.local()
        self._handles: list[pysam.FastaFile] = []
        self._lock = threading.Lock()

        fasta = self._handle()
        self._references = tuple(fasta.references)
        self._lengths = dict(zip(fasta.references, fasta.lengths))

    def _handle(self) -> pysam.FastaFile:
        fasta = getattr(self._local, "fasta", None)
        if fasta is None:
            fasta = pysam.FastaFile(str(self.path))
            self._local.fasta = fasta
            with self._lock:
                self._handles.append(fasta)
        return fasta

    @property
    def references(self) -> tuple[str, ...]:
        return self._references

    def chromosome_length(self, chrom: str) -> int:
        try:
            return self._lengths[chrom]
        except KeyError:
            raise KeyError(f"Chromosome '{chrom}' not found in {self.path}") from None

    def _fetch(self, chrom: str, start: int, end: int) -> str:
        # pysam is 0-based, half-open
        return self._handle().fetch(chrom, start - 1, end)

    def close(self) -> None:
        with self._lock:
            for fasta in self._handles:
                fasta.close()
            self._handles.clear()
        self._local = threading.local()


class InMemoryReference(ReferenceProvider):
    """Reference held as a mapping of chromosome name to sequence."""

    def __init__(self, sequences: Mapping[str, str]):
        self._sequences = {chrom: seq.upper() for chrom, seq in sequences.items()}

    @property
    def references(self) -> tuple[str, ...]:
        return tuple(self._sequences)

    def chromosome_length(self, chrom: str) -> int:
        try:
            return len(self._sequences[chrom])
        except KeyError:
            raise KeyError(f"Chromosome '{chrom}' not found in reference") from None

    def _fetch(self, chrom: str, start: int, end: int) -> str:
        return self._sequences[chrom][start - 1 : end]

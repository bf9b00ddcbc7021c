"""
Flank Kernel: sequence extension and boundary handling around indels.

All coordinates are 1-based and closed, as in VCF:
- A record covers [pos, end] where ``end = pos + len(ref) - 1``.
- The downstream flank of length n is [end + 1, end + n].
- The upstream flank of length n ends at the anchor base: [pos - n + 1, pos].
  For a deletion these are the n bases immediately preceding the first
  deleted base.

Flanks that run past a chromosome end are clipped silently. A clipped flank
is simply shorter, which can understate repeat, homopolymer and
microhomology lengths near chromosome ends.
"""

from collections.abc import Sequence

from indelctx.models.core import GenomicInterval, Variant
from indelctx.reference import ReferenceProvider


class FlankKernel:
    """
    Stateless utility for computing and fetching flanking sequence.
    """

    @staticmethod
    def downstream_interval(variant: Variant, flank: int, chrom_length: int) -> GenomicInterval:
        """
        Interval of ``flank`` bases after the last reference base of ``variant``.

        Args:
            variant: The indel.
            flank: Requested flank length.
            chrom_length: Length of the variant's chromosome.

        Returns:
            Clipped interval; empty when the variant ends at the chromosome end.
        """
        start = variant.end + 1
        end = max(min(variant.end + flank, chrom_length), start - 1)
        return GenomicInterval(chrom=variant.chrom, start=start, end=end)

    @staticmethod
    def upstream_interval(variant: Variant, flank: int) -> GenomicInterval:
        """
        Interval of ``flank`` bases ending at the anchor base, clipped at position 1.
        """
        start = max(variant.pos - flank + 1, 1)
        return GenomicInterval(chrom=variant.chrom, start=start, end=variant.pos)

    @staticmethod
    def fetch_downstream(
        variants: Sequence[Variant], flanks: Sequence[int], reference: ReferenceProvider
    ) -> list[str]:
        """
        Fetch the downstream flank of each variant in one batched query.

        Args:
            variants: Variants to extend.
            flanks: Flank length per variant.
            reference: Sequence provider.

        Returns:
            One (possibly clipped) flank sequence per variant, in input order.
        """
        intervals = []
        for variant, flank in zip(variants, flanks, strict=True):
            interval = FlankKernel.downstream_interval(
                variant, flank, reference.chromosome_length(variant.chrom)
            )
            intervals.append((interval.chrom, interval.start, interval.end))
        return reference.get_sequences(intervals)

    @staticmethod
    def fetch_upstream(
        variants: Sequence[Variant], flanks: Sequence[int], reference: ReferenceProvider
    ) -> list[str]:
        """Fetch the upstream flank of each variant in one batched query."""
        intervals = []
        for variant, flank in zip(variants, flanks, strict=True):
            interval = FlankKernel.upstream_interval(variant, flank)
            intervals.append((interval.chrom, interval.start, interval.end))
        return reference.get_sequences(intervals)

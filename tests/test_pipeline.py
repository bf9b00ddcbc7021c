"""Tests for the orchestrator: shapes, ordering and fail-fast validation."""

import pytest

from indelctx.errors import (
    ChromosomeMismatchError,
    MultiAllelicVariantError,
    UnsupportedVariantTypeError,
)
from indelctx.models.core import ClassifiedVariant, Variant
from indelctx.pipeline import classify_variant_set, get_indel_context
from indelctx.reference import InMemoryReference

# chr1:  5 CA>C (1bp del in AAA), 14 C>CG (1bp ins before GGT),
#        22 ACGT>A (3bp del, CG microhomology), 31 A>ACG (CGCGCG repeat)
GENOME = {
    "chr1": (
        "GGGGCAAATGGGG"  # 1-13
        + "CGGTAAAA"  # 14-21
        + "ACGTCGATT"  # 22-30
        + "ACGCGCGTT"  # 31-39
        + "TTTTTTTTTTTTTTTTTTTT"
    ),
    "chr2": "GGGGCAAATGGGGGGGGGGG",
    "chr10": "GGGGCAAATGGGGGGGGGGG",
}

EXPECTED = {
    ("chr1", 5): ("T_deletion", 3),
    ("chr1", 14): ("C_insertion", 2),
    ("chr1", 22): ("3bp_deletion_with_microhomology", 2),
    ("chr1", 31): ("2bp_insertion", 3),
}


class SpyReference(InMemoryReference):
    """Records every batched sequence query."""

    def __init__(self, sequences):
        super().__init__(sequences)
        self.queries = []

    def get_sequences(self, intervals):
        intervals = list(intervals)
        self.queries.append(intervals)
        return super().get_sequences(intervals)


@pytest.fixture
def reference():
    return SpyReference(GENOME)


@pytest.fixture
def chr1_variants():
    # Deliberately out of order
    return [
        Variant(chrom="chr1", pos=31, ref="A", alt="ACG"),
        Variant(chrom="chr1", pos=5, ref="CA", alt="C"),
        Variant(chrom="chr1", pos=22, ref="ACGT", alt="A"),
        Variant(chrom="chr1", pos=14, ref="C", alt="CG"),
    ]


def test_single_set(reference, chr1_variants):
    results = get_indel_context(chr1_variants, reference)

    assert isinstance(results, list)
    assert all(isinstance(r, ClassifiedVariant) for r in results)
    assert {(r.chrom, r.pos): (r.category, r.subfeature) for r in results} == EXPECTED


def test_output_sorted_by_coordinate(reference, chr1_variants):
    results = get_indel_context(chr1_variants, reference)
    assert [r.pos for r in results] == [5, 14, 22, 31]


def test_chromosomes_sorted_in_reference_order(reference):
    variants = [
        Variant(chrom="chr10", pos=5, ref="CA", alt="C"),
        Variant(chrom="chr2", pos=5, ref="CA", alt="C"),
        Variant(chrom="chr1", pos=5, ref="CA", alt="C"),
    ]
    results = get_indel_context(variants, reference)
    assert [r.chrom for r in results] == ["chr1", "chr2", "chr10"]


def test_no_records_dropped_or_duplicated(reference, chr1_variants):
    variants = chr1_variants + [Variant(chrom="chr2", pos=5, ref="CA", alt="C")]
    results = get_indel_context(variants, reference)

    assert len(results) == len(variants)
    assert sorted((r.chrom, r.pos) for r in results) == sorted((v.chrom, v.pos) for v in variants)


def test_deterministic(reference, chr1_variants):
    first = get_indel_context(chr1_variants, reference)
    second = get_indel_context(list(reversed(chr1_variants)), reference)
    assert first == second


def test_input_not_modified(reference, chr1_variants):
    before = [v.model_copy() for v in chr1_variants]
    get_indel_context(chr1_variants, reference)
    assert chr1_variants == before


def test_one_batched_query_per_category(reference, chr1_variants):
    get_indel_context(chr1_variants + [Variant(chrom="chr2", pos=5, ref="CA", alt="C")], reference)
    # 1bp del, 1bp ins, large del (downstream + upstream), large ins
    assert len(reference.queries) == 5
    assert len(reference.queries[0]) == 2


def test_named_sets_keep_shape_and_order(reference, chr1_variants):
    sets = {
        "tumor2": [Variant(chrom="chr2", pos=5, ref="CA", alt="C")],
        "tumor1": chr1_variants,
        "empty": [],
    }
    results = get_indel_context(sets, reference)

    assert list(results) == ["tumor2", "tumor1", "empty"]
    assert [r.category for r in results["tumor2"]] == ["T_deletion"]
    assert len(results["tumor1"]) == 4
    assert results["empty"] == []


def test_named_sets_are_independent(reference, chr1_variants):
    alone = get_indel_context(chr1_variants, reference)
    together = get_indel_context(
        {"a": chr1_variants, "b": [Variant(chrom="chr10", pos=5, ref="CA", alt="C")]}, reference
    )
    assert together["a"] == alone


def test_parallel_matches_serial(reference, chr1_variants):
    sets = {f"sample{i}": chr1_variants for i in range(4)}
    assert get_indel_context(sets, reference, n_jobs=2) == get_indel_context(sets, reference)


def test_snv_aborts_without_fetching(reference, chr1_variants):
    variants = chr1_variants + [Variant(chrom="chr1", pos=2, ref="G", alt="T")]
    with pytest.raises(UnsupportedVariantTypeError):
        get_indel_context(variants, reference)
    assert reference.queries == []


def test_invalid_record_in_any_set_aborts_call(reference, chr1_variants):
    sets = {
        "good": chr1_variants,
        "bad": [Variant(chrom="chr2", pos=5, ref="C", alt="CA,CAA")],
    }
    with pytest.raises(MultiAllelicVariantError):
        get_indel_context(sets, reference)
    assert reference.queries == []


def test_chromosome_mismatch(reference):
    with pytest.raises(ChromosomeMismatchError):
        get_indel_context([Variant(chrom="1", pos=5, ref="CA", alt="C")], reference)


def test_empty_single_set(reference):
    assert get_indel_context([], reference) == []


def test_classify_variant_set_directly(reference, chr1_variants):
    results = classify_variant_set(chr1_variants, reference)
    assert [r.pos for r in results] == [5, 14, 22, 31]


def test_reclassifying_output_is_idempotent(reference, chr1_variants):
    first = get_indel_context(chr1_variants, reference)
    second = get_indel_context(first, reference)

    assert [(r.chrom, r.pos, r.category, r.subfeature) for r in second] == [
        (r.chrom, r.pos, r.category, r.subfeature) for r in first
    ]


def test_named_sets_with_progress(reference, chr1_variants):
    sets = {
        "tumor1": chr1_variants,
        "tumor2": [Variant(chrom="chr2", pos=5, ref="CA", alt="C")],
        "tumor3": list(reversed(chr1_variants)),
    }
    with_progress = get_indel_context(sets, reference, n_jobs=2, show_progress=True)

    assert list(with_progress) == ["tumor1", "tumor2", "tumor3"]
    assert with_progress == get_indel_context(sets, reference)
    assert with_progress["tumor1"] == with_progress["tumor3"]

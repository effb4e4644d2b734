"""Tests for variant filtering, counting and summaries."""

import polars as pl
from polars.testing import assert_frame_equal

from protein_lollipop.variants import (
    count_variants,
    filter_variants,
    summarize_variants,
)


def test_filter_excludes_reference_genotype(sample_variants):
    df = filter_variants(sample_variants)

    assert df.height == 5
    assert "0/0" not in df["genotype"].to_list()


def test_filter_keep_reference_genotype(sample_variants):
    df = filter_variants(sample_variants, exclude_reference_genotype=False)

    assert df.height == 6


def test_filter_by_impact_case_insensitive(sample_variants):
    df = filter_variants(sample_variants, impacts=["high", "Moderate"])

    assert sorted(set(df["impact"].to_list())) == ["HIGH", "MODERATE"]
    assert df.height == 4


def test_filter_by_allele_frequency(sample_variants):
    df = filter_variants(sample_variants, max_allele_frequency=0.01)

    assert df["max_allele_frequency"].max() <= 0.01
    assert 0.05 not in df["max_allele_frequency"].to_list()


def test_filter_af_one_disables_filter(sample_variants):
    df = filter_variants(
        sample_variants, max_allele_frequency=1.0, exclude_reference_genotype=False
    )

    assert_frame_equal(df, sample_variants)


def test_filter_combined(sample_variants):
    """Default batch filters: non-reference, HIGH/MODERATE, AF <= 0.01."""
    df = filter_variants(
        sample_variants,
        impacts=["HIGH", "MODERATE"],
        max_allele_frequency=0.01,
    )

    assert df["POS"].to_list() == [100, 100, 400, 50]


def test_filter_tolerates_missing_columns():
    df = pl.DataFrame({"gene_symbol": ["TEST1"], "POS": [1]})

    assert filter_variants(df, impacts=["HIGH"], max_allele_frequency=0.01).height == 1


def test_count_variants_groups_recurrent_positions(sample_variants):
    counts = count_variants(sample_variants, "TEST1")

    assert counts.columns == ["aa_pos", "consequence", "REF", "ALT", "count", "families", "samples"]
    first = counts.row(0, named=True)
    assert first == {
        "aa_pos": 100,
        "consequence": "missense_variant",
        "REF": "A",
        "ALT": "G",
        "count": 2,
        "families": "FAM001, FAM002",
        "samples": "S1, S2",
    }
    assert counts["aa_pos"].to_list() == [100, 120, 250, 400]
    assert counts["count"].to_list() == [2, 1, 1, 1]


def test_count_variants_only_requested_gene(sample_variants):
    counts = count_variants(sample_variants, "TEST2")

    assert counts["aa_pos"].to_list() == [50]
    assert counts["consequence"].to_list() == ["frameshift_variant"]


def test_count_variants_unknown_gene(sample_variants):
    counts = count_variants(sample_variants, "NOPE")

    assert counts.height == 0
    assert counts.columns == ["aa_pos", "consequence", "REF", "ALT", "count", "families", "samples"]


def test_count_variants_unique_families():
    df = pl.DataFrame({
        "gene_symbol": ["G"] * 3,
        "POS": [5, 5, 5],
        "REF": ["A"] * 3,
        "ALT": ["T"] * 3,
        "consequence": ["missense_variant"] * 3,
        "Family_ID": ["F1", "F1", "F2"],
        "sample": ["S1", "S2", "S3"],
    })

    row = count_variants(df, "G").row(0, named=True)

    assert row["count"] == 3
    assert row["families"] == "F1, F2"
    assert row["samples"] == "S1, S2, S3"


def test_count_variants_skips_non_integer_positions():
    df = pl.DataFrame({
        "gene_symbol": ["G", "G"],
        "POS": ["12", "p.Arg12"],
        "REF": ["A", "A"],
        "ALT": ["T", "T"],
        "consequence": ["missense_variant"] * 2,
    })

    counts = count_variants(df, "G")

    assert counts["aa_pos"].to_list() == [12]


def test_summarize_variants(sample_variants):
    summary = summarize_variants(sample_variants, "TEST1")

    assert summary.gene_name == "TEST1"
    assert summary.total_variants == 5
    assert summary.unique_positions == 4
    assert summary.unique_families == 4
    assert summary.unique_samples == 4
    assert summary.consequence_counts == {
        "missense_variant": 2,
        "mystery_variant": 1,
        "stop_gained": 1,
        "synonymous_variant": 1,
    }
    assert summary.impact_counts == {"HIGH": 1, "LOW": 1, "MODERATE": 2, "MODIFIER": 1}


def test_summarize_variants_unknown_gene(sample_variants):
    summary = summarize_variants(sample_variants, "NOPE")

    assert summary.total_variants == 0
    assert summary.unique_positions == 0
    assert summary.consequence_counts == {}

"""Variant filtering, per-position counting and per-gene summaries."""

import logging
from dataclasses import dataclass, field
from typing import Optional

import polars as pl

logger = logging.getLogger(__name__)

# Genotype string for a sample carrying no alternate allele
REFERENCE_GENOTYPE = "0/0"

COUNT_COLUMNS = ["aa_pos", "consequence", "REF", "ALT", "count", "families", "samples"]


@dataclass
class VariantSummary:
    """Summary statistics for one gene's variants.

    Attributes:
        gene_name: Gene symbol summarised
        total_variants: Number of variant rows for the gene
        unique_positions: Distinct POS values
        unique_families: Distinct Family_ID values
        unique_samples: Distinct sample values
        consequence_counts: Rows per consequence
        impact_counts: Rows per impact
    """
    gene_name: str
    total_variants: int
    unique_positions: int
    unique_families: int
    unique_samples: int
    consequence_counts: dict[str, int] = field(default_factory=dict)
    impact_counts: dict[str, int] = field(default_factory=dict)


def _ensure_columns(df: pl.DataFrame, columns: list[str]) -> pl.DataFrame:
    """Add absent columns as all-null strings so downstream selects work."""
    missing = [col for col in columns if col not in df.columns]
    if not missing:
        return df
    return df.with_columns([pl.lit(None, dtype=pl.Utf8).alias(col) for col in missing])


def filter_variants(
    df: pl.DataFrame,
    impacts: Optional[list[str]] = None,
    max_allele_frequency: float = 1.0,
    exclude_reference_genotype: bool = True,
) -> pl.DataFrame:
    """
    Filter variants by genotype, impact and allele frequency.

    Args:
        df: Variant table from load_variant_data
        impacts: Impacts to keep, case-insensitive (None keeps all)
        max_allele_frequency: Keep variants with max_allele_frequency <= this;
                              1.0 disables the filter
        exclude_reference_genotype: Drop rows whose genotype is 0/0

    Returns:
        Filtered DataFrame
    """
    original_count = df.height

    if exclude_reference_genotype and "genotype" in df.columns:
        df = df.filter(
            pl.col("genotype").is_null() | (pl.col("genotype") != REFERENCE_GENOTYPE)
        )
        logger.info(f"After genotype filter: {df.height} variants remaining")

    if impacts is not None and "impact" in df.columns:
        wanted = [impact.upper() for impact in impacts]
        df = df.filter(pl.col("impact").str.to_uppercase().is_in(wanted))
        logger.info(f"After impact filter ({', '.join(wanted)}): {df.height} variants remaining")

    if max_allele_frequency < 1.0 and "max_allele_frequency" in df.columns:
        df = df.filter(
            pl.col("max_allele_frequency").cast(pl.Float64, strict=False) <= max_allele_frequency
        )
        logger.info(f"After AF <= {max_allele_frequency} filter: {df.height} variants remaining")

    logger.info(f"Filtered from {original_count} to {df.height} variants")
    return df


def variants_for_gene(df: pl.DataFrame, gene_name: str) -> pl.DataFrame:
    """Rows of the variant table belonging to one gene."""
    df = _ensure_columns(df, ["gene_symbol"])
    return df.filter(pl.col("gene_symbol") == gene_name)


def count_variants(df: pl.DataFrame, gene_name: str) -> pl.DataFrame:
    """
    Count a gene's variants per amino-acid position and allele.

    POS is taken as the amino-acid position. Rows whose POS is not an integer
    are ignored.

    Args:
        df: Variant table
        gene_name: Gene symbol to count

    Returns:
        DataFrame with columns aa_pos, consequence, REF, ALT, count,
        families (comma-joined unique Family_IDs), samples (comma-joined
        unique samples); one row per (aa_pos, consequence, REF, ALT)
    """
    gene_variants = _ensure_columns(
        variants_for_gene(df, gene_name),
        ["POS", "consequence", "REF", "ALT", "Family_ID", "sample"],
    )

    gene_variants = (
        gene_variants
        .with_columns(pl.col("POS").cast(pl.Int64, strict=False).alias("aa_pos"))
        .filter(pl.col("aa_pos").is_not_null())
        .with_columns([
            pl.col(col).cast(pl.Utf8)
            for col in ["consequence", "REF", "ALT", "Family_ID", "sample"]
        ])
    )

    counts = (
        gene_variants
        .group_by(["aa_pos", "consequence", "REF", "ALT"], maintain_order=True)
        .agg([
            pl.len().alias("count"),
            pl.col("Family_ID").drop_nulls().unique(maintain_order=True).alias("families"),
            pl.col("sample").drop_nulls().unique(maintain_order=True).alias("samples"),
        ])
        .with_columns([
            pl.col("families").list.join(", "),
            pl.col("samples").list.join(", "),
        ])
        .sort("aa_pos", maintain_order=True)
    )

    return counts.select(COUNT_COLUMNS)


def _value_counts(df: pl.DataFrame, column: str) -> dict[str, int]:
    if column not in df.columns or df.height == 0:
        return {}
    counts = (
        df.filter(pl.col(column).is_not_null())
        .group_by(column)
        .agg(pl.len().alias("n"))
        .sort(column)
    )
    return {row[column]: row["n"] for row in counts.to_dicts()}


def summarize_variants(df: pl.DataFrame, gene_name: str) -> VariantSummary:
    """
    Summary statistics for one gene's variants.

    Args:
        df: Variant table
        gene_name: Gene symbol to summarise

    Returns:
        VariantSummary with totals and per-consequence / per-impact counts
    """
    gene_variants = variants_for_gene(df, gene_name)

    def n_unique(column: str) -> int:
        if column not in gene_variants.columns:
            return 0
        return gene_variants[column].drop_nulls().n_unique()

    return VariantSummary(
        gene_name=gene_name,
        total_variants=gene_variants.height,
        unique_positions=n_unique("POS"),
        unique_families=n_unique("Family_ID"),
        unique_samples=n_unique("sample"),
        consequence_counts=_value_counts(gene_variants, "consequence"),
        impact_counts=_value_counts(gene_variants, "impact"),
    )

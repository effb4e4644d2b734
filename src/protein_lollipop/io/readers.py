"""Readers for variant, domain, PTM and gene-config tables."""

import logging
from pathlib import Path

import polars as pl

from protein_lollipop.uniprot.models import DOMAIN_SCHEMA, PTM_SCHEMA

logger = logging.getLogger(__name__)

VARIANT_COLUMNS = [
    "Family_ID",
    "CHROM",
    "POS",
    "REF",
    "ALT",
    "gene_symbol",
    "max_allele_frequency",
    "impact",
    "consequence",
    "sample",
    "genotype",
]

# Numeric variant columns; everything else stays a string
VARIANT_NUMERIC_COLUMNS = {
    "POS": pl.Int64,
    "max_allele_frequency": pl.Float64,
}


def _read_as_strings(path: Path | str, separator: str) -> pl.DataFrame:
    """Read a delimited file with every column as Utf8.

    Avoids schema inference guessing types for allele or genotype columns.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table not found: {path}")
    return pl.read_csv(path, separator=separator, infer_schema_length=0)


def _missing_columns(df: pl.DataFrame, required: list[str]) -> list[str]:
    return [col for col in required if col not in df.columns]


def load_variant_data(path: Path | str, separator: str = "\t") -> pl.DataFrame:
    """
    Load a variant table.

    Args:
        path: Path to delimited variant file with a header row
        separator: Column separator (default: tab)

    Returns:
        DataFrame with POS as Int64 and max_allele_frequency as Float64
        (unparseable values become null); other columns are strings

    Notes:
        - Missing expected columns are logged as a warning, not an error,
          so partial tables can still be plotted
    """
    df = _read_as_strings(path, separator)

    missing = _missing_columns(df, VARIANT_COLUMNS)
    if missing:
        logger.warning(f"Missing columns in {path}: {', '.join(missing)}")

    df = df.with_columns([
        pl.col(col).cast(dtype, strict=False)
        for col, dtype in VARIANT_NUMERIC_COLUMNS.items()
        if col in df.columns
    ])

    logger.info(f"Loaded {df.height} variants from {path}")
    return df


def _load_feature_table(
    path: Path | str,
    schema: dict,
    coordinate_columns: list[str],
    label: str,
    separator: str,
) -> pl.DataFrame:
    df = _read_as_strings(path, separator)

    missing = _missing_columns(df, list(schema))
    if missing:
        raise ValueError(
            f"{label} file {path} is missing columns: {', '.join(missing)}"
        )

    df = df.select([
        pl.col(col).cast(dtype, strict=False) for col, dtype in schema.items()
    ])

    # Rows without coordinates cannot be drawn
    complete = df.drop_nulls(subset=coordinate_columns)
    dropped = df.height - complete.height
    if dropped:
        logger.warning(f"Dropped {dropped} {label.lower()} rows with missing coordinates from {path}")

    return complete


def load_domain_table(path: Path | str, separator: str = "\t") -> pl.DataFrame:
    """
    Load a domain table with columns gene, domain_name, start, end.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If required columns are missing
    """
    return _load_feature_table(path, DOMAIN_SCHEMA, ["start", "end"], "Domain", separator)


def load_ptm_table(path: Path | str, separator: str = "\t") -> pl.DataFrame:
    """
    Load a PTM table with columns gene, ptm_type, position, description.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If required columns are missing
    """
    return _load_feature_table(path, PTM_SCHEMA, ["position"], "PTM", separator)


def load_gene_config(path: Path | str, separator: str = "\t") -> pl.DataFrame:
    """
    Load a batch gene configuration table.

    Args:
        path: Table with a gene_name column and optional protein_length

    Returns:
        DataFrame with gene_name (Utf8) and protein_length (Int64, null when
        the column is absent or the value blank)

    Raises:
        ValueError: If the gene_name column is missing
    """
    df = _read_as_strings(path, separator)

    if "gene_name" not in df.columns:
        raise ValueError("Gene config file must have column: gene_name")

    if "protein_length" in df.columns:
        length = pl.col("protein_length").cast(pl.Int64, strict=False)
    else:
        length = pl.lit(None, dtype=pl.Int64)

    return df.select([
        pl.col("gene_name"),
        length.alias("protein_length"),
    ])

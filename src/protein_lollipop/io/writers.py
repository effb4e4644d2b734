"""TSV writers for domain/PTM tables and the YAML batch summary sidecar."""

from pathlib import Path
from typing import Any

import polars as pl
import yaml

from protein_lollipop.uniprot.models import DOMAIN_SCHEMA, PTM_SCHEMA


def _write_tsv(df: pl.DataFrame, output_path: Path | str, schema: dict) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.select(list(schema)).write_csv(output_path, separator="\t", include_header=True)
    return output_path


def write_domain_table(df: pl.DataFrame, output_path: Path | str) -> Path:
    """Write a domains table (gene, domain_name, start, end) as TSV."""
    return _write_tsv(df, output_path, DOMAIN_SCHEMA)


def write_ptm_table(df: pl.DataFrame, output_path: Path | str) -> Path:
    """Write a PTMs table (gene, ptm_type, position, description) as TSV."""
    return _write_tsv(df, output_path, PTM_SCHEMA)


def write_table(df: pl.DataFrame, output_path: Path | str) -> Path:
    """Write any table (variants, gene config) as TSV, keeping its column order."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.write_csv(output_path, separator="\t", include_header=True)
    return output_path


def write_yaml_sidecar(metadata: dict[str, Any], output_path: Path | str) -> Path:
    """
    Write a metadata dictionary as a YAML sidecar file.

    Args:
        metadata: Plain-typed dictionary (str, int, float, list, dict)
        output_path: Destination path (parent directories are created)

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)
    return output_path

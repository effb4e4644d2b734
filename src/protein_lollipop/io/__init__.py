"""Tabular I/O for variant, domain, PTM and gene-config tables."""

from protein_lollipop.io.readers import (
    VARIANT_COLUMNS,
    load_domain_table,
    load_gene_config,
    load_ptm_table,
    load_variant_data,
)
from protein_lollipop.io.writers import (
    write_domain_table,
    write_ptm_table,
    write_table,
    write_yaml_sidecar,
)

__all__ = [
    "VARIANT_COLUMNS",
    "load_domain_table",
    "load_gene_config",
    "load_ptm_table",
    "load_variant_data",
    "write_domain_table",
    "write_ptm_table",
    "write_table",
    "write_yaml_sidecar",
]

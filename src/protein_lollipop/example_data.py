"""Demo BRCA1 variant, domain and PTM tables."""

import logging
from pathlib import Path

import numpy as np
import polars as pl

from protein_lollipop.io import (
    write_domain_table,
    write_ptm_table,
    write_table,
)
from protein_lollipop.variants import REFERENCE_GENOTYPE

logger = logging.getLogger(__name__)

EXAMPLE_GENE = "BRCA1"
EXAMPLE_PROTEIN_LENGTH = 1863
N_EXAMPLE_VARIANTS = 50

BASES = ["A", "C", "G", "T"]
IMPACTS = ["HIGH", "MODERATE", "LOW", "MODIFIER"]
IMPACT_WEIGHTS = [0.1, 0.3, 0.3, 0.3]
CONSEQUENCES = [
    "missense_variant",
    "synonymous_variant",
    "frameshift_variant",
    "stop_gained",
    "splice_donor_variant",
    "intron_variant",
]
CONSEQUENCE_WEIGHTS = [0.3, 0.2, 0.1, 0.05, 0.05, 0.3]
GENOTYPES = ["0/1", "1/1", REFERENCE_GENOTYPE]
GENOTYPE_WEIGHTS = [0.45, 0.05, 0.5]


def generate_example_variants(seed: int = 42) -> pl.DataFrame:
    """
    Random BRCA1 variants carried by at least one sample.

    Args:
        seed: numpy RNG seed; the same seed gives the same table

    Returns:
        Variant table in the load_variant_data layout with 0/0 genotypes
        removed and REF != ALT on every row
    """
    rng = np.random.default_rng(seed)
    n = N_EXAMPLE_VARIANTS

    ref = rng.choice(BASES, n)
    alt = rng.choice(BASES, n)
    same = ref == alt
    alt[same] = np.where(ref[same] == "A", "G", "A")

    variants = pl.DataFrame({
        "Family_ID": [f"FAM{i:03d}" for i in rng.integers(1, 21, n)],
        "CHROM": ["chr17"] * n,
        "POS": rng.integers(100, 1801, n).astype(np.int64),
        "REF": ref.tolist(),
        "ALT": alt.tolist(),
        "gene_symbol": [EXAMPLE_GENE] * n,
        "max_allele_frequency": rng.uniform(0, 0.01, n),
        "impact": rng.choice(IMPACTS, n, p=IMPACT_WEIGHTS).tolist(),
        "consequence": rng.choice(CONSEQUENCES, n, p=CONSEQUENCE_WEIGHTS).tolist(),
        "sample": [f"SAMPLE{i:03d}" for i in rng.integers(1, 31, n)],
        "genotype": rng.choice(GENOTYPES, n, p=GENOTYPE_WEIGHTS).tolist(),
    })

    return variants.filter(pl.col("genotype") != REFERENCE_GENOTYPE)


def generate_example_domains() -> pl.DataFrame:
    """Simplified BRCA1 domain table."""
    return pl.DataFrame(
        {
            "gene": [EXAMPLE_GENE] * 4,
            "domain_name": ["RING domain", "DNA binding", "BRCT domain 1", "BRCT domain 2"],
            "start": [1, 500, 1650, 1760],
            "end": [100, 800, 1740, 1855],
        },
        schema={"gene": pl.Utf8, "domain_name": pl.Utf8, "start": pl.Int64, "end": pl.Int64},
    )


def generate_example_ptms(seed: int = 42) -> pl.DataFrame:
    """BRCA1 PTM sites with randomly assigned modification types."""
    rng = np.random.default_rng(seed)
    positions = [150, 320, 456, 654, 789, 890, 1100, 1234, 1345, 1456,
                 1523, 1600, 1689, 1720, 1800]
    descriptions = [
        "Regulatory phosphorylation", "DNA damage response",
        "Cell cycle control", "Chromatin remodeling",
        "Transcriptional regulation", "Protein stability",
        "DNA repair function", "Signal transduction",
        "Cell growth regulation", "Apoptosis regulation",
        "DNA binding regulation", "Protein-protein interaction",
        "Nuclear localization", "BRCT domain regulation",
        "C-terminal regulation",
    ]
    ptm_types = rng.choice(
        ["Phosphorylation", "Acetylation", "Methylation", "Ubiquitination"],
        len(positions),
    )
    return pl.DataFrame(
        {
            "gene": [EXAMPLE_GENE] * len(positions),
            "ptm_type": ptm_types.tolist(),
            "position": positions,
            "description": descriptions,
        },
        schema={"gene": pl.Utf8, "ptm_type": pl.Utf8, "position": pl.Int64, "description": pl.Utf8},
    )


def generate_example_gene_config() -> pl.DataFrame:
    return pl.DataFrame(
        {"gene_name": [EXAMPLE_GENE], "protein_length": [EXAMPLE_PROTEIN_LENGTH]},
        schema={"gene_name": pl.Utf8, "protein_length": pl.Int64},
    )


def save_example_data(output_dir: Path | str = ".", seed: int = 42) -> dict[str, Path]:
    """
    Write the example tables as TSV files.

    Args:
        output_dir: Destination directory (created if needed)
        seed: RNG seed for variants and PTM types

    Returns:
        Mapping of table name (variants, domains, ptms, gene_config) to path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        "variants": write_table(
            generate_example_variants(seed), output_dir / "example_variants.tsv"
        ),
        "domains": write_domain_table(
            generate_example_domains(), output_dir / "example_domains.tsv"
        ),
        "ptms": write_ptm_table(
            generate_example_ptms(seed), output_dir / "example_ptms.tsv"
        ),
        "gene_config": write_table(
            generate_example_gene_config(), output_dir / "example_gene_config.tsv"
        ),
    }

    for name, path in paths.items():
        logger.info(f"Saved example {name} to {path}")
    return paths

"""Batch generation of lollipop plots for many genes."""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import polars as pl

from protein_lollipop import __version__
from protein_lollipop.io import (
    load_domain_table,
    load_gene_config,
    load_ptm_table,
    load_variant_data,
    write_yaml_sidecar,
)
from protein_lollipop.plotting import create_lollipop_plot
from protein_lollipop.plotting.assemble import Retriever
from protein_lollipop.variants import (
    filter_variants,
    summarize_variants,
    variants_for_gene,
)

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "batch_summary.yaml"

STATUS_SUCCESS = "success"
STATUS_NO_VARIANTS = "no_variants"
STATUS_ERROR = "error"


@dataclass
class GeneResult:
    """Outcome of plotting one gene."""

    gene_name: str
    status: str
    variant_count: int = 0
    output_file: Optional[str] = None
    unique_positions: Optional[int] = None
    unique_families: Optional[int] = None
    unique_samples: Optional[int] = None
    message: Optional[str] = None


@dataclass
class BatchReport:
    """
    Results of a batch run.

    Attributes:
        timestamp: ISO-8601 UTC start time
        output_dir: Directory holding the plots and summary
        input_variants: Variant rows before filtering
        filtered_variants: Variant rows after filtering
        results: One GeneResult per configured gene, in config order
        parameters: Filter and plotting parameters used
    """

    timestamp: str
    output_dir: str
    input_variants: int = 0
    filtered_variants: int = 0
    results: list[GeneResult] = field(default_factory=list)
    parameters: dict = field(default_factory=dict)

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def status_counts(self) -> dict[str, int]:
        return {
            status: self.count(status)
            for status in (STATUS_SUCCESS, STATUS_NO_VARIANTS, STATUS_ERROR)
        }

    def to_dict(self) -> dict:
        return {
            "tool_version": __version__,
            "timestamp": self.timestamp,
            "output_dir": self.output_dir,
            "parameters": self.parameters,
            "input_variants": self.input_variants,
            "filtered_variants": self.filtered_variants,
            "total_genes": len(self.results),
            "status_counts": self.status_counts,
            "genes": [
                {k: v for k, v in asdict(r).items() if v is not None}
                for r in self.results
            ],
        }


def _gene_config_frame(gene_config: pl.DataFrame | Path | str) -> pl.DataFrame:
    if isinstance(gene_config, pl.DataFrame):
        if "gene_name" not in gene_config.columns:
            raise ValueError("Gene config file must have column: gene_name")
        if "protein_length" not in gene_config.columns:
            gene_config = gene_config.with_columns(
                pl.lit(None, dtype=pl.Int64).alias("protein_length")
            )
        return gene_config
    return load_gene_config(gene_config)


def _optional_table(path, loader, label: str) -> Optional[pl.DataFrame]:
    if path is None:
        return None
    path = Path(path)
    if not path.exists():
        logger.warning(f"{label} file not found, continuing without it: {path}")
        return None
    df = loader(path)
    logger.info(f"Loaded {label.lower()} data: {df.height} rows")
    return df


def batch_process_genes(
    variant_file: Path | str,
    gene_config: pl.DataFrame | Path | str,
    domain_file: Optional[Path | str] = None,
    ptm_file: Optional[Path | str] = None,
    output_dir: Path | str = ".",
    impacts: Optional[list[str]] = None,
    max_allele_frequency: float = 1.0,
    exclude_reference_genotype: bool = True,
    auto_retrieve: bool = True,
    cache_dir: Optional[Path | str] = ".lollipop_cache",
    retriever: Optional[Retriever] = None,
    width: float = 16,
    height: float = 10,
    dpi: int = 300,
) -> BatchReport:
    """
    Create a lollipop plot for every gene in a gene configuration.

    Args:
        variant_file: Variant TSV
        gene_config: Gene config TSV path, or a DataFrame with gene_name and
                     optional protein_length
        domain_file: Optional domains TSV (missing files are skipped)
        ptm_file: Optional PTMs TSV (missing files are skipped)
        output_dir: Where {gene}_lollipop.png and batch_summary.yaml go
        impacts: Impacts to keep (None keeps all)
        max_allele_frequency: Allele-frequency ceiling (1.0 disables)
        exclude_reference_genotype: Drop 0/0 genotypes
        auto_retrieve: Query UniProt for missing inputs
        cache_dir: Retrieval cache directory
        retriever: Custom retrieval callable shared by all genes
        width: Figure width in inches
        height: Figure height in inches
        dpi: Output resolution

    Returns:
        BatchReport with one GeneResult per gene

    Notes:
        - A gene with no variants after filtering is recorded as no_variants
          and no plot is written
        - A gene whose plot fails is recorded as error; the batch continues
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report = BatchReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        output_dir=str(output_dir),
        parameters={
            "variant_file": str(variant_file),
            "domain_file": str(domain_file) if domain_file else None,
            "ptm_file": str(ptm_file) if ptm_file else None,
            "impacts": impacts,
            "max_allele_frequency": max_allele_frequency,
            "exclude_reference_genotype": exclude_reference_genotype,
            "auto_retrieve": auto_retrieve,
        },
    )

    genes = _gene_config_frame(gene_config)

    variants = load_variant_data(variant_file)
    report.input_variants = variants.height
    variants = filter_variants(
        variants,
        impacts=impacts,
        max_allele_frequency=max_allele_frequency,
        exclude_reference_genotype=exclude_reference_genotype,
    )
    report.filtered_variants = variants.height

    domains = _optional_table(domain_file, load_domain_table, "Domain")
    ptms = _optional_table(ptm_file, load_ptm_table, "PTM")

    total = genes.height
    for i, row in enumerate(genes.iter_rows(named=True), start=1):
        gene_name = row["gene_name"]
        protein_length = row["protein_length"]
        logger.info(f"Processing gene {i} of {total}: {gene_name}")

        gene_variants = variants_for_gene(variants, gene_name)
        if gene_variants.height == 0:
            logger.info(f"No variants found for {gene_name}")
            report.results.append(GeneResult(gene_name=gene_name, status=STATUS_NO_VARIANTS))
            continue

        summary = summarize_variants(gene_variants, gene_name)
        output_file = output_dir / f"{gene_name}_lollipop.png"

        try:
            create_lollipop_plot(
                gene_variants,
                gene_name,
                domains=domains,
                ptms=ptms,
                protein_length=protein_length,
                output_file=output_file,
                width=width,
                height=height,
                dpi=dpi,
                auto_retrieve=auto_retrieve,
                cache_dir=cache_dir,
                retriever=retriever,
            )
        except Exception as e:
            logger.error(f"Error creating plot for {gene_name}: {e}")
            report.results.append(GeneResult(
                gene_name=gene_name,
                status=STATUS_ERROR,
                variant_count=gene_variants.height,
                message=str(e),
            ))
            continue

        report.results.append(GeneResult(
            gene_name=gene_name,
            status=STATUS_SUCCESS,
            variant_count=gene_variants.height,
            output_file=str(output_file),
            unique_positions=summary.unique_positions,
            unique_families=summary.unique_families,
            unique_samples=summary.unique_samples,
        ))

    counts = report.status_counts
    logger.info(
        f"Successfully processed {counts[STATUS_SUCCESS]}/{total} genes "
        f"({counts[STATUS_NO_VARIANTS]} without variants, {counts[STATUS_ERROR]} errors)"
    )

    write_yaml_sidecar(report.to_dict(), output_dir / SUMMARY_FILENAME)
    return report

"""Plot assembly: fill missing inputs from UniProt, validate, lay out, render."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import polars as pl

from protein_lollipop.plotting.render import render_scene
from protein_lollipop.plotting.scene import LollipopScene, build_lollipop_scene
from protein_lollipop.retrieval import retrieve
from protein_lollipop.uniprot.models import RetrievalResult
from protein_lollipop.variants import count_variants

logger = logging.getLogger(__name__)

Retriever = Callable[[str], RetrievalResult]


class ProteinLengthUnavailableError(ValueError):
    """No protein length was supplied and none could be retrieved."""

    def __init__(self, gene_name: str, auto_retrieve: bool):
        self.gene_name = gene_name
        self.auto_retrieve = auto_retrieve
        if auto_retrieve:
            message = (
                f"Could not retrieve protein length for {gene_name} from UniProt. "
                "Supply the protein length manually, or check network connectivity "
                "and the gene symbol spelling."
            )
        else:
            message = (
                f"No protein length supplied for {gene_name} and auto-retrieval is "
                "disabled. Supply the protein length or enable auto-retrieval."
            )
        super().__init__(message)


@dataclass
class PlotInputs:
    domains: Optional[pl.DataFrame]
    ptms: Optional[pl.DataFrame]
    protein_length: Optional[int]


def _is_missing(df: Optional[pl.DataFrame]) -> bool:
    return df is None or df.height == 0


def resolve_plot_inputs(
    gene_name: str,
    domains: Optional[pl.DataFrame] = None,
    ptms: Optional[pl.DataFrame] = None,
    protein_length: Optional[int] = None,
    auto_retrieve: bool = True,
    cache_dir: Optional[Path | str] = ".lollipop_cache",
    retriever: Optional[Retriever] = None,
) -> PlotInputs:
    """
    Fill in missing plot inputs from UniProt.

    Retrieval runs only when auto_retrieve is set and at least one of domains,
    ptms or protein_length is missing. Caller-supplied values always win;
    retrieved tables are used only when non-empty.

    Args:
        gene_name: Gene symbol
        domains: Caller-supplied domains table, or None
        ptms: Caller-supplied PTMs table, or None
        protein_length: Caller-supplied length, or None
        auto_retrieve: Whether to query UniProt for missing inputs
        cache_dir: Retrieval cache directory for the default retriever
        retriever: Callable gene_symbol -> RetrievalResult (defaults to
                   protein_lollipop.retrieval.retrieve with cache_dir)

    Returns:
        PlotInputs; protein_length may still be None
    """
    inputs = PlotInputs(domains=domains, ptms=ptms, protein_length=protein_length)

    needs_retrieval = (
        _is_missing(domains) or _is_missing(ptms) or protein_length is None
    )
    if not (auto_retrieve and needs_retrieval):
        return inputs

    logger.info(f"Auto-retrieving protein data for {gene_name}")
    if retriever is None:
        def retriever(gene: str) -> RetrievalResult:
            return retrieve(gene, cache_dir=cache_dir)

    try:
        result = retriever(gene_name)
    except Exception as e:
        logger.warning(f"Protein data retrieval failed for {gene_name}: {e}")
        return inputs

    if _is_missing(inputs.domains) and result.domains.height > 0:
        inputs.domains = result.domains
        logger.info(f"Using {result.domains.height} retrieved domains for {gene_name}")
    if _is_missing(inputs.ptms) and result.ptms.height > 0:
        inputs.ptms = result.ptms
        logger.info(f"Using {result.ptms.height} retrieved PTMs for {gene_name}")
    if inputs.protein_length is None and result.protein_length is not None:
        inputs.protein_length = result.protein_length
        logger.info(f"Using retrieved protein length for {gene_name}: {result.protein_length} aa")

    return inputs


def create_lollipop_plot(
    variants: pl.DataFrame,
    gene_name: str,
    domains: Optional[pl.DataFrame] = None,
    ptms: Optional[pl.DataFrame] = None,
    protein_length: Optional[int] = None,
    output_file: Optional[Path | str] = None,
    width: float = 14,
    height: float = 10,
    dpi: int = 300,
    auto_retrieve: bool = True,
    cache_dir: Optional[Path | str] = ".lollipop_cache",
    retriever: Optional[Retriever] = None,
) -> LollipopScene:
    """
    Build, and optionally save, a lollipop plot for one gene.

    Args:
        variants: Variant table (see load_variant_data)
        gene_name: Gene symbol to plot
        domains: Optional domains table
        ptms: Optional PTMs table
        protein_length: Optional protein length in amino acids
        output_file: Image path; when None the scene is built but not rendered
        width: Figure width in inches
        height: Figure height in inches
        dpi: Output resolution
        auto_retrieve: Query UniProt for missing domains/PTMs/length
        cache_dir: Retrieval cache directory
        retriever: Custom retrieval callable (see resolve_plot_inputs)

    Returns:
        The LollipopScene that was (or would be) rendered

    Raises:
        ProteinLengthUnavailableError: If no protein length is available
    """
    inputs = resolve_plot_inputs(
        gene_name,
        domains=domains,
        ptms=ptms,
        protein_length=protein_length,
        auto_retrieve=auto_retrieve,
        cache_dir=cache_dir,
        retriever=retriever,
    )

    if inputs.protein_length is None:
        raise ProteinLengthUnavailableError(gene_name, auto_retrieve)

    counts = count_variants(variants, gene_name)
    if counts.height == 0:
        logger.warning(f"No variants found for gene: {gene_name}")

    scene = build_lollipop_scene(
        counts,
        gene_name,
        inputs.protein_length,
        domains=inputs.domains,
        ptms=inputs.ptms,
    )

    if output_file is not None:
        render_scene(scene, output_file, width=width, height=height, dpi=dpi)

    return scene

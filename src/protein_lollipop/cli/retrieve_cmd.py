"""Retrieve command: fetch domains, PTMs and protein length for one gene."""

import logging
import sys
from pathlib import Path

import click
import polars as pl

from protein_lollipop.config import apply_overrides
from protein_lollipop.io import write_domain_table, write_ptm_table
from protein_lollipop.retrieval import ProteinDataRetriever

logger = logging.getLogger(__name__)


def _echo_table(title: str, df: pl.DataFrame) -> None:
    click.echo(click.style(f"{title} ({df.height}):", bold=True))
    if df.height == 0:
        click.echo("  (none)")
    else:
        with pl.Config(tbl_rows=-1, tbl_hide_dataframe_shape=True):
            click.echo(str(df))
    click.echo()


@click.command('retrieve')
@click.argument('gene')
@click.option(
    '--cache-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Cache directory (default: cache_dir from config)'
)
@click.option(
    '--no-cache',
    is_flag=True,
    help='Bypass the retrieval cache (no read, no write)'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Write {gene}_domains.tsv and {gene}_ptms.tsv here'
)
@click.pass_context
def retrieve_cmd(ctx, gene, cache_dir, no_cache, output_dir):
    """Retrieve protein domains, PTMs and length for GENE from UniProt.

    Results are cached per gene, so repeated calls are served locally.

    Examples:

        protein-lollipop retrieve BRCA1

        protein-lollipop retrieve TP53 --output-dir annotations/
    """
    config = apply_overrides(ctx.obj['config'], {'cache_dir': cache_dir})

    click.echo(click.style(f"=== Protein data for {gene} ===", bold=True))
    click.echo()

    with ProteinDataRetriever.from_config(config, use_cache=not no_cache) as retriever:
        result = retriever.retrieve(gene)

    if result.protein_length is None:
        click.echo(click.style(
            f"Error: could not retrieve protein data for {gene}. "
            "Check network connectivity and the gene symbol spelling.",
            fg='red'
        ), err=True)
        sys.exit(1)

    click.echo(click.style(f"Protein length: {result.protein_length} aa", fg='green'))
    click.echo()
    _echo_table("Domains", result.domains)
    _echo_table("PTMs", result.ptms)

    if output_dir is not None:
        domain_path = write_domain_table(result.domains, Path(output_dir) / f"{gene}_domains.tsv")
        ptm_path = write_ptm_table(result.ptms, Path(output_dir) / f"{gene}_ptms.tsv")
        click.echo(click.style(f"  Domains written to {domain_path}", fg='green'))
        click.echo(click.style(f"  PTMs written to {ptm_path}", fg='green'))

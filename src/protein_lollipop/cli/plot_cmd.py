"""Plot command: render a lollipop plot for a single gene."""

import logging
import sys
from pathlib import Path

import click

from protein_lollipop.config import apply_overrides
from protein_lollipop.io import load_domain_table, load_ptm_table, load_variant_data
from protein_lollipop.plotting import create_lollipop_plot
from protein_lollipop.retrieval import ProteinDataRetriever
from protein_lollipop.variants import summarize_variants

logger = logging.getLogger(__name__)


@click.command('plot')
@click.argument('variant_file', type=click.Path(exists=True, path_type=Path))
@click.argument('gene')
@click.option(
    '--protein-length',
    type=click.IntRange(min=1),
    default=None,
    help='Protein length in amino acids (retrieved from UniProt if omitted)'
)
@click.option(
    '--output',
    type=click.Path(path_type=Path),
    default=None,
    help='Output image (default: {output_dir}/{GENE}_lollipop.png)'
)
@click.option(
    '--domains-file',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='Domain TSV (gene, domain_name, start, end)'
)
@click.option(
    '--ptms-file',
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help='PTM TSV (gene, ptm_type, position, description)'
)
@click.option(
    '--no-auto-retrieve',
    is_flag=True,
    help='Do not query UniProt for missing domains, PTMs or length'
)
@click.option(
    '--cache-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Cache directory (default: cache_dir from config)'
)
@click.pass_context
def plot(ctx, variant_file, gene, protein_length, output, domains_file,
         ptms_file, no_auto_retrieve, cache_dir):
    """Create a lollipop plot of GENE's variants from VARIANT_FILE.

    Missing domains, PTMs and protein length are retrieved from UniProt
    unless --no-auto-retrieve is given.

    Examples:

        protein-lollipop plot variants.tsv BRCA1 --protein-length 1863

        protein-lollipop plot variants.tsv TP53 --domains-file domains.tsv
    """
    config = apply_overrides(ctx.obj['config'], {'cache_dir': cache_dir})
    auto_retrieve = config.auto_retrieve and not no_auto_retrieve

    if output is None:
        output = Path(config.output_dir) / f"{gene}_lollipop.png"

    try:
        variants = load_variant_data(variant_file)
        domains = load_domain_table(domains_file) if domains_file else None
        ptms = load_ptm_table(ptms_file) if ptms_file else None
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error loading input: {e}", fg='red'), err=True)
        sys.exit(1)

    summary = summarize_variants(variants, gene)
    click.echo(click.style(f"=== Variant summary for {gene} ===", bold=True))
    click.echo(f"  Total variants:   {summary.total_variants}")
    click.echo(f"  Unique positions: {summary.unique_positions}")
    click.echo(f"  Unique families:  {summary.unique_families}")
    click.echo(f"  Unique samples:   {summary.unique_samples}")
    if summary.consequence_counts:
        click.echo("  Consequences:")
        for consequence, count in summary.consequence_counts.items():
            click.echo(f"    {consequence}: {count}")
    if summary.impact_counts:
        click.echo("  Impacts:")
        for impact, count in summary.impact_counts.items():
            click.echo(f"    {impact}: {count}")
    click.echo()

    with ProteinDataRetriever.from_config(config) as retriever:
        try:
            create_lollipop_plot(
                variants,
                gene,
                domains=domains,
                ptms=ptms,
                protein_length=protein_length,
                output_file=output,
                width=config.plot.width,
                height=config.plot.height,
                dpi=config.plot.dpi,
                auto_retrieve=auto_retrieve,
                cache_dir=config.cache_dir,
                retriever=retriever.retrieve,
            )
        except ValueError as e:
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)

    click.echo(click.style(f"Plot saved to: {output}", fg='green'))

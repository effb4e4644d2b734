"""Batch command: lollipop plots for every gene in a gene config table."""

import logging
import sys
from pathlib import Path

import click

from protein_lollipop.batch import (
    STATUS_ERROR,
    STATUS_NO_VARIANTS,
    STATUS_SUCCESS,
    SUMMARY_FILENAME,
    batch_process_genes,
)
from protein_lollipop.config import apply_overrides
from protein_lollipop.retrieval import ProteinDataRetriever

logger = logging.getLogger(__name__)


@click.command('batch')
@click.argument('variant_file', type=click.Path(exists=True, path_type=Path))
@click.argument('gene_config', type=click.Path(exists=True, path_type=Path))
@click.option(
    '--domains-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Domain TSV (skipped if missing)'
)
@click.option(
    '--ptms-file',
    type=click.Path(path_type=Path),
    default=None,
    help='PTM TSV (skipped if missing)'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Output directory (default: output_dir from config)'
)
@click.option(
    '--impact',
    'impacts',
    multiple=True,
    help='Impact to keep; repeatable (default: filters.impacts from config)'
)
@click.option(
    '--max-af',
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help='Maximum allele frequency (default: filters.max_allele_frequency from config)'
)
@click.option(
    '--keep-reference-genotype',
    is_flag=True,
    help='Keep variants with genotype 0/0'
)
@click.pass_context
def batch(ctx, variant_file, gene_config, domains_file, ptms_file, output_dir,
          impacts, max_af, keep_reference_genotype):
    """Create lollipop plots for all genes listed in GENE_CONFIG.

    GENE_CONFIG is a TSV with a gene_name column and an optional
    protein_length column. Each gene's plot is written to
    {output_dir}/{gene}_lollipop.png and a batch_summary.yaml records the run.

    Examples:

        protein-lollipop batch variants.tsv genes.tsv --output-dir plots/

        protein-lollipop batch variants.tsv genes.tsv --impact HIGH --max-af 0.001
    """
    config = apply_overrides(ctx.obj['config'], {
        'output_dir': output_dir,
        'filters.impacts': list(impacts) if impacts else None,
        'filters.max_allele_frequency': max_af,
        'filters.exclude_reference_genotype': False if keep_reference_genotype else None,
    })
    filters = config.filters

    output_dir = config.output_dir
    selected_impacts = filters.impacts
    max_allele_frequency = filters.max_allele_frequency
    exclude_reference = filters.exclude_reference_genotype

    click.echo(click.style("=== Batch Lollipop Plots ===", bold=True))
    click.echo(f"  Impacts: {', '.join(selected_impacts) if selected_impacts else 'all'}")
    click.echo(f"  Max AF:  {max_allele_frequency}")
    click.echo(f"  Exclude 0/0 genotypes: {'yes' if exclude_reference else 'no'}")
    click.echo()

    with ProteinDataRetriever.from_config(config) as retriever:
        try:
            report = batch_process_genes(
                variant_file,
                gene_config,
                domain_file=domains_file,
                ptm_file=ptms_file,
                output_dir=output_dir,
                impacts=selected_impacts,
                max_allele_frequency=max_allele_frequency,
                exclude_reference_genotype=exclude_reference,
                auto_retrieve=config.auto_retrieve,
                cache_dir=config.cache_dir,
                retriever=retriever.retrieve,
                width=config.plot.width,
                height=config.plot.height,
                dpi=config.plot.dpi,
            )
        except (FileNotFoundError, ValueError) as e:
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)

    for result in report.results:
        if result.status == STATUS_SUCCESS:
            click.echo(click.style(
                f"  {result.gene_name}: {result.variant_count} variants -> {result.output_file}",
                fg='green'
            ))
        elif result.status == STATUS_NO_VARIANTS:
            click.echo(click.style(f"  {result.gene_name}: no variants", fg='yellow'))
        else:
            click.echo(click.style(f"  {result.gene_name}: ERROR {result.message}", fg='red'))

    counts = report.status_counts
    click.echo()
    click.echo(click.style("=== Summary ===", bold=True))
    click.echo(f"Successfully processed: {counts[STATUS_SUCCESS]} / {len(report.results)} genes")
    if counts[STATUS_NO_VARIANTS]:
        click.echo(f"Genes with no variants: {counts[STATUS_NO_VARIANTS]}")
    if counts[STATUS_ERROR]:
        click.echo(f"Genes with errors: {counts[STATUS_ERROR]}")
    click.echo(f"Summary written to: {Path(output_dir) / SUMMARY_FILENAME}")

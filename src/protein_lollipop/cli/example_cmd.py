"""Example command: write demo BRCA1 input tables."""

from pathlib import Path

import click

from protein_lollipop.example_data import save_example_data


@click.command('example')
@click.argument('output_dir', type=click.Path(path_type=Path))
@click.option('--seed', type=int, default=42, help='Random seed (default: 42)')
def example(output_dir, seed):
    """Write example variant, domain, PTM and gene-config TSVs to OUTPUT_DIR.

    Try them with:

        protein-lollipop plot OUTPUT_DIR/example_variants.tsv BRCA1 \\
            --domains-file OUTPUT_DIR/example_domains.tsv \\
            --ptms-file OUTPUT_DIR/example_ptms.tsv --protein-length 1863
    """
    paths = save_example_data(output_dir, seed=seed)
    for name, path in paths.items():
        click.echo(click.style(f"  {name}: {path}", fg='green'))

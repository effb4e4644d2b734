"""Main CLI entry point for protein-lollipop.

Provides command group with global options and subcommands for retrieval,
plotting and batch processing.
"""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from protein_lollipop import __version__
from protein_lollipop.config import LollipopConfig, load_config
from protein_lollipop.cli.retrieve_cmd import retrieve_cmd
from protein_lollipop.cli.plot_cmd import plot
from protein_lollipop.cli.batch_cmd import batch
from protein_lollipop.cli.cache_cmd import cache
from protein_lollipop.cli.example_cmd import example


DEFAULT_CONFIG_PATH = Path("config/default.yaml")

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.version_option(__version__, prog_name="protein-lollipop")
@click.option(
    '--config',
    type=click.Path(path_type=Path),
    default=str(DEFAULT_CONFIG_PATH),
    help='Path to configuration YAML file (built-in defaults if absent)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Protein-lollipop: lollipop plots of variants on protein coordinates.

    Plots variants along a protein annotated with domains and PTM sites,
    retrieving missing domain, PTM and protein-length data from UniProt.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Set logging level
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")

    try:
        if config.exists():
            ctx.obj['config'] = load_config(config)
        elif config == DEFAULT_CONFIG_PATH:
            logging.debug(f"No config at {config}, using built-in defaults")
            ctx.obj['config'] = LollipopConfig()
        else:
            raise FileNotFoundError(f"Config file not found: {config}")
    except (FileNotFoundError, ValueError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


@cli.command()
@click.pass_context
def info(ctx):
    """Display tool information and configuration summary."""
    config = ctx.obj['config']
    config_path = ctx.obj['config_path']

    click.echo(f"protein-lollipop v{__version__}")
    click.echo(f"Config: {config_path if config_path.exists() else '(built-in defaults)'}")
    click.echo()

    config_hash = config.config_hash()
    click.echo(f"Config Hash: {config_hash[:16]}...")
    click.echo()

    click.echo(click.style("Paths:", bold=True))
    click.echo(f"  Cache Directory: {config.cache_dir}")
    click.echo(f"  Cache Backend:   {config.cache_backend}")
    click.echo(f"  Output Directory: {config.output_dir}")
    click.echo()

    click.echo(click.style("UniProt API:", bold=True))
    click.echo(f"  Base URL:     {config.api.base_url}")
    click.echo(f"  Organism:     {config.api.organism}")
    click.echo(f"  Timeout:      {config.api.timeout_seconds}s")
    click.echo(f"  Max Attempts: {config.api.max_retries}")
    click.echo(f"  Auto-retrieve: {'yes' if config.auto_retrieve else 'no'}")
    click.echo()

    click.echo(click.style("Plot:", bold=True))
    click.echo(f"  Size: {config.plot.width} x {config.plot.height} in @ {config.plot.dpi} dpi")
    click.echo()

    impacts = ", ".join(config.filters.impacts) if config.filters.impacts else "all"
    click.echo(click.style("Batch Filters:", bold=True))
    click.echo(f"  Impacts: {impacts}")
    click.echo(f"  Max AF:  {config.filters.max_allele_frequency}")
    click.echo(f"  Exclude 0/0 genotypes: {'yes' if config.filters.exclude_reference_genotype else 'no'}")


# Register commands
cli.add_command(retrieve_cmd)
cli.add_command(plot)
cli.add_command(batch)
cli.add_command(cache)
cli.add_command(example)


if __name__ == '__main__':
    cli()

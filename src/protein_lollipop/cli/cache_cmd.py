"""Cache commands: manage the per-gene protein data cache."""

from pathlib import Path

import click

from protein_lollipop.persistence import open_cache


@click.group('cache')
def cache():
    """Manage the protein data cache."""


@cache.command('clear')
@click.option(
    '--cache-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Cache directory (default: cache_dir from config)'
)
@click.pass_context
def clear(ctx, cache_dir):
    """Remove all cached protein data."""
    config = ctx.obj['config']
    if cache_dir is None:
        cache_dir = config.cache_dir

    removed = open_cache(cache_dir, config.cache_backend).clear()
    click.echo(click.style(f"Removed {removed} cached genes from {cache_dir}", fg='green'))

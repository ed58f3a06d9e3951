"""Main CLI entry point for phenonet-pipeline.

Provides the command group with global options and subcommands.
"""

import logging
from pathlib import Path

import click
import structlog

from phenonet_pipeline import __version__
from phenonet_pipeline.config.loader import load_config
from phenonet_pipeline.cli.network_cmd import network
from phenonet_pipeline.cli.variants_cmd import filter_variants


# Configure logging; structlog events go through stdlib so --verbose applies to both
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.processors.KeyValueRenderer(key_order=["event"]),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to pipeline configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Phenonet-pipeline: rank candidate disease genes by phenotype and
    protein-interaction network evidence.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"Phenonet Pipeline v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        click.echo(f"Config Hash: {config.config_hash()[:16]}...")
        click.echo()

        click.echo(click.style("Inputs:", bold=True))
        click.echo(f"  Interaction Matrix: {config.interaction_matrix_path or '(none - network evidence disabled)'}")
        click.echo(f"  Phenotype Matches:  {config.phenotype_matches_path}")
        click.echo(f"  DuckDB Path:        {config.duckdb_path}")
        click.echo(f"  Output Directory:   {config.output_dir}")
        click.echo()

        click.echo(click.style("Network Scoring:", bold=True))
        click.echo(f"  High-Quality Cutoff: > {config.network.high_quality_cutoff}")
        click.echo(f"  Walker Score Offset: {config.network.walker_score_offset}")
        click.echo()

        click.echo(click.style("Variant Filter:", bold=True))
        click.echo(f"  Off-Target Types: {', '.join(t.value for t in config.variants.off_target_types)}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


cli.add_command(network)
cli.add_command(filter_variants)


if __name__ == '__main__':
    cli()

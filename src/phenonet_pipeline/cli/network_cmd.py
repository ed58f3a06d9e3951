"""Network commands: phenotype-weighted interaction network prioritisation."""

import logging
import sys

import click

from phenonet_pipeline.config.loader import load_config, load_config_with_overrides
from phenonet_pipeline.network import (
    NETWORK_TABLE_NAME,
    load_to_duckdb,
    run_network_prioritisation,
)
from phenonet_pipeline.output import OutputFormat, write_results
from phenonet_pipeline.persistence import PipelineStore, ProvenanceTracker

logger = logging.getLogger(__name__)


@click.group('network')
def network():
    """Score genes using phenotype-weighted protein interaction evidence."""
    pass


@network.command('score')
@click.option(
    '--gene',
    'gene_ids',
    type=int,
    multiple=True,
    help='Entrez gene ID to prioritise (repeatable; default: all known genes)'
)
@click.option(
    '--format',
    'formats',
    type=click.Choice([f.value for f in OutputFormat]),
    multiple=True,
    default=[OutputFormat.TSV.value],
    help='Output format (repeatable)'
)
@click.option(
    '--cutoff',
    type=float,
    default=None,
    help='Override the high-quality phenotype score cutoff'
)
@click.option(
    '--force',
    is_flag=True,
    help='Re-run scoring even if a checkpoint for this configuration and inputs exists'
)
@click.pass_context
def score(ctx, gene_ids, formats, cutoff, force):
    """Prioritise genes by direct phenotype and network evidence.

    Builds the weighted interaction projection from genes whose phenotype
    score exceeds the cutoff, finds each gene's closest such neighbour, and
    writes the combined ranking.

    Examples:

        # Score every gene in the inputs
        phenonet-pipeline network score

        # Score two genes with a stricter cutoff, as TSV and Parquet
        phenonet-pipeline network score --gene 2200 --gene 4647 --cutoff 0.7 --format tsv --format parquet
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== Network Prioritisation ===", bold=True))
    click.echo()

    store = None
    try:
        click.echo("Loading configuration...")
        if cutoff is None:
            config = load_config(config_path)
        else:
            config = load_config_with_overrides(config_path, {"network.high_quality_cutoff": cutoff})
        click.echo(click.style(f"  Config loaded: {config_path}", fg='green'))
        click.echo(f"  High-quality cutoff: > {config.network.high_quality_cutoff}")
        click.echo()

        store = PipelineStore.from_config(config)
        provenance = ProvenanceTracker.from_config(config)

        full_run = not gene_ids
        if full_run and not force and store.has_checkpoint(NETWORK_TABLE_NAME, provenance.checkpoint_key):
            click.echo(click.style(
                f"{NETWORK_TABLE_NAME} checkpoint exists for this configuration and inputs. "
                "Reusing it (use --force to re-run).",
                fg='yellow'
            ))
            df = store.load_dataframe(NETWORK_TABLE_NAME)
        else:
            click.echo("Scoring genes...")
            df = run_network_prioritisation(config, gene_ids or None)
            provenance.record_step('prioritise_genes', {
                'gene_count': df.height,
                'requested_genes': list(gene_ids),
            })
            if full_run:
                load_to_duckdb(df, store, provenance)
        click.echo(click.style(f"  Prioritised {df.height} genes", fg='green'))
        click.echo()

        paths = write_results(df, config.output_dir, formats)
        provenance.save_sidecar(paths[formats[0]])

        network_hits = df.filter(df['evidence_source'] == 'network').height
        phenotype_hits = df.filter(df['evidence_source'] == 'phenotype').height

        click.echo(click.style("=== Summary ===", bold=True))
        click.echo(f"Total Genes: {df.height}")
        click.echo(f"  Phenotype-supported: {phenotype_hits}")
        click.echo(f"  Network-supported: {network_hits}")
        for name, path in paths.items():
            click.echo(f"  {name}: {path}")
        click.echo()
        click.echo(click.style("Network prioritisation complete!", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"Network prioritisation failed: {e}", fg='red'), err=True)
        logger.exception("Network prioritisation failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()

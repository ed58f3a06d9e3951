"""Variant command: remove off-target variants before prioritisation."""

import logging
import sys
from pathlib import Path

import click

from phenonet_pipeline.config.loader import load_config
from phenonet_pipeline.variants import filter_off_target_variants, load_variants

logger = logging.getLogger(__name__)


@click.command('filter-variants')
@click.argument('input_path', type=click.Path(exists=True, path_type=Path))
@click.option(
    '--output',
    'output_path',
    type=click.Path(path_type=Path),
    default=None,
    help='Filtered variant TSV (default: <input>.on_target.tsv)'
)
@click.pass_context
def filter_variants(ctx, input_path, output_path):
    """Remove intergenic, intronic and other off-target variants from a TSV.

    INPUT_PATH must be tab-separated with a variant_type column.
    """
    config_path = ctx.obj['config_path']

    try:
        config = load_config(config_path)
        df = load_variants(input_path)

        filtered, result = filter_off_target_variants(df, config.variants.off_target_types)

        if output_path is None:
            output_path = input_path.with_suffix(".on_target.tsv")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        filtered.write_csv(output_path, separator="\t", include_header=True)

        click.echo(click.style("=== Exome Target Filter ===", bold=True))
        click.echo(f"Variants before: {result.before}")
        click.echo(f"Variants after:  {result.after}")
        for variant_type, count in result.type_counts.items():
            click.echo(f"  {variant_type}: {count}")
        for message in result.messages:
            click.echo(message)
        click.echo(click.style(f"Wrote {output_path}", fg='green'))

    except Exception as e:
        click.echo(click.style(f"Variant filtering failed: {e}", fg='red'), err=True)
        logger.exception("Variant filtering failed")
        sys.exit(1)

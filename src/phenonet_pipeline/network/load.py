"""Persist prioritised genes to DuckDB with provenance tracking."""

import polars as pl
import structlog

from phenonet_pipeline.network.models import NETWORK_TABLE_NAME
from phenonet_pipeline.persistence import PipelineStore, ProvenanceTracker

logger = structlog.get_logger()


def load_to_duckdb(
    df: pl.DataFrame,
    store: PipelineStore,
    provenance: ProvenanceTracker,
) -> None:
    """Save the prioritised gene table, replacing any previous run.

    The checkpoint description is the run's checkpoint key, so
    ``store.has_checkpoint(NETWORK_TABLE_NAME, provenance.checkpoint_key)``
    tells whether the stored table matches the current configuration and
    input files.
    """
    logger.info("network_load_start", row_count=df.height)

    source_counts = (
        df.group_by("evidence_source").agg(pl.len()).sort("evidence_source").to_dicts()
        if df.height
        else []
    )

    store.save_dataframe(df, NETWORK_TABLE_NAME, description=provenance.checkpoint_key)

    provenance.record_step("load_network_prioritised_genes", {
        "row_count": df.height,
        "evidence_source_distribution": source_counts,
    })

    logger.info("network_load_complete", row_count=df.height)


def query_network_candidates(store: PipelineStore, min_score: float = 0.5) -> pl.DataFrame:
    """Genes whose network score is at least ``min_score``, strongest first."""
    df = store.load_dataframe(NETWORK_TABLE_NAME)
    if df is None:
        raise ValueError(f"No '{NETWORK_TABLE_NAME}' table in store; run network scoring first")

    result = (
        df.filter(pl.col("network_score") >= min_score)
        .sort(["network_score", "gene_id"], descending=[True, False])
    )
    logger.info("network_query_complete", min_score=min_score, result_count=result.height)
    return result

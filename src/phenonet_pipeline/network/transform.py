"""Batch network scoring and phenotype/network evidence combination."""

from collections.abc import Iterable
from typing import Optional

import polars as pl
import structlog

from phenonet_pipeline.config.schema import PipelineConfig
from phenonet_pipeline.network.matrix import InteractionMatrix, load_interaction_matrix
from phenonet_pipeline.network.phenotype_store import PhenotypeMatchStore, load_phenotype_matches
from phenonet_pipeline.network.scorer import NetworkScorer

logger = structlog.get_logger()

NETWORK_MATCH_SCHEMA = {
    "query_gene_id": pl.Int64,
    "match_gene_id": pl.Int64,
    "match_gene_symbol": pl.String,
    "walker_score": pl.Float64,
    "match_model_count": pl.Int64,
}

PRIORITISED_SCHEMA = {
    "gene_id": pl.Int64,
    "gene_symbol": pl.String,
    "phenotype_score": pl.Float64,
    "network_score": pl.Float64,
    "network_match_gene_id": pl.Int64,
    "network_match_gene_symbol": pl.String,
    "priority_score": pl.Float64,
    "evidence_source": pl.String,
}


def score_network_matches(scorer: NetworkScorer, gene_ids: Iterable[int]) -> pl.DataFrame:
    """Closest network match for each gene, one row per query gene.

    NO_HIT genes keep their row with NULL match columns and a zero model count.
    """
    rows = []
    for gene_id in gene_ids:
        match = scorer.closest_network_match(gene_id)
        models = match.best_match_models
        rows.append({
            "query_gene_id": gene_id,
            "match_gene_id": match.match_gene_id,
            "match_gene_symbol": models[0].gene_symbol if models else None,
            "walker_score": match.score if match.is_hit else None,
            "match_model_count": len(models),
        })

    df = pl.DataFrame(rows, schema=NETWORK_MATCH_SCHEMA)

    logger.info(
        "score_network_matches_complete",
        query_count=df.height,
        hit_count=df.filter(pl.col("match_gene_id").is_not_null()).height,
    )
    return df


def prioritise_genes(
    scorer: NetworkScorer,
    store: PhenotypeMatchStore,
    gene_ids: Iterable[int],
) -> pl.DataFrame:
    """
    Combine direct phenotype evidence with network evidence per gene.

    priority_score is the larger of the gene's best phenotype model score and
    its network walker score, ignoring whichever is missing. evidence_source
    names the winner ("phenotype" on ties) or "none" when both are missing.

    Returns:
        DataFrame sorted by priority_score DESC (NULLs last), gene_id ASC
    """
    gene_ids = list(dict.fromkeys(gene_ids))
    matches = score_network_matches(scorer, gene_ids)

    rows = []
    for gene_id, match in zip(gene_ids, matches.iter_rows(named=True)):
        models = store.models_for_gene(gene_id)
        phenotype_score = store.best_score(gene_id)
        network_score = match["walker_score"]

        if phenotype_score is None and network_score is None:
            priority_score, evidence_source = None, "none"
        elif network_score is None or (phenotype_score is not None and phenotype_score >= network_score):
            priority_score, evidence_source = phenotype_score, "phenotype"
        else:
            priority_score, evidence_source = network_score, "network"

        rows.append({
            "gene_id": gene_id,
            "gene_symbol": models[0].gene_symbol if models else None,
            "phenotype_score": phenotype_score,
            "network_score": network_score,
            "network_match_gene_id": match["match_gene_id"],
            "network_match_gene_symbol": match["match_gene_symbol"],
            "priority_score": priority_score,
            "evidence_source": evidence_source,
        })

    df = pl.DataFrame(rows, schema=PRIORITISED_SCHEMA).sort(
        ["priority_score", "gene_id"],
        descending=[True, False],
        nulls_last=True,
    )

    logger.info(
        "prioritise_genes_complete",
        gene_count=df.height,
        phenotype_supported=df.filter(pl.col("evidence_source") == "phenotype").height,
        network_supported=df.filter(pl.col("evidence_source") == "network").height,
    )
    return df


def build_scorer(
    config: PipelineConfig,
    store: PhenotypeMatchStore,
    matrix: Optional[InteractionMatrix] = None,
) -> NetworkScorer:
    """Network scorer for a config; EMPTY when no interaction matrix is configured."""
    if matrix is None:
        if config.interaction_matrix_path is None:
            logger.warning("network_scorer_disabled", reason="no_interaction_matrix_configured")
            return NetworkScorer.EMPTY
        matrix = load_interaction_matrix(config.interaction_matrix_path)

    return NetworkScorer.build(
        matrix,
        store,
        config.network.high_quality_cutoff,
        config.network.walker_score_offset,
    )


def run_network_prioritisation(
    config: PipelineConfig,
    gene_ids: Optional[Iterable[int]] = None,
) -> pl.DataFrame:
    """End-to-end prioritisation from the configured input files.

    Steps:
    1. Load phenotype match models
    2. Load the interaction matrix and build the network scorer
    3. Prioritise the requested genes, or every gene known to either input

    Args:
        config: Pipeline configuration
        gene_ids: Genes to prioritise; defaults to all phenotype store genes
            followed by all interaction matrix genes

    Returns:
        Prioritised genes DataFrame
    """
    logger.info("run_network_prioritisation_start", config_hash=config.config_hash()[:16])

    logger.info("step_1_load_phenotype_matches")
    store = load_phenotype_matches(config.phenotype_matches_path)

    logger.info("step_2_build_network_scorer")
    matrix = None
    if config.interaction_matrix_path is not None:
        matrix = load_interaction_matrix(config.interaction_matrix_path)
    scorer = build_scorer(config, store, matrix)

    logger.info("step_3_prioritise_genes")
    if gene_ids is None:
        gene_ids = store.gene_ids() + list(matrix.gene_ids if matrix is not None else ())

    return prioritise_genes(scorer, store, gene_ids)

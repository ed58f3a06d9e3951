"""Phenotype-weighted protein interaction network evidence.

Scores genes by their closeness, in a precomputed protein-protein
interaction matrix, to genes with strong phenotype matches:
- InteractionMatrix: read-only gene x gene interaction strengths
- PhenotypeMatchStore: phenotype match models per gene
- NetworkScorer: weighted projection and closest-match queries
"""

from phenonet_pipeline.network.models import (
    GeneMatch,
    NO_HIT,
    NETWORK_TABLE_NAME,
    PhenotypeMatchModel,
    WALKER_SCORE_OFFSET,
)
from phenonet_pipeline.network.matrix import InteractionMatrix, load_interaction_matrix
from phenonet_pipeline.network.phenotype_store import PhenotypeMatchStore, load_phenotype_matches
from phenonet_pipeline.network.scorer import (
    NetworkScorer,
    build_weighted_projection,
    select_high_quality_scores,
)
from phenonet_pipeline.network.transform import (
    build_scorer,
    prioritise_genes,
    run_network_prioritisation,
    score_network_matches,
)
from phenonet_pipeline.network.load import load_to_duckdb, query_network_candidates

__all__ = [
    "GeneMatch",
    "NO_HIT",
    "NETWORK_TABLE_NAME",
    "PhenotypeMatchModel",
    "WALKER_SCORE_OFFSET",
    "InteractionMatrix",
    "load_interaction_matrix",
    "PhenotypeMatchStore",
    "load_phenotype_matches",
    "NetworkScorer",
    "build_weighted_projection",
    "select_high_quality_scores",
    "build_scorer",
    "prioritise_genes",
    "run_network_prioritisation",
    "score_network_matches",
    "load_to_duckdb",
    "query_network_candidates",
]

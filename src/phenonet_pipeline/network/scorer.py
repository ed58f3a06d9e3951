"""Phenotype-weighted protein interaction network scorer.

Genes without a strong direct phenotype match can still be promising
candidates when they sit close, in the interaction network, to genes that
do have one. The scorer:

1. selects the genes whose best phenotype match score exceeds a cutoff,
2. projects the interaction matrix onto those genes' columns, each scaled
   by the gene's phenotype score,
3. for a query gene, picks the highest weighted value on its row (ignoring
   the query gene's own column) and reports that neighbour.

Steps 1 and 2 run once at construction; queries only read the frozen state.
"""

from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np
import structlog

from phenonet_pipeline.network.matrix import InteractionMatrix
from phenonet_pipeline.network.models import (
    GeneMatch,
    NO_HIT,
    WALKER_SCORE_OFFSET,
)
from phenonet_pipeline.network.phenotype_store import PhenotypeMatchStore

logger = structlog.get_logger()


def select_high_quality_scores(
    store: PhenotypeMatchStore,
    cutoff: float,
) -> dict[int, float]:
    """Best phenotype score per gene, for genes scoring strictly above the cutoff.

    Genes keep the store's first-seen order, which becomes the column order
    of the weighted projection.

    Args:
        store: Phenotype match models per gene
        cutoff: Exclusive lower bound on model score

    Returns:
        Insertion-ordered dict of gene ID -> best qualifying score
    """
    scores: dict[int, float] = {}
    for gene_id in store.gene_ids():
        for model in store.models_for_gene(gene_id):
            if model.score > cutoff:
                logger.debug(
                    "high_quality_score_added",
                    gene_symbol=model.gene_symbol,
                    score=model.score,
                )
                if gene_id not in scores or model.score > scores[gene_id]:
                    scores[gene_id] = model.score

    logger.info("high_quality_scores_selected", gene_count=len(scores), cutoff=cutoff)
    return scores


def build_weighted_projection(
    matrix: InteractionMatrix,
    high_quality_scores: Mapping[int, float],
) -> np.ndarray:
    """Interaction matrix columns for the high-quality genes, scaled by their scores.

    Column i holds the interaction column of the i-th gene in
    ``high_quality_scores`` multiplied by that gene's score. Genes missing
    from the matrix keep an all-zero column.

    Returns:
        float32 array of shape (matrix rows, number of high-quality genes)
    """
    rows = matrix.row_count()
    projection = np.zeros((rows, len(high_quality_scores)), dtype=np.float32)

    missing = 0
    for column_index, (gene_id, score) in enumerate(high_quality_scores.items()):
        if matrix.contains_gene(gene_id):
            projection[:, column_index] = matrix.column_for_gene(gene_id) * np.float32(score)
        else:
            missing += 1

    logger.info(
        "weighted_projection_built",
        rows=rows,
        columns=projection.shape[1],
        genes_missing_from_matrix=missing,
    )
    return projection


class NetworkScorer:
    """
    Finds the best network-supported phenotype match for a gene.

    Instances are immutable after construction and safe to share between
    threads.
    """

    EMPTY: "NetworkScorer"

    def __init__(
        self,
        matrix: InteractionMatrix,
        store: PhenotypeMatchStore,
        cutoff: float,
        walker_score_offset: float = WALKER_SCORE_OFFSET,
    ):
        """
        Args:
            matrix: Symmetric gene-gene interaction matrix
            store: Phenotype match models per gene; the models of the
                high-quality genes are copied, later store changes are not seen
            cutoff: Genes need a model scoring strictly above this to seed the network
            walker_score_offset: Added to the weighted interaction value of a match
        """
        self._matrix = matrix
        self._cutoff = cutoff
        self._walker_score_offset = walker_score_offset

        self._high_quality_scores = MappingProxyType(select_high_quality_scores(store, cutoff))
        self._high_quality_gene_ids = tuple(self._high_quality_scores)
        self._high_quality_gene_array = np.array(self._high_quality_gene_ids, dtype=np.int64)
        self._match_models = {
            gene_id: store.models_for_gene(gene_id) for gene_id in self._high_quality_gene_ids
        }

        projection = build_weighted_projection(matrix, self._high_quality_scores)
        projection.flags.writeable = False
        self._projection = projection

    @classmethod
    def build(
        cls,
        matrix: InteractionMatrix,
        store: PhenotypeMatchStore,
        cutoff: float,
        walker_score_offset: float = WALKER_SCORE_OFFSET,
    ) -> "NetworkScorer":
        return cls(matrix, store, cutoff, walker_score_offset)

    @property
    def cutoff(self) -> float:
        return self._cutoff

    @property
    def high_quality_scores(self) -> Mapping[int, float]:
        return self._high_quality_scores

    @property
    def high_quality_gene_ids(self) -> tuple[int, ...]:
        return self._high_quality_gene_ids

    @property
    def weighted_projection(self) -> np.ndarray:
        return self._projection

    def closest_network_match(self, gene_id: int) -> GeneMatch:
        """
        Best-connected high-quality phenotype gene for a query gene.

        Returns NO_HIT when the gene is not in the interaction matrix, when no
        gene passed the phenotype cutoff, or when the only high-quality gene
        is the query gene itself.

        The match score is ``walker_score_offset`` plus the weighted
        interaction value between the two genes.
        """
        if not self._matrix.contains_gene(gene_id) or not self._high_quality_gene_ids:
            return NO_HIT

        row_index = self._matrix.row_index_for_gene(gene_id)
        column_index = self._best_column_index(row_index, gene_id)
        if column_index is None:
            return NO_HIT

        walker_score = self._walker_score_offset + float(self._projection[row_index, column_index])
        match_gene_id = self._high_quality_gene_ids[column_index]

        return GeneMatch(
            query_gene_id=gene_id,
            match_gene_id=match_gene_id,
            score=walker_score,
            best_match_models=self._match_models[match_gene_id],
        )

    def _best_column_index(self, row_index: int, gene_id: int) -> Optional[int]:
        # Running max starts at 0, so with no connectivity at all the last
        # scanned column still matches. Ties go to the later column.
        candidates = self._high_quality_gene_array != gene_id
        if not candidates.any():
            return None

        row = self._projection[row_index]
        best_score = max(0.0, float(row[candidates].max()))
        hits = np.flatnonzero(candidates & (row == best_score))
        if hits.size == 0:
            return None
        return int(hits[-1])


NetworkScorer.EMPTY = NetworkScorer(InteractionMatrix.EMPTY, PhenotypeMatchStore(), 0.0)

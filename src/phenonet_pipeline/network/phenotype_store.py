"""Per-gene phenotype match models."""

from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import polars as pl
import structlog

from phenonet_pipeline.network.models import PhenotypeMatchModel

logger = structlog.get_logger()

REQUIRED_COLUMNS = ("gene_id", "gene_symbol", "score")
OPTIONAL_COLUMNS = ("model_id", "organism", "disease_id", "disease_term")


class PhenotypeMatchStore:
    """
    Gene ID -> ordered list of phenotype match models.

    Genes are kept in first-seen order and each gene's models in insertion
    order. The order decides projection column order, and with it which
    neighbour wins a tied network match.
    """

    def __init__(self):
        self._models: dict[int, list[PhenotypeMatchModel]] = {}

    @classmethod
    def from_models(cls, models: Iterable[PhenotypeMatchModel]) -> "PhenotypeMatchStore":
        store = cls()
        for model in models:
            store.add(model)
        return store

    @classmethod
    def from_dataframe(cls, df: pl.DataFrame) -> "PhenotypeMatchStore":
        """Build a store from a frame with one row per model, in row order.

        Raises:
            ValueError: If a required column is missing
            pydantic.ValidationError: If a row is invalid (e.g. negative score)
        """
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Phenotype matches missing required columns: {missing}")

        columns = list(REQUIRED_COLUMNS) + [c for c in OPTIONAL_COLUMNS if c in df.columns]
        return cls.from_models(
            PhenotypeMatchModel(**row) for row in df.select(columns).iter_rows(named=True)
        )

    def add(self, model: PhenotypeMatchModel) -> None:
        self._models.setdefault(model.gene_id, []).append(model)

    def models_for_gene(self, gene_id: int) -> tuple[PhenotypeMatchModel, ...]:
        return tuple(self._models.get(gene_id, ()))

    def gene_ids(self) -> list[int]:
        """Gene IDs in stable first-seen order."""
        return list(self._models)

    def best_score(self, gene_id: int) -> Optional[float]:
        """Highest model score for a gene, or None if it has no models."""
        models = self._models.get(gene_id)
        if not models:
            return None
        return max(model.score for model in models)

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, gene_id: object) -> bool:
        return gene_id in self._models


def load_phenotype_matches(path: Path) -> PhenotypeMatchStore:
    """Load phenotype match models from a TSV file.

    Required columns: gene_id, gene_symbol, score. Optional: model_id,
    organism, disease_id, disease_term.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a required column is missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Phenotype matches file not found: {path}")

    # Read as text so identifier columns keep their exact form
    df = pl.read_csv(path, separator="\t", infer_schema_length=0)
    if "gene_id" in df.columns and "score" in df.columns:
        df = df.with_columns(
            pl.col("gene_id").cast(pl.Int64),
            pl.col("score").cast(pl.Float64),
        )
    store = PhenotypeMatchStore.from_dataframe(df)

    logger.info(
        "load_phenotype_matches_complete",
        path=str(path),
        model_count=df.height,
        gene_count=len(store),
    )
    return store

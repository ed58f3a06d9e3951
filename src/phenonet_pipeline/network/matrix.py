"""Precomputed gene-gene interaction matrix."""

from pathlib import Path
from typing import Sequence

import numpy as np
import polars as pl
import structlog

logger = structlog.get_logger()


class InteractionMatrix:
    """
    Read-only square interaction-strength matrix indexed by gene ID.

    Values are typically random-walk-with-restart proximities over a
    protein-protein interaction graph. Row i and column i both belong to
    ``gene_ids[i]``; only columns are ever read by the network scorer.
    """

    EMPTY: "InteractionMatrix"

    def __init__(self, values: np.ndarray, gene_ids: Sequence[int]):
        """
        Args:
            values: Square matrix of non-negative, finite interaction values
            gene_ids: Gene ID for each row/column, in matrix order

        Raises:
            ValueError: If the matrix is not square, the gene IDs don't match
                its size or repeat, or any value is negative or non-finite
        """
        values = np.array(values, dtype=np.float32)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise ValueError(f"Interaction matrix must be square, got shape {values.shape}")

        gene_ids = [int(gene_id) for gene_id in gene_ids]
        if len(gene_ids) != values.shape[0]:
            raise ValueError(
                f"Expected {values.shape[0]} gene IDs for interaction matrix, got {len(gene_ids)}"
            )

        index = {gene_id: i for i, gene_id in enumerate(gene_ids)}
        if len(index) != len(gene_ids):
            raise ValueError("Interaction matrix gene IDs must be unique")

        if values.size and not np.isfinite(values).all():
            raise ValueError("Interaction matrix contains non-finite values")
        if values.size and (values < 0).any():
            raise ValueError("Interaction matrix contains negative values")

        values.flags.writeable = False
        self._values = values
        self._gene_ids = tuple(gene_ids)
        self._index = index

    @property
    def gene_ids(self) -> tuple[int, ...]:
        return self._gene_ids

    def contains_gene(self, gene_id: int) -> bool:
        return gene_id in self._index

    def row_index_for_gene(self, gene_id: int) -> int:
        """Row (and column) index of a gene. Raises KeyError if absent."""
        return self._index[gene_id]

    def column_for_gene(self, gene_id: int) -> np.ndarray:
        """Interaction values for a gene against every row, as a read-only view."""
        return self._values[:, self._index[gene_id]]

    def row_count(self) -> int:
        return self._values.shape[0]

    def column_count(self) -> int:
        return self._values.shape[1]

    def __repr__(self) -> str:
        return f"InteractionMatrix(rows={self.row_count()}, columns={self.column_count()})"


InteractionMatrix.EMPTY = InteractionMatrix(np.zeros((0, 0), dtype=np.float32), [])


def load_interaction_matrix(path: Path) -> InteractionMatrix:
    """Load an interaction matrix from disk.

    Supported layouts:
    - ``.npz`` archive with arrays ``matrix`` (N x N) and ``gene_ids`` (N)
    - Wide TSV with a ``gene_id`` column followed by one column per gene,
      columns in the same order as rows

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file layout is not recognised or the matrix is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Interaction matrix not found: {path}")

    logger.info("load_interaction_matrix_start", path=str(path))

    if path.suffix == ".npz":
        with np.load(path) as archive:
            missing = {"matrix", "gene_ids"} - set(archive.files)
            if missing:
                raise ValueError(f"Interaction matrix archive {path} missing arrays: {sorted(missing)}")
            matrix = InteractionMatrix(archive["matrix"], archive["gene_ids"].tolist())
    else:
        df = pl.read_csv(path, separator="\t")
        if "gene_id" not in df.columns:
            raise ValueError(f"Interaction matrix TSV {path} has no 'gene_id' column")
        df = df.with_columns(pl.col("gene_id").cast(pl.Float64).cast(pl.Int64))
        gene_ids = df["gene_id"].to_list()
        try:
            column_ids = [int(float(c)) for c in df.columns if c != "gene_id"]
        except ValueError:
            raise ValueError(f"Interaction matrix TSV {path} has non-numeric gene column headers") from None
        if column_ids != gene_ids:
            raise ValueError("Interaction matrix TSV columns must list the same genes as its rows, in order")
        values = df.drop("gene_id").to_numpy().astype(np.float32)
        matrix = InteractionMatrix(values, gene_ids)

    logger.info(
        "load_interaction_matrix_complete",
        rows=matrix.row_count(),
        columns=matrix.column_count(),
    )
    return matrix

"""DuckDB-backed checkpoint storage for prioritisation results."""

from pathlib import Path
from typing import Optional

import duckdb
import polars as pl


class PipelineStore:
    """
    Stores result tables in DuckDB alongside a checkpoint ledger.

    Each saved table gets a row in ``_checkpoints`` recording its size and a
    free-text description (the config hash is put there by callers), so a
    rerun with unchanged inputs can reuse the stored table.
    """

    def __init__(self, db_path: Path):
        """
        Args:
            db_path: DuckDB database file; parent directories are created
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(str(self.db_path))

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS _checkpoints (
                table_name VARCHAR PRIMARY KEY,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                row_count INTEGER,
                description VARCHAR
            )
        """)

    def save_dataframe(self, df: pl.DataFrame, table_name: str, description: str = "") -> None:
        """Create or replace ``table_name`` from a polars DataFrame and record the checkpoint."""
        self.conn.register("_incoming", df.to_arrow())
        try:
            self.conn.execute(f"CREATE OR REPLACE TABLE {table_name} AS SELECT * FROM _incoming")
        finally:
            self.conn.unregister("_incoming")

        self.conn.execute("""
            INSERT OR REPLACE INTO _checkpoints (table_name, row_count, description, created_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
        """, [table_name, df.height, description])

    def load_dataframe(self, table_name: str) -> Optional[pl.DataFrame]:
        """Load a table as a polars DataFrame, or None if it doesn't exist."""
        try:
            return self.conn.execute(f"SELECT * FROM {table_name}").pl()
        except duckdb.CatalogException:
            return None

    def has_checkpoint(self, table_name: str, description: Optional[str] = None) -> bool:
        """
        Whether a checkpoint exists for ``table_name``.

        When ``description`` is given, the stored description must match too.
        """
        query = "SELECT COUNT(*) FROM _checkpoints WHERE table_name = ?"
        params: list = [table_name]
        if description is not None:
            query += " AND description = ?"
            params.append(description)
        return self.conn.execute(query, params).fetchone()[0] > 0

    def delete_checkpoint(self, table_name: str) -> None:
        self.conn.execute(f"DROP TABLE IF EXISTS {table_name}")
        self.conn.execute("DELETE FROM _checkpoints WHERE table_name = ?", [table_name])

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @classmethod
    def from_config(cls, config: "PipelineConfig") -> "PipelineStore":
        return cls(config.duckdb_path)

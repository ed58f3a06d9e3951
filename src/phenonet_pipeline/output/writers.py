"""Format-selectable writers for prioritised gene tables, with YAML provenance sidecar."""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

import polars as pl
import structlog
import yaml

logger = structlog.get_logger()


class OutputFormat(str, Enum):
    """Supported result file formats; the value is the file extension."""

    TSV = "tsv"
    PARQUET = "parquet"
    JSON = "json"


def _write_tsv(df: pl.DataFrame, path: Path) -> None:
    df.write_csv(path, separator="\t", include_header=True)


def _write_parquet(df: pl.DataFrame, path: Path) -> None:
    df.write_parquet(path, compression="snappy")


def _write_json(df: pl.DataFrame, path: Path) -> None:
    df.write_json(path)


_WRITERS: dict[OutputFormat, Callable[[pl.DataFrame, Path], None]] = {
    OutputFormat.TSV: _write_tsv,
    OutputFormat.PARQUET: _write_parquet,
    OutputFormat.JSON: _write_json,
}


def get_results_writer(output_format: OutputFormat | str) -> Callable[[pl.DataFrame, Path], None]:
    """Writer function for a format.

    Raises:
        ValueError: If the format is not an OutputFormat value
    """
    return _WRITERS[OutputFormat(output_format)]


def write_results(
    df: pl.DataFrame,
    output_dir: Path,
    formats: Iterable[OutputFormat | str] = (OutputFormat.TSV,),
    filename_base: str = "prioritised_genes",
) -> dict[str, Path]:
    """
    Write a prioritised gene table in each requested format.

    A ``{filename_base}.provenance.yaml`` sidecar lists the files written,
    the row count and how many genes are supported by each evidence source.

    Args:
        df: Prioritised genes (see network.transform.prioritise_genes)
        output_dir: Directory for output files (created if needed)
        formats: Output formats to write
        filename_base: File name without extension

    Returns:
        Mapping of format value (plus "provenance") to written path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths: dict[str, Path] = {}
    for output_format in dict.fromkeys(OutputFormat(f) for f in formats):
        path = output_dir / f"{filename_base}.{output_format.value}"
        get_results_writer(output_format)(df, path)
        paths[output_format.value] = path

    source_counts = {}
    if "evidence_source" in df.columns:
        source_counts = {
            row["evidence_source"]: row["len"]
            for row in df.group_by("evidence_source").agg(pl.len()).sort("evidence_source").to_dicts()
        }

    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "output_files": [p.name for p in paths.values()],
        "statistics": {
            "total_genes": df.height,
            "evidence_sources": source_counts,
        },
        "column_names": df.columns,
    }
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"
    with open(provenance_path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)
    paths["provenance"] = provenance_path

    logger.info("write_results_complete", files=[str(p) for p in paths.values()], rows=df.height)
    return paths

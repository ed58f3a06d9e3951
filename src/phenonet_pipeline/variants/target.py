"""Remove off-target variants from a variant table."""

from collections.abc import Iterable
from pathlib import Path

import polars as pl
import structlog

from phenonet_pipeline.variants.models import (
    DEFAULT_OFF_TARGET_TYPES,
    TargetFilterResult,
    VariantType,
)

logger = structlog.get_logger()

VARIANT_TYPE_COLUMN = "variant_type"


def load_variants(path: Path) -> pl.DataFrame:
    """Read an annotated variant TSV.

    The file must carry a ``variant_type`` column holding VariantType values;
    all other columns are passed through untouched.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the variant_type column is missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Variant file not found: {path}")

    df = pl.read_csv(path, separator="\t", infer_schema_length=10000)
    if VARIANT_TYPE_COLUMN not in df.columns:
        raise ValueError(f"Variant file {path} has no '{VARIANT_TYPE_COLUMN}' column")

    logger.info("load_variants_complete", path=str(path), row_count=df.height)
    return df


def filter_off_target_variants(
    df: pl.DataFrame,
    off_target_types: Iterable[VariantType] = DEFAULT_OFF_TARGET_TYPES,
) -> tuple[pl.DataFrame, TargetFilterResult]:
    """Drop variants whose functional class is off-target.

    Every input row is counted by variant type before filtering. Rows with a
    NULL variant type are kept, as there is nothing to say they are off-target.

    Args:
        df: Variant table with a variant_type column
        off_target_types: Functional classes to remove

    Returns:
        Tuple of (filtered DataFrame, TargetFilterResult)
    """
    if df.is_empty():
        logger.error("filter_off_target_variants_skip", reason="no_variants_to_filter")
        return df, TargetFilterResult()

    off_target = sorted(VariantType(t).value for t in off_target_types)

    type_counts = {
        row[VARIANT_TYPE_COLUMN]: row["len"]
        for row in (
            df.filter(pl.col(VARIANT_TYPE_COLUMN).is_not_null())
            .group_by(VARIANT_TYPE_COLUMN)
            .agg(pl.len())
            .sort(VARIANT_TYPE_COLUMN)
            .to_dicts()
        )
    }

    filtered = df.filter(
        pl.col(VARIANT_TYPE_COLUMN).is_null()
        | ~pl.col(VARIANT_TYPE_COLUMN).is_in(off_target)
    )

    removed = df.height - filtered.height
    result = TargetFilterResult(
        before=df.height,
        after=filtered.height,
        type_counts=type_counts,
        messages=[
            f"Removed a total of {removed} off-target variants from further consideration",
            "Off target variants are defined as intergenic or intronic but not in splice sequences",
        ],
    )

    logger.info(
        "filter_off_target_variants_complete",
        before=result.before,
        after=result.after,
        removed=result.removed,
        off_target_types=off_target,
    )

    return filtered, result

"""Variant pre-filtering ahead of gene prioritisation.

Removes variants whose functional class places them outside the exome
target (intergenic, intronic, synonymous, ...) and keeps per-class counts
of what was seen.
"""

from phenonet_pipeline.variants.models import (
    VariantType,
    DEFAULT_OFF_TARGET_TYPES,
    TargetFilterResult,
)
from phenonet_pipeline.variants.target import (
    filter_off_target_variants,
    load_variants,
)

__all__ = [
    "VariantType",
    "DEFAULT_OFF_TARGET_TYPES",
    "TargetFilterResult",
    "filter_off_target_variants",
    "load_variants",
]

"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from phenonet_pipeline.variants.models import DEFAULT_OFF_TARGET_TYPES, VariantType


class NetworkScoringConfig(BaseModel):
    """Settings for the phenotype-weighted interaction network scorer."""

    high_quality_cutoff: float = Field(
        default=0.6,
        ge=0.0,
        allow_inf_nan=False,
        description="Phenotype scores strictly above this value seed the network",
    )
    walker_score_offset: float = Field(
        default=0.5,
        ge=0.0,
        allow_inf_nan=False,
        description="Calibration offset added to the weighted interaction value",
    )


class TargetFilterConfig(BaseModel):
    """Settings for the off-target variant filter."""

    off_target_types: list[VariantType] = Field(
        default_factory=lambda: sorted(DEFAULT_OFF_TARGET_TYPES),
        description="Variant functional classes removed from consideration",
    )


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    data_dir: Path = Field(
        ...,
        description="Directory holding input data files",
    )
    output_dir: Path = Field(
        ...,
        description="Directory for result files",
    )
    duckdb_path: Path = Field(
        ...,
        description="Path to DuckDB database file",
    )
    interaction_matrix_path: Optional[Path] = Field(
        None,
        description="Precomputed interaction matrix (.npz or wide TSV); "
                    "network evidence is disabled when unset",
    )
    phenotype_matches_path: Path = Field(
        ...,
        description="TSV of per-gene phenotype match models",
    )
    network: NetworkScoringConfig = Field(
        default_factory=NetworkScoringConfig,
        description="Network scorer settings",
    )
    variants: TargetFilterConfig = Field(
        default_factory=TargetFilterConfig,
        description="Variant filter settings",
    )

    @field_validator("data_dir", "output_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        recorded in provenance metadata and checkpoint descriptions.
        """
        config_json = json.dumps(
            self.model_dump(mode="json"),
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()

    def input_fingerprint(self) -> str:
        """
        SHA-256 over the path, size and modification time of each input file.

        Changes whenever an input file is replaced or edited, without reading
        the (potentially large) file contents.
        """
        inputs = {}
        for name, path in (
            ("phenotype_matches", self.phenotype_matches_path),
            ("interaction_matrix", self.interaction_matrix_path),
        ):
            if path is not None and path.exists():
                stat = path.stat()
                inputs[name] = [str(path), stat.st_size, stat.st_mtime_ns]
            else:
                inputs[name] = None
        return hashlib.sha256(json.dumps(inputs, sort_keys=True).encode()).hexdigest()

"""Persistence layer for prioritisation checkpoints and provenance tracking."""

from phenonet_pipeline.persistence.duckdb_store import PipelineStore
from phenonet_pipeline.persistence.provenance import ProvenanceTracker

__all__ = ["PipelineStore", "ProvenanceTracker"]

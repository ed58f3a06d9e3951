"""Provenance tracking for reproducible prioritisation runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ProvenanceTracker:
    """
    Collects the pipeline version, config hash and processing steps of a run.
    """

    def __init__(self, pipeline_version: str, config: "PipelineConfig"):
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.input_fingerprint = config.input_fingerprint()
        self.network_settings = config.network.model_dump()
        self.processing_steps: list[dict] = []
        self.created_at = datetime.now(timezone.utc)

    @property
    def checkpoint_key(self) -> str:
        """Identifies results computed from this config and these input files."""
        return f"{self.config_hash}:{self.input_fingerprint}"

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """Append a named step, with optional details, timestamped now."""
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def create_metadata(self) -> dict:
        return {
            "pipeline_version": self.pipeline_version,
            "config_hash": self.config_hash,
            "input_fingerprint": self.input_fingerprint,
            "network_settings": self.network_settings,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Write metadata next to an output file as ``{stem}.provenance.json``.

        Returns:
            Path of the sidecar file
        """
        sidecar_path = Path(output_path).with_suffix(".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        with open(sidecar_path, "w") as f:
            json.dump(self.create_metadata(), f, indent=2, default=str)
        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: "PipelineConfig",
        version: Optional[str] = None,
    ) -> "ProvenanceTracker":
        """Create a tracker for ``config``, defaulting to the installed package version."""
        if version is None:
            from phenonet_pipeline import __version__
            version = __version__
        return cls(version, config)

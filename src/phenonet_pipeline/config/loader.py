"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import PipelineConfig


def load_config(config_path: Path | str) -> PipelineConfig:
    """
    Load and validate pipeline configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated PipelineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    yaml_content = config_path.read_text()

    return pydantic_yaml.parse_yaml_raw_as(PipelineConfig, yaml_content)


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> PipelineConfig:
    """
    Load config from YAML and apply dictionary overrides.

    Keys may be dotted to reach nested sections, e.g.
    ``{"network.high_quality_cutoff": 0.7}``.

    Raises:
        FileNotFoundError: If config file doesn't exist
        KeyError: If a dotted key names a section that doesn't exist
        pydantic.ValidationError: If final config is invalid
    """
    config_dict = load_config(config_path).model_dump()

    for key, value in overrides.items():
        *sections, leaf = key.split(".")
        target = config_dict
        for section in sections:
            target = target[section]
        target[leaf] = value

    return PipelineConfig.model_validate(config_dict)

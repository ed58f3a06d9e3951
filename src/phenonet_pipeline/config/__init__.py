from .loader import load_config, load_config_with_overrides
from .schema import PipelineConfig, NetworkScoringConfig, TargetFilterConfig

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "PipelineConfig",
    "NetworkScoringConfig",
    "TargetFilterConfig",
]

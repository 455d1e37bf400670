"""Configuration and layer rules for layerlint."""

from rules.config import (
    ConfigError,
    ContractsConfig,
    ImportsConfig,
    LayerPattern,
    LayersConfig,
    LintConfig,
    load_config,
)
from rules.layers import (
    UNKNOWN_LAYER,
    build_allowed_deps,
    classify_import,
    classify_layer,
    classify_path,
    is_allowed_dependency,
)

__all__ = [
    "ConfigError",
    "ContractsConfig",
    "ImportsConfig",
    "LayerPattern",
    "LayersConfig",
    "LintConfig",
    "UNKNOWN_LAYER",
    "build_allowed_deps",
    "classify_import",
    "classify_layer",
    "classify_path",
    "is_allowed_dependency",
    "load_config",
]

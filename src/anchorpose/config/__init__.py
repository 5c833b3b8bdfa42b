"""Configuration module for Anchorpose."""

from anchorpose.config.schema import (
    AnchorposeConfig,
    DetectionConfig,
    LogLevel,
    MarkerPositionBehavior,
    ProjectConfig,
)
from anchorpose.config.loader import get_default_config, load_config, save_config
from anchorpose.config.validation import (
    ConfigurationError,
    check_detection,
    validate_config,
)

__all__ = [
    "AnchorposeConfig",
    "DetectionConfig",
    "LogLevel",
    "MarkerPositionBehavior",
    "ProjectConfig",
    "ConfigurationError",
    "check_detection",
    "get_default_config",
    "load_config",
    "save_config",
    "validate_config",
]

"""
Configuration loader for Anchorpose.

Handles YAML loading, validation and saving of the configuration tree.
"""

from pathlib import Path

from anchorpose.config.schema import AnchorposeConfig
from anchorpose.config.validation import validate_config
from anchorpose.utils.io import load_yaml, save_yaml


def load_config(config_path: Path) -> AnchorposeConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated AnchorposeConfig instance.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        pydantic.ValidationError: If a field fails schema validation.
        ConfigurationError: If cross-field validation fails.
    """
    raw_config = load_yaml(Path(config_path))

    config = AnchorposeConfig(**raw_config)
    validate_config(config)

    return config


def save_config(config: AnchorposeConfig, output_path: Path) -> None:
    """
    Save configuration to a YAML file.

    Args:
        config: AnchorposeConfig instance to save.
        output_path: Path to the output YAML file.
    """
    save_yaml(config.model_dump(mode="json"), Path(output_path))


def get_default_config() -> AnchorposeConfig:
    """
    Get default configuration with all default values.

    Returns:
        AnchorposeConfig instance with defaults.
    """
    return AnchorposeConfig()

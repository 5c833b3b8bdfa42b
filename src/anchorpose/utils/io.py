"""
I/O utilities for Anchorpose.

YAML is the on-disk format for configuration, recorded observation logs and
exported marker poses.
"""

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: Path) -> dict[str, Any]:
    """
    Load a YAML mapping from file.

    Args:
        path: Path to YAML file.

    Returns:
        Parsed YAML content, empty dict for an empty file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If the document is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping in {path}")
    return data


def save_yaml(data: dict[str, Any], path: Path) -> None:
    """
    Save data to YAML file, creating parent directories.

    Args:
        data: Data to save.
        path: Output path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

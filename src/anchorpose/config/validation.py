"""
Configuration validation for Anchorpose.

Provides cross-field checks beyond Pydantic schema validation. Each check
catches a combination of knobs under which detection could never complete.
"""

from typing import Optional

from anchorpose.config.schema import (
    AnchorposeConfig,
    DetectionConfig,
    MarkerPositionBehavior,
)


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


def validate_config(config: AnchorposeConfig) -> None:
    """
    Perform cross-field validation on configuration.

    Args:
        config: AnchorposeConfig instance to validate.

    Raises:
        ConfigurationError: If validation fails. The message lists every
            problem found, not only the first.
    """
    _raise_if_invalid(validate_detection(config.detection))


def check_detection(
    detection: DetectionConfig,
    behavior: Optional[MarkerPositionBehavior] = None,
) -> None:
    """
    Validate detection knobs against the behavior they will run under.

    Raises:
        ConfigurationError: If the knobs can never complete under
            ``behavior``.
    """
    _raise_if_invalid(validate_detection(detection, behavior))


def _raise_if_invalid(errors: list[str]) -> None:
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(
            f"  - {e}" for e in errors
        )
        raise ConfigurationError(error_msg)


def validate_detection(
    detection: DetectionConfig,
    behavior: Optional[MarkerPositionBehavior] = None,
) -> list[str]:
    """
    Validate detection knobs, returning a list of problems.

    Args:
        detection: Detection knobs.
        behavior: Behavior the knobs will run under, defaults to the
            configured one. Pass it when the behavior is overridden.
    """
    errors: list[str] = []
    behavior = MarkerPositionBehavior(behavior or detection.marker_position_behavior)

    if behavior == MarkerPositionBehavior.STATIONARY:
        if detection.maximum_marker_sample_count < detection.required_observations:
            errors.append(
                "detection.maximum_marker_sample_count must be >= "
                "required_observations for stationary markers"
            )

        if detection.required_inlier_count > detection.maximum_marker_sample_count:
            errors.append(
                "detection.required_inlier_count must be <= "
                "maximum_marker_sample_count for stationary markers"
            )

    return errors

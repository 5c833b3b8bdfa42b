"""
Pydantic configuration schema for Anchorpose.

This module defines the configuration models with strict validation,
enum fields and default values. The detection knobs are read-only from the
point of view of the completion strategies.
"""

from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class MarkerPositionBehavior(str, Enum):
    """Whether tracked markers are fixed in the world or expected to move."""

    STATIONARY = "stationary"
    MOVING = "moving"


# ============================================================================
# Sub-configuration Models
# ============================================================================


class ProjectConfig(BaseModel):
    """Project-level configuration."""

    name: str = Field(default="Anchorpose", description="Project name")
    run_id: str = Field(
        default="auto",
        validate_default=True,
        description="Run identifier (auto generates UUID)",
    )
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    marker_log_level: Optional[LogLevel] = Field(
        default=None,
        description="Level for the anchorpose.markers loggers (defaults to log_level)",
    )

    @field_validator("run_id", mode="before")
    @classmethod
    def generate_run_id(cls, v: str) -> str:
        """Generate UUID if run_id is 'auto'."""
        if v == "auto":
            return str(uuid.uuid4())[:8]
        return v


class DetectionConfig(BaseModel):
    """Marker observation aggregation knobs."""

    marker_position_behavior: MarkerPositionBehavior = Field(
        default=MarkerPositionBehavior.MOVING,
        description="Whether markers are stationary or moving during detection",
    )
    required_observations: int = Field(
        default=5,
        ge=1,
        description="Minimum number of marker detections required to compute an average pose",
    )
    required_inlier_count: int = Field(
        default=5,
        ge=1,
        description="Inlier detections required after outlier removal",
    )
    maximum_marker_sample_count: int = Field(
        default=15,
        ge=1,
        description="Rolling buffer size used by the stationary strategy",
    )
    maximum_position_distance_standard_deviation: float = Field(
        default=0.01,
        ge=0,
        description="Max standard deviation of inlier distance from the average, meters",
    )
    maximum_rotation_angle_standard_deviation: float = Field(
        default=0.75,
        ge=0,
        description="Max standard deviation of inlier angle from the average, degrees",
    )
    marker_inlier_standard_deviation_threshold: float = Field(
        default=1.5,
        gt=0,
        description="Standard deviations from the mean beyond which a sample is an outlier",
    )

    model_config = {"validate_assignment": True}


# ============================================================================
# Root Configuration Model
# ============================================================================


class AnchorposeConfig(BaseModel):
    """Root configuration model for Anchorpose."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)

    model_config = {"extra": "forbid"}

"""Logging module for Anchorpose."""

from anchorpose.logging.setup import configure_logging, get_logger
from anchorpose.logging.telemetry import CycleRecord, DetectionTelemetry

__all__ = [
    "configure_logging",
    "get_logger",
    "CycleRecord",
    "DetectionTelemetry",
]

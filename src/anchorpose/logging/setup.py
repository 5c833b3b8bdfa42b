"""
Structured logging setup for Anchorpose.

Marker rejections are a normal, repeating outcome while detections converge,
so they are reported as structured log events rather than raised as errors.
Those per-sample reports live under ``anchorpose.markers`` at DEBUG, and can
be enabled on their own with ``marker_level`` while the rest of the
application stays at the global level.
"""

import logging
import sys
from typing import Any, Optional, TextIO

import numpy as np
import structlog
from structlog.types import EventDict, Processor

MARKERS_LOGGER = "anchorpose.markers"


def configure_logging(
    level: str = "INFO",
    run_id: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
    marker_level: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR).
        run_id: Optional run identifier to include in all log messages.
        json_format: If True, output JSON logs.
        stream: Output stream, defaults to stderr so command output on
            stdout stays clean.
        marker_level: Level for the ``anchorpose.markers`` loggers. DEBUG
            shows every outlier and rejected completion. Defaults to
            ``level``.
    """
    numeric_level = _numeric_level(level)

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=numeric_level,
        force=True,
    )
    logging.getLogger(MARKERS_LOGGER).setLevel(
        _numeric_level(marker_level) if marker_level else logging.NOTSET
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _numpy_to_builtin,
    ]

    if run_id:
        shared_processors.insert(0, _add_run_id(run_id))

    renderer: Processor
    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _numeric_level(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def _numpy_to_builtin(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Turn numpy arrays and scalars in event values into plain Python values."""
    for key, value in event_dict.items():
        if isinstance(value, np.ndarray):
            event_dict[key] = value.tolist()
        elif isinstance(value, np.generic):
            event_dict[key] = value.item()
    return event_dict


def _add_run_id(run_id: str) -> Processor:
    """Create processor that stamps run_id on every event."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["run_id"] = run_id
        return event_dict

    return processor


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name, usually the calling module's ``__name__``.

    Returns:
        Bound logger instance.
    """
    return structlog.get_logger(name)

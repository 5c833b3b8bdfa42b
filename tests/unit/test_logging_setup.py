"""Unit tests for structured logging setup."""

import io
import json
import logging

import numpy as np
import pytest
import structlog

from anchorpose.logging.setup import MARKERS_LOGGER, configure_logging, get_logger


@pytest.fixture
def log_stream():
    """Captured log output, with logging reset afterwards."""
    stream = io.StringIO()
    yield stream
    logging.getLogger(MARKERS_LOGGER).setLevel(logging.NOTSET)
    structlog.reset_defaults()


def _events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_marker_level_is_independent(self, log_stream) -> None:
        """Test marker debug reports show while other loggers stay at WARNING."""
        configure_logging("WARNING", json_format=True, stream=log_stream, marker_level="DEBUG")

        get_logger("anchorpose.markers.outliers").debug("marker_outlier", marker_id=3)
        get_logger("anchorpose.cli").info("replay_started")

        events = _events(log_stream)
        assert [e["event"] for e in events] == ["marker_outlier"]
        assert events[0]["marker_id"] == 3

    def test_marker_level_defaults_to_global(self, log_stream) -> None:
        """Test marker loggers follow the global level when not set."""
        configure_logging("INFO", json_format=True, stream=log_stream)

        get_logger("anchorpose.markers.outliers").debug("marker_outlier")
        get_logger("anchorpose.markers.strategies").info("marker_final")

        assert [e["event"] for e in _events(log_stream)] == ["marker_final"]

    def test_numpy_values_are_serializable(self, log_stream) -> None:
        """Test numpy arrays and scalars are rendered as plain JSON values."""
        configure_logging("INFO", json_format=True, stream=log_stream)

        get_logger("anchorpose.markers.strategies").info(
            "marker_final",
            position=np.array([0.5, -0.2, 1.5]),
            inliers=np.int64(5),
        )

        event = _events(log_stream)[0]
        assert event["position"] == [0.5, -0.2, 1.5]
        assert event["inliers"] == 5

    def test_run_id_is_stamped(self, log_stream) -> None:
        """Test every event carries the run id."""
        configure_logging("INFO", run_id="abc123", json_format=True, stream=log_stream)

        get_logger("anchorpose.cli").info("replay_started")

        assert _events(log_stream)[0]["run_id"] == "abc123"

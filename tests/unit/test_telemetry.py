"""Unit tests for detection telemetry."""

import pytest

from anchorpose.logging.telemetry import CycleRecord, DetectionTelemetry


def _record(cycle: int, finalized: int = 0, latency_ms: float = 1.0) -> CycleRecord:
    return CycleRecord(
        cycle=cycle,
        detections=1,
        markers_evaluated=1,
        markers_finalized=finalized,
        buffered_samples=cycle,
        latency_ms=latency_ms,
    )


class TestDetectionTelemetry:
    """Tests for DetectionTelemetry."""

    def test_empty_summary(self) -> None:
        """Test summary before any cycle."""
        summary = DetectionTelemetry().get_summary()
        assert summary["cycles"] == 0
        assert summary["latency"] == {"mean": 0.0, "min": 0.0, "max": 0.0}

    def test_window_is_bounded(self) -> None:
        """Test old records fall out of the window but totals persist."""
        telemetry = DetectionTelemetry(window_size=3)
        for cycle in range(1, 6):
            telemetry.record(_record(cycle, finalized=1))

        assert [r.cycle for r in telemetry.records] == [3, 4, 5]
        assert telemetry.total_cycles == 5
        assert telemetry.total_finalized == 5

    def test_latency_stats(self) -> None:
        """Test latency mean/min/max over the window."""
        telemetry = DetectionTelemetry()
        for cycle, latency in enumerate([1.0, 2.0, 6.0], start=1):
            telemetry.record(_record(cycle, latency_ms=latency))

        stats = telemetry.get_latency_stats()
        assert stats["mean"] == pytest.approx(3.0)
        assert stats["min"] == 1.0
        assert stats["max"] == 6.0

    def test_summary_rates(self) -> None:
        """Test finalize rate and buffered sample mean."""
        telemetry = DetectionTelemetry()
        telemetry.record(_record(1, finalized=0))
        telemetry.record(_record(2, finalized=1))

        summary = telemetry.get_summary()
        assert summary["finalize_rate"] == pytest.approx(0.5)
        assert summary["mean_buffered_samples"] == pytest.approx(1.5)

    def test_clear(self) -> None:
        """Test clear resets window and totals."""
        telemetry = DetectionTelemetry()
        telemetry.record(_record(1, finalized=1))
        telemetry.clear()
        assert telemetry.records == []
        assert telemetry.total_cycles == 0

    def test_record_to_dict(self) -> None:
        """Test record serialization rounds latency."""
        data = _record(4, latency_ms=0.123456).to_dict()
        assert data["cycle"] == 4
        assert data["latency_ms"] == 0.123

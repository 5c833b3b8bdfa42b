"""
Telemetry data collection for Anchorpose.

Keeps a sliding window of per-cycle aggregation records so convergence
behaviour (how often markers finalize, how much evidence is buffered) can be
reported without touching the core control flow.
"""

from dataclasses import dataclass, field
from typing import Any
from collections import deque


@dataclass
class CycleRecord:
    """Single processing cycle measurement."""

    cycle: int
    detections: int
    markers_evaluated: int
    markers_finalized: int
    buffered_samples: int
    latency_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "cycle": self.cycle,
            "detections": self.detections,
            "markers_evaluated": self.markers_evaluated,
            "markers_finalized": self.markers_finalized,
            "buffered_samples": self.buffered_samples,
            "latency_ms": round(self.latency_ms, 3),
        }


@dataclass
class DetectionTelemetry:
    """
    Collects and aggregates per-cycle detection telemetry.

    Maintains a sliding window of recent cycles for statistics, plus running
    totals over the collector's lifetime.
    """

    window_size: int = 100
    _records: deque[CycleRecord] = field(default_factory=deque)
    _total_cycles: int = 0
    _total_finalized: int = 0

    def __post_init__(self) -> None:
        """Initialize deque with correct maxlen."""
        self._records = deque(maxlen=self.window_size)

    def record(self, record: CycleRecord) -> None:
        """Record a cycle measurement."""
        self._records.append(record)
        self._total_cycles += 1
        self._total_finalized += record.markers_finalized

    @property
    def records(self) -> list[CycleRecord]:
        """Records currently inside the window, oldest first."""
        return list(self._records)

    @property
    def total_cycles(self) -> int:
        return self._total_cycles

    @property
    def total_finalized(self) -> int:
        return self._total_finalized

    def get_latency_stats(self) -> dict[str, float]:
        """
        Calculate latency statistics over the window.

        Returns:
            Dictionary with mean, min, max latency in ms.
        """
        if not self._records:
            return {"mean": 0.0, "min": 0.0, "max": 0.0}

        latencies = [r.latency_ms for r in self._records]
        return {
            "mean": sum(latencies) / len(latencies),
            "min": min(latencies),
            "max": max(latencies),
        }

    def get_summary(self) -> dict[str, Any]:
        """
        Get summary of collected telemetry.

        Returns:
            Summary dictionary.
        """
        if not self._records:
            return {
                "cycles": self._total_cycles,
                "finalized": self._total_finalized,
                "latency": {"mean": 0.0, "min": 0.0, "max": 0.0},
            }

        window = len(self._records)
        return {
            "cycles": self._total_cycles,
            "finalized": self._total_finalized,
            "latency": self.get_latency_stats(),
            "finalize_rate": sum(r.markers_finalized for r in self._records) / window,
            "mean_buffered_samples": (
                sum(r.buffered_samples for r in self._records) / window
            ),
        }

    def clear(self) -> None:
        """Clear all collected data."""
        self._records.clear()
        self._total_cycles = 0
        self._total_finalized = 0

#!/usr/bin/env python3
"""
Latency Benchmark Utility for Anchorpose.

Measures per-cycle aggregation latency for a scene of noisy, stationary
markers with occasional misdetections, under both marker position behaviors.

Usage:
    python scripts/benchmark_latency.py --markers 8 --iterations 1000
"""

import argparse
import statistics
import sys
import time
from typing import List

import numpy as np

from anchorpose.config.schema import DetectionConfig, MarkerPositionBehavior
from anchorpose.markers.aggregator import ObservationAggregator
from anchorpose.markers.types import PoseSample
from anchorpose.utils.math3d import euler_to_quaternion


def generate_frame(
    rng: np.random.Generator,
    markers: int,
    position_noise: float = 0.002,
    angle_noise_deg: float = 0.3,
    outlier_rate: float = 0.05,
) -> List[PoseSample]:
    """
    Generate one frame of detections for markers laid out on a line.

    Args:
        rng: Random generator.
        markers: Number of markers in view.
        position_noise: Position noise sigma in meters.
        angle_noise_deg: Yaw noise sigma in degrees.
        outlier_rate: Probability that a detection is a misdetection.

    Returns:
        Detections for the frame.
    """
    frame = []
    for marker_id in range(markers):
        position = np.array([0.3 * marker_id, 0.0, 1.5])
        yaw_deg = 10.0 * marker_id
        if rng.random() < outlier_rate:
            position = position + rng.normal(0.0, 0.1, 3)
            yaw_deg += rng.normal(0.0, 20.0)
        position = position + rng.normal(0.0, position_noise, 3)
        yaw_deg += rng.normal(0.0, angle_noise_deg)
        rotation = euler_to_quaternion(0.0, 0.0, np.radians(yaw_deg))
        frame.append(PoseSample(marker_id, position, rotation))
    return frame


def benchmark_aggregation(
    iterations: int,
    frames: List[List[PoseSample]],
    behavior: MarkerPositionBehavior,
) -> tuple[List[float], int]:
    """
    Benchmark aggregation cycle latency.

    Args:
        iterations: Number of cycles.
        frames: Pre-generated frames, cycled through.
        behavior: Marker position behavior to benchmark.

    Returns:
        Latency measurements in milliseconds and the number of finalized poses.
    """
    aggregator = ObservationAggregator(DetectionConfig(), behavior)
    latencies = []
    finalized = 0

    for i in range(iterations):
        frame = frames[i % len(frames)]
        start = time.perf_counter()
        update = aggregator.add_detections(frame)
        end = time.perf_counter()
        latencies.append((end - start) * 1000)
        finalized += len(update)

    return latencies, finalized


def print_statistics(name: str, latencies: List[float]) -> None:
    """Print latency statistics."""
    if len(latencies) < 2:
        print(f"{name}: Not enough data")
        return

    ordered = sorted(latencies)
    print(f"\n{name}")
    print("-" * 50)
    print(f"  Samples:     {len(latencies)}")
    print(f"  Mean:        {statistics.mean(latencies):.3f} ms")
    print(f"  Median:      {statistics.median(latencies):.3f} ms")
    print(f"  Std Dev:     {statistics.stdev(latencies):.3f} ms")
    print(f"  Min:         {ordered[0]:.3f} ms")
    print(f"  Max:         {ordered[-1]:.3f} ms")
    print(f"  P95:         {ordered[int(len(ordered) * 0.95)]:.3f} ms")
    print(f"  P99:         {ordered[int(len(ordered) * 0.99)]:.3f} ms")


def main(argv: List[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Latency benchmark utility for Anchorpose marker aggregation.",
    )

    parser.add_argument(
        "--iterations",
        "-n",
        type=int,
        default=1000,
        help="Number of aggregation cycles",
    )

    parser.add_argument(
        "--markers",
        "-m",
        type=int,
        default=8,
        help="Markers in view per frame",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for synthetic detections",
    )

    args = parser.parse_args(argv)

    print("=" * 60)
    print("ANCHORPOSE AGGREGATION BENCHMARK")
    print("=" * 60)
    print(f"Iterations: {args.iterations}")
    print(f"Markers:    {args.markers}")

    rng = np.random.default_rng(args.seed)
    frames = [generate_frame(rng, args.markers) for _ in range(100)]

    for behavior in MarkerPositionBehavior:
        latencies, finalized = benchmark_aggregation(args.iterations, frames, behavior)
        print_statistics(f"Aggregation ({behavior.value})", latencies)
        print(f"  Finalized:   {finalized}")

    print("\n" + "=" * 60)
    print("BENCHMARK COMPLETE")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())

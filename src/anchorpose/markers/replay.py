"""
Replay of recorded marker observations.

Observation logs are YAML documents of the form::

    frames:
      - - id: 3
          position: [0.10, 0.02, 1.50]
          rotation: [1.0, 0.0, 0.0, 0.0]   # w, x, y, z
      - []                                  # frame with no detections
      - - id: 3
          position: [0.11, 0.02, 1.49]
          euler_deg: [0.0, 0.5, 90.0]       # roll, pitch, yaw

Each frame is replayed as one aggregation cycle.
"""

from pathlib import Path
from typing import Any, Sequence

import numpy as np

from anchorpose.logging.setup import get_logger
from anchorpose.markers.aggregator import ObservationAggregator
from anchorpose.markers.types import MarkersUpdate, PoseSample
from anchorpose.utils.io import load_yaml
from anchorpose.utils.math3d import euler_to_quaternion

logger = get_logger(__name__)


def parse_detection(entry: dict[str, Any]) -> PoseSample:
    """
    Parse one detection entry from an observation log.

    Raises:
        ValueError: If a required field is missing or malformed.
    """
    if "id" not in entry or "position" not in entry:
        raise ValueError("detection requires 'id' and 'position'")

    if "rotation" in entry:
        rotation = entry["rotation"]
    elif "euler_deg" in entry:
        roll, pitch, yaw = np.radians(np.asarray(entry["euler_deg"], dtype=np.float64))
        rotation = euler_to_quaternion(roll, pitch, yaw)
    else:
        raise ValueError("detection requires 'rotation' or 'euler_deg'")

    return PoseSample(int(entry["id"]), entry["position"], rotation)


def load_observation_log(path: Path) -> list[list[PoseSample]]:
    """
    Load a recorded observation log.

    Args:
        path: Path to the YAML log.

    Returns:
        One list of samples per recorded frame.

    Raises:
        FileNotFoundError: If the log does not exist.
        ValueError: If a frame or detection is malformed.
    """
    raw = load_yaml(Path(path))
    raw_frames = raw.get("frames")
    if not isinstance(raw_frames, list):
        raise ValueError(f"Observation log {path} has no 'frames' list")

    frames: list[list[PoseSample]] = []
    for frame_index, raw_frame in enumerate(raw_frames):
        if raw_frame is None:
            raw_frame = []
        if not isinstance(raw_frame, list):
            raise ValueError(f"Frame {frame_index}: expected a list of detections")
        frame: list[PoseSample] = []
        for entry_index, entry in enumerate(raw_frame):
            try:
                frame.append(parse_detection(entry))
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"Frame {frame_index}, detection {entry_index}: {e}"
                ) from e
        frames.append(frame)

    logger.debug("observation_log_loaded", path=str(path), frames=len(frames))
    return frames


def replay(
    frames: Sequence[Sequence[PoseSample]],
    aggregator: ObservationAggregator,
) -> list[MarkersUpdate]:
    """
    Feed recorded frames through an aggregator, one cycle per frame.

    Returns:
        The batch produced by every cycle, including empty ones.
    """
    return [aggregator.add_detections(frame) for frame in frames]

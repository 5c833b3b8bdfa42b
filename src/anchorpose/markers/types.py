"""
Data types for marker observation aggregation.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from anchorpose.utils.math3d import normalize_quaternion, quaternion_to_euler


def _frozen_vector(values: ArrayLike, size: int, name: str) -> NDArray[np.float64]:
    # Always copy so detector-owned buffers are never aliased.
    array = np.array(values, dtype=np.float64).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"{name} must have {size} components, got {array.shape[0]}")
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class PoseSample:
    """
    One observation of a marker pose.

    Attributes:
        marker_id: Marker ID, stable per physical marker across frames.
        position: Position (x, y, z) in meters, in the world frame.
        rotation: Unit quaternion (w, x, y, z).
    """

    marker_id: int
    position: NDArray[np.float64]
    rotation: NDArray[np.float64]

    def __post_init__(self) -> None:
        object.__setattr__(self, "marker_id", int(self.marker_id))
        object.__setattr__(
            self, "position", _frozen_vector(self.position, 3, "position")
        )
        object.__setattr__(
            self,
            "rotation",
            _frozen_vector(normalize_quaternion(self.rotation), 4, "rotation"),
        )

    @classmethod
    def from_detection(cls, detection: "Detection") -> "PoseSample":
        """Build a sample from a PoseSample or a (marker_id, position, rotation) tuple."""
        if isinstance(detection, PoseSample):
            return cls(detection.marker_id, detection.position, detection.rotation)
        marker_id, position, rotation = detection
        return cls(marker_id, position, rotation)

    def __repr__(self) -> str:
        return (
            f"PoseSample(marker_id={self.marker_id}, "
            f"position={self.position.tolist()}, rotation={self.rotation.tolist()})"
        )


Detection = Union[PoseSample, tuple[int, ArrayLike, ArrayLike]]


@dataclass(frozen=True, eq=False)
class FinalizedPose:
    """
    Consolidated marker pose produced by a successful completion.

    Attributes:
        marker_id: Marker ID.
        position: Averaged position (x, y, z) in meters.
        rotation: Averaged unit quaternion (w, x, y, z).
        sample_count: Samples in the buffer when the pose was finalized.
        inlier_count: Samples that contributed to the averaged pose.
        position_std: Position standard deviation of contributing samples, meters.
        rotation_std: Rotation standard deviation of contributing samples, degrees.
    """

    marker_id: int
    position: NDArray[np.float64]
    rotation: NDArray[np.float64]
    sample_count: int
    inlier_count: int
    position_std: float = 0.0
    rotation_std: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a plain dictionary for serialization.

        Rotation is written both as a quaternion and as ZYX Euler angles in
        degrees, the two forms an observation log accepts.
        """
        return {
            "id": self.marker_id,
            "position": [round(float(v), 6) for v in self.position],
            "rotation": [round(float(v), 6) for v in self.rotation],
            "euler_deg": [
                round(float(np.degrees(a)), 4) for a in quaternion_to_euler(self.rotation)
            ],
            "sample_count": self.sample_count,
            "inlier_count": self.inlier_count,
            "position_std": round(self.position_std, 6),
            "rotation_std": round(self.rotation_std, 6),
        }


class MarkersUpdate(Mapping[int, FinalizedPose]):
    """
    Batch of poses finalized during one processing cycle.

    Read-only mapping from marker ID to FinalizedPose. An empty batch is a
    normal outcome while detections are still converging.
    """

    def __init__(self, cycle: int, poses: Mapping[int, FinalizedPose]) -> None:
        self._cycle = cycle
        self._poses = dict(poses)

    @property
    def cycle(self) -> int:
        """Index of the processing cycle that produced this batch."""
        return self._cycle

    def __getitem__(self, marker_id: int) -> FinalizedPose:
        return self._poses[marker_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._poses)

    def __len__(self) -> int:
        return len(self._poses)

    def __repr__(self) -> str:
        return f"MarkersUpdate(cycle={self._cycle}, markers={sorted(self._poses)})"

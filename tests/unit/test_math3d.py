"""Unit tests for quaternion math."""

import pytest
import numpy as np
from numpy.testing import assert_array_almost_equal

from anchorpose.utils.math3d import (
    euler_to_quaternion,
    quaternion_to_euler,
    normalize_quaternion,
    quaternion_angle_deg,
    quaternion_to_rotation_matrix,
    rotation_matrix_to_quaternion,
    slerp,
)


class TestNormalizeQuaternion:
    """Tests for normalize_quaternion."""

    def test_scales_to_unit_length(self) -> None:
        """Test normalization of a scaled quaternion."""
        q = normalize_quaternion([2.0, 0.0, 0.0, 0.0])
        assert_array_almost_equal(q, [1.0, 0.0, 0.0, 0.0])

    def test_rejects_zero(self) -> None:
        """Test zero quaternion raises."""
        with pytest.raises(ValueError):
            normalize_quaternion([0.0, 0.0, 0.0, 0.0])

    def test_rejects_wrong_size(self) -> None:
        """Test 3-vector raises."""
        with pytest.raises(ValueError):
            normalize_quaternion([1.0, 0.0, 0.0])


class TestSlerp:
    """Tests for slerp."""

    def test_endpoints(self, yaw_factory) -> None:
        """Test t=0 and t=1 return the inputs."""
        q0 = yaw_factory(10.0)
        q1 = yaw_factory(70.0)
        assert quaternion_angle_deg(slerp(q0, q1, 0.0), q0) == pytest.approx(0.0, abs=1e-6)
        assert quaternion_angle_deg(slerp(q0, q1, 1.0), q1) == pytest.approx(0.0, abs=1e-6)

    def test_halfway_about_single_axis(self, yaw_factory) -> None:
        """Test midpoint of two yaw rotations is the mean yaw."""
        result = slerp(yaw_factory(0.0), yaw_factory(90.0), 0.5)
        assert_array_almost_equal(result, yaw_factory(45.0))

    def test_takes_shortest_arc(self, yaw_factory) -> None:
        """Test interpolation against a negated quaternion stays on the short arc."""
        q0 = yaw_factory(0.0)
        q1 = -yaw_factory(40.0)
        result = slerp(q0, q1, 0.5)
        assert quaternion_angle_deg(result, yaw_factory(20.0)) == pytest.approx(0.0, abs=1e-6)

    def test_clamps_parameter(self, yaw_factory) -> None:
        """Test t outside [0, 1] is clamped."""
        q0 = yaw_factory(0.0)
        q1 = yaw_factory(60.0)
        assert quaternion_angle_deg(slerp(q0, q1, 2.0), q1) == pytest.approx(0.0, abs=1e-6)

    def test_nearly_parallel_inputs(self, yaw_factory) -> None:
        """Test nearly equal rotations interpolate to unit length."""
        result = slerp(yaw_factory(10.0), yaw_factory(10.5), 0.5)
        assert np.linalg.norm(result) == pytest.approx(1.0)
        assert quaternion_angle_deg(result, yaw_factory(10.25)) < 1e-3


class TestQuaternionAngle:
    """Tests for quaternion_angle_deg."""

    def test_identical_is_zero(self, identity_quaternion) -> None:
        """Test angle between equal rotations is exactly zero."""
        assert quaternion_angle_deg(identity_quaternion, identity_quaternion) == 0.0

    def test_sign_ambiguity(self, yaw_factory) -> None:
        """Test q and -q describe the same orientation."""
        q = yaw_factory(33.0)
        assert quaternion_angle_deg(q, -q) == 0.0

    def test_yaw_difference(self, yaw_factory) -> None:
        """Test angle equals the yaw difference."""
        assert quaternion_angle_deg(yaw_factory(10.0), yaw_factory(35.0)) == pytest.approx(25.0)

    def test_half_turn(self, identity_quaternion, yaw_factory) -> None:
        """Test 180 degree rotation."""
        assert quaternion_angle_deg(identity_quaternion, yaw_factory(180.0)) == pytest.approx(180.0)

    def test_small_angles_are_resolved(self, yaw_factory) -> None:
        """Test sub-degree differences are measured, not rounded to zero."""
        angle = quaternion_angle_deg(yaw_factory(0.0), yaw_factory(0.1))
        assert angle == pytest.approx(0.1, rel=1e-4)

    def test_small_angles_feed_deviation_limits(self, yaw_factory) -> None:
        """Test differences well below the default 0.75 degree limit stay nonzero."""
        assert 0.0 < quaternion_angle_deg(yaw_factory(30.0), yaw_factory(30.01)) < 0.02


class TestConversions:
    """Tests for rotation conversions."""

    def test_matrix_round_trip(self) -> None:
        """Test quaternion survives conversion to a matrix and back."""
        q = normalize_quaternion([0.9, 0.1, -0.3, 0.2])
        restored = rotation_matrix_to_quaternion(quaternion_to_rotation_matrix(q))
        assert_array_almost_equal(restored, q)

    def test_euler_yaw(self, yaw_factory) -> None:
        """Test yaw-only Euler angles give a Z rotation."""
        q = euler_to_quaternion(0.0, 0.0, np.radians(30.0))
        assert_array_almost_equal(q, yaw_factory(30.0))

    def test_quaternion_to_euler_yaw(self, yaw_factory) -> None:
        """Test a Z rotation converts back to yaw only."""
        roll, pitch, yaw = quaternion_to_euler(yaw_factory(30.0))
        assert roll == pytest.approx(0.0, abs=1e-12)
        assert pitch == pytest.approx(0.0, abs=1e-12)
        assert yaw == pytest.approx(np.radians(30.0))

    def test_quaternion_to_euler_round_trip(self) -> None:
        """Test Euler angles survive conversion to a quaternion and back."""
        angles = (0.1, -0.2, 0.3)
        assert_array_almost_equal(quaternion_to_euler(euler_to_quaternion(*angles)), angles)

"""
Pytest configuration and fixtures for capture tests.
"""

import pytest
import numpy as np
from lidar_capture.data_models import (
    BoundingCube, CameraIntrinsics, CameraPose, CapturedFrame, DepthFrame
)
from lidar_capture.utils.config_manager import ConfigManager


def pytest_configure(config):
    config.addinivalue_line("markers", "property: hypothesis property-based tests")


@pytest.fixture
def config_manager():
    """Fixture providing a configuration manager instance."""
    return ConfigManager()


@pytest.fixture
def sample_intrinsics():
    """Fixture providing intrinsics for a 64x48 depth map."""
    return CameraIntrinsics(fx=200.0, fy=200.0, cx=32.0, cy=24.0)


@pytest.fixture
def identity_pose():
    return CameraPose.identity()


@pytest.fixture
def translated_pose():
    """Fixture providing a camera rotated 90 degrees about y and moved off the origin."""
    rotation = np.array([
        [0, 0, 1],
        [0, 1, 0],
        [-1, 0, 0]
    ], dtype=np.float32)
    return CameraPose.from_rotation_translation(rotation, [1.0, 2.0, 3.0])


@pytest.fixture
def default_cube():
    """Fixture providing the 0.3 m cube 0.4 m in front of the camera."""
    return BoundingCube(edge_length=0.3, local_offset=(0.0, 0.0, -0.4))


@pytest.fixture
def planar_depth():
    """Fixture providing a 64x48 depth map of a wall 0.4 m from the camera."""
    return np.full((48, 64), 0.4, dtype=np.float32)


@pytest.fixture
def planar_frame(planar_depth):
    return DepthFrame.from_array(planar_depth)


@pytest.fixture
def zero_frame():
    """Fixture providing a depth frame with no valid returns."""
    return DepthFrame.from_array(np.zeros((48, 64), dtype=np.float32))


@pytest.fixture
def captured_frame(planar_frame, sample_intrinsics, identity_pose):
    """Fixture providing a full sensor frame at t=0."""
    return CapturedFrame(depth=planar_frame, intrinsics=sample_intrinsics,
                         pose=identity_pose, timestamp=0.0)

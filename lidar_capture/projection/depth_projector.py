"""
Depth Projector and Box Filter

Unprojects sampled depth pixels through a pinhole model into world space and
keeps the points that fall inside a camera-anchored bounding cube.

Camera convention: the camera looks down its negative z axis, so a pixel at
depth ``z`` unprojects to ``((x - cx) / fx * z, (y - cy) / fy * z, -z)``.
"""

import numpy as np
from typing import Optional, Tuple
import logging

from ..data_models import BoundingCube, CameraIntrinsics, CameraPose, DepthFrame, PointCloud
from ..utils.config_manager import ConfigManager
from .depth_grid import DepthGrid


def sample_pixels(frame: Optional[DepthFrame],
                  stride: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Pixels examined for a given stride, in row-major scan order.

    Returns:
        Tuple of (xs, ys, depths); empty arrays for a null or empty frame
    """
    if stride < 1:
        raise ValueError(f"Sampling stride must be positive, got {stride}")
    if frame is None or frame.is_empty:
        no_pixels = np.empty(0, dtype=np.intp)
        return no_pixels, no_pixels.copy(), np.empty(0, dtype=np.float32)
    return DepthGrid(frame).sample(stride)


def unproject(frame: Optional[DepthFrame],
              intrinsics: CameraIntrinsics,
              stride: int) -> np.ndarray:
    """
    Unproject sampled pixels with a valid return into camera space.

    Args:
        frame: Depth frame (metres); zero depth means no return
        intrinsics: Pinhole intrinsics
        stride: Sub-sampling factor

    Returns:
        (N, 3) float32 camera-space points
    """
    xs, ys, depths = sample_pixels(frame, stride)

    valid = depths != 0
    xs = xs[valid].astype(np.float32)
    ys = ys[valid].astype(np.float32)
    z = depths[valid].astype(np.float32)

    xn = (xs - np.float32(intrinsics.cx)) / np.float32(intrinsics.fx)
    yn = (ys - np.float32(intrinsics.cy)) / np.float32(intrinsics.fy)

    return np.column_stack([xn * z, yn * z, -z]).astype(np.float32)


def project(frame: Optional[DepthFrame],
            intrinsics: CameraIntrinsics,
            pose: CameraPose,
            cube: BoundingCube,
            stride: int = 8) -> PointCloud:
    """
    Project a depth frame into world space and keep points inside the cube.

    The cube is re-anchored with the same ``pose`` used for the points, and
    a point is kept only if it is strictly inside on all three axes.

    Args:
        frame: Depth frame; None or zero-sized yields an empty cloud
        intrinsics: Pinhole intrinsics
        pose: Camera-to-world transform at capture time
        cube: Bounding cube with its center in camera coordinates
        stride: Sub-sampling factor applied to rows and columns

    Returns:
        PointCloud in row-major scan order
    """
    camera_points = unproject(frame, intrinsics, stride)
    if len(camera_points) == 0:
        return PointCloud.empty()

    world_points = pose.transform_points(camera_points)
    inside = cube.contains(world_points, pose)
    return PointCloud(world_points[inside])


class DepthProjector:
    """Depth-to-point-cloud conversion with configured stride and cube."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize depth projector.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        proj_config = self.config.get_projection_params()
        cube_config = self.config.get_cube_params()

        # Every Nth pixel in both axes
        self.stride = int(proj_config.get('sample_stride', 8))
        self.cube = BoundingCube(
            edge_length=float(cube_config.get('edge_length', 0.3)),
            local_offset=tuple(cube_config.get('local_offset', (0.0, 0.0, -0.4)))
        )

        self.logger.info(f"Depth projector initialized: stride={self.stride}, "
                         f"cube edge={self.cube.edge_length}m at {self.cube.local_offset}")

    def sample_pixels(self,
                      frame: Optional[DepthFrame],
                      stride: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return sample_pixels(frame, self.stride if stride is None else stride)

    def unproject(self,
                  frame: Optional[DepthFrame],
                  intrinsics: CameraIntrinsics,
                  stride: Optional[int] = None) -> np.ndarray:
        return unproject(frame, intrinsics, self.stride if stride is None else stride)

    def project(self,
                frame: Optional[DepthFrame],
                intrinsics: CameraIntrinsics,
                pose: CameraPose,
                cube: Optional[BoundingCube] = None,
                stride: Optional[int] = None) -> PointCloud:
        """
        Project and cube-filter a frame, falling back to configured values.

        Args:
            frame: Depth frame
            intrinsics: Pinhole intrinsics
            pose: Camera-to-world transform of the same frame
            cube: Bounding cube override
            stride: Sampling stride override

        Returns:
            Filtered PointCloud
        """
        cube = cube or self.cube
        stride = self.stride if stride is None else stride

        points = project(frame, intrinsics, pose, cube, stride)

        if frame is not None:
            self.logger.debug(f"Frame {frame.width}x{frame.height} (stride {stride}): "
                              f"{len(points)} points inside cube")
        return points

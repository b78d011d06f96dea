"""
Data Models for LiDAR Capture

Defines the value objects passed between the depth projector, the capture
session and the exporter.
"""

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional, Sequence, Tuple
import numpy as np


class Point3D(NamedTuple):
    """World-space point, single precision."""
    x: float
    y: float
    z: float


class PointCloud:
    """Ordered, read-only sequence of world-space points."""

    def __init__(self, points: Optional[np.ndarray] = None):
        if points is None:
            points = np.empty((0, 3), dtype=np.float32)
        array = np.array(points, dtype=np.float32).reshape(-1, 3)
        array.flags.writeable = False
        self._points = array

    @classmethod
    def empty(cls) -> "PointCloud":
        return cls()

    @property
    def is_empty(self) -> bool:
        return len(self._points) == 0

    def as_array(self) -> np.ndarray:
        """Return a writable (N, 3) float32 copy of the points."""
        return self._points.copy()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point3D]:
        for x, y, z in self._points:
            yield Point3D(x, y, z)

    def __getitem__(self, index: int) -> Point3D:
        x, y, z = self._points[index]
        return Point3D(x, y, z)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointCloud):
            return NotImplemented
        return np.array_equal(self._points, other._points)

    def __repr__(self) -> str:
        return f"PointCloud(n={len(self)})"


@dataclass(frozen=True)
class CameraIntrinsics:
    """Pinhole intrinsics: focal lengths and principal point in pixels."""
    fx: float
    fy: float
    cx: float
    cy: float

    def __post_init__(self):
        if self.fx == 0 or self.fy == 0:
            raise ValueError("Focal lengths fx and fy must be non-zero")

    @classmethod
    def from_matrix(cls, camera_matrix: np.ndarray) -> "CameraIntrinsics":
        """Build intrinsics from a 3x3 camera matrix."""
        K = np.asarray(camera_matrix, dtype=np.float64)
        if K.shape != (3, 3):
            raise ValueError(f"Expected 3x3 camera matrix, got {K.shape}")
        return cls(fx=float(K[0, 0]), fy=float(K[1, 1]),
                   cx=float(K[0, 2]), cy=float(K[1, 2]))

    def as_matrix(self) -> np.ndarray:
        return np.array([
            [self.fx, 0, self.cx],
            [0, self.fy, self.cy],
            [0, 0, 1]
        ], dtype=np.float32)


@dataclass(frozen=True, eq=False)
class CameraPose:
    """Rigid camera-to-world transform (4x4 homogeneous matrix)."""
    matrix: np.ndarray

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=np.float32)
        if matrix.shape != (4, 4):
            raise ValueError(f"Expected 4x4 pose matrix, got {matrix.shape}")
        matrix.flags.writeable = False
        object.__setattr__(self, 'matrix', matrix)

    @classmethod
    def identity(cls) -> "CameraPose":
        return cls(np.eye(4, dtype=np.float32))

    @classmethod
    def from_rotation_translation(cls, rotation: np.ndarray,
                                  translation: Sequence[float]) -> "CameraPose":
        """Build a pose from a 3x3 rotation and a translation vector."""
        matrix = np.eye(4, dtype=np.float32)
        matrix[:3, :3] = np.asarray(rotation, dtype=np.float32).reshape(3, 3)
        matrix[:3, 3] = np.asarray(translation, dtype=np.float32).reshape(3)
        return cls(matrix)

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """
        Map camera-space points to world space.

        Args:
            points: (N, 3) camera-space points

        Returns:
            (N, 3) float32 world-space points
        """
        points = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        homogeneous = np.hstack([points, np.ones((len(points), 1), dtype=np.float32)])
        world = homogeneous @ self.matrix.T
        return world[:, :3]

    def transform_point(self, point: Sequence[float]) -> np.ndarray:
        return self.transform_points(np.asarray(point).reshape(1, 3))[0]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CameraPose):
            return NotImplemented
        return np.array_equal(self.matrix, other.matrix)


@dataclass(frozen=True)
class BoundingCube:
    """Axis-aligned cube whose center is given in camera-local coordinates."""
    edge_length: float
    local_offset: Tuple[float, float, float] = (0.0, 0.0, -0.4)

    def __post_init__(self):
        if not self.edge_length > 0:
            raise ValueError("Cube edge length must be positive")
        offset = tuple(float(v) for v in self.local_offset)
        if len(offset) != 3:
            raise ValueError("Cube local offset must have three components")
        object.__setattr__(self, 'local_offset', offset)

    @property
    def half_edge(self) -> float:
        return self.edge_length / 2

    def world_center(self, pose: CameraPose) -> np.ndarray:
        """Re-anchor the cube center to world space using ``pose``."""
        return pose.transform_point(self.local_offset)

    def contains(self, points: np.ndarray, pose: CameraPose) -> np.ndarray:
        """
        Test which world-space points lie strictly inside the cube.

        Args:
            points: (N, 3) world-space points
            pose: Pose used to place the cube for this frame

        Returns:
            Boolean mask of length N
        """
        points = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        local = points - self.world_center(pose)
        return np.all(np.abs(local) < np.float32(self.half_edge), axis=1)


@dataclass
class DepthFrame:
    """
    Single depth capture: per-pixel distance along the view axis in metres.

    ``data`` is a 2-D view of the sensor buffer; ``bytes_per_row`` may exceed
    ``width * itemsize`` when rows are padded.
    """
    data: np.ndarray
    width: int
    height: int
    bytes_per_row: int

    @classmethod
    def from_buffer(cls, buffer, width: int, height: int,
                    bytes_per_row: Optional[int] = None,
                    dtype=np.float32) -> "DepthFrame":
        """
        Wrap a raw sensor buffer without copying it.

        Args:
            buffer: Bytes-like object holding ``height`` rows of depth values
            width: Pixels per row
            height: Number of rows
            bytes_per_row: Row pitch in bytes; defaults to tightly packed rows
            dtype: Element type of the buffer

        Returns:
            DepthFrame over a read-only view of the buffer
        """
        dtype = np.dtype(dtype)
        if width < 0 or height < 0:
            raise ValueError("Frame dimensions must be non-negative")
        if bytes_per_row is None:
            bytes_per_row = width * dtype.itemsize
        if bytes_per_row < width * dtype.itemsize:
            raise ValueError(f"bytes_per_row={bytes_per_row} is smaller than one row "
                             f"of {width} x {dtype.itemsize}-byte values")
        if width == 0 or height == 0:
            return cls(np.empty((height, width), dtype=dtype), width, height, bytes_per_row)

        required = (height - 1) * bytes_per_row + width * dtype.itemsize
        available = memoryview(buffer).nbytes
        if available < required:
            raise ValueError(f"Depth buffer holds {available} bytes, "
                             f"{required} required for {width}x{height} frame")

        data = np.ndarray(shape=(height, width), dtype=dtype, buffer=buffer,
                          strides=(bytes_per_row, dtype.itemsize))
        data.flags.writeable = False
        return cls(data, width, height, bytes_per_row)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "DepthFrame":
        """Wrap a 2-D depth array (metres)."""
        data = np.asarray(array)
        if data.ndim != 2:
            raise ValueError(f"Depth array must be 2-D, got shape {data.shape}")
        view = data.view()
        view.flags.writeable = False
        height, width = view.shape
        return cls(view, width, height, view.strides[0])

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0 or self.data.size == 0


@dataclass
class CapturedFrame:
    """Per-frame input delivered by a sensor session."""
    depth: Optional[DepthFrame]
    intrinsics: CameraIntrinsics
    pose: CameraPose
    timestamp: Optional[float] = None


@dataclass
class CaptureResult:
    """Latest filtered point cloud together with the pose that produced it."""
    points: PointCloud
    pose: CameraPose
    cube: BoundingCube
    timestamp: Optional[float] = None
    processing_time: float = 0.0
    metadata: dict = field(default_factory=dict)

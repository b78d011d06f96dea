"""
ASCII PLY Writer

Serializes point clouds to the ASCII PLY format read by common point cloud
viewers, and reads such files back.

Coordinates are written as the shortest decimal string that round-trips to
the same single-precision value.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Union
import logging
import numpy as np
import open3d as o3d

from ..data_models import PointCloud

PLY_HEADER = (
    "ply\n"
    "format ascii 1.0\n"
    "element vertex {count}\n"
    "property float x\n"
    "property float y\n"
    "property float z\n"
    "end_header\n"
)

logger = logging.getLogger(__name__)


def _format_float(value: np.float32) -> str:
    return str(np.float32(value))


def serialize(points: PointCloud) -> str:
    """
    Encode a point cloud as ASCII PLY text.

    Args:
        points: Point cloud to encode

    Returns:
        Header followed by one ``"x y z"`` line per point
    """
    lines = [
        f"{_format_float(x)} {_format_float(y)} {_format_float(z)}\n"
        for x, y, z in points.as_array()
    ]
    return PLY_HEADER.format(count=len(points)) + "".join(lines)


def read_ply(path: Union[str, Path]) -> PointCloud:
    """
    Parse an ASCII PLY file with x, y, z float vertices.

    Raises:
        ValueError: If the header is not an ASCII x/y/z vertex header or the
            body does not match the declared vertex count
    """
    with open(path, 'r', encoding='utf-8') as file:
        text = file.read()

    header, separator, body = text.partition("end_header\n")
    if not separator:
        raise ValueError(f"Missing end_header in {path}")

    header_lines = header.splitlines()
    if not header_lines or header_lines[0] != "ply":
        raise ValueError(f"Not a PLY file: {path}")
    if "format ascii 1.0" not in header_lines:
        raise ValueError(f"Only ASCII PLY is supported: {path}")

    count = None
    properties: List[str] = []
    for line in header_lines:
        parts = line.split()
        if parts[:2] == ["element", "vertex"]:
            count = int(parts[2])
        elif parts[:1] == ["property"]:
            properties.append(parts[-1])

    if count is None:
        raise ValueError(f"Missing vertex element in {path}")
    if properties != ["x", "y", "z"]:
        raise ValueError(f"Unsupported vertex properties {properties} in {path}")

    rows = [line.split() for line in body.splitlines() if line.strip()]
    if len(rows) != count:
        raise ValueError(f"Declared {count} vertices, found {len(rows)} in {path}")

    return PointCloud(np.array(rows, dtype=np.float32).reshape(-1, 3))


class PLYWriter:
    """Writes point clouds to disk as ASCII PLY."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def write(self, points: PointCloud, path: Union[str, Path]) -> Path:
        """
        Write ``points`` to ``path`` atomically.

        The text is written to a temporary file in the target directory and
        moved into place, so readers never observe a partial file.

        Args:
            points: Point cloud to write
            path: Destination file

        Returns:
            Path of the written file
        """
        path = Path(path)
        text = serialize(points)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as file:
                file.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        self.logger.info(f"Wrote {len(points)} points to {path}")
        return path

    def to_open3d(self, points: PointCloud) -> o3d.geometry.PointCloud:
        """Convert to an Open3D point cloud for visualization or further processing."""
        pcd = o3d.geometry.PointCloud()
        pcd.points = o3d.utility.Vector3dVector(points.as_array().astype(np.float64))
        return pcd

"""
LiDAR Capture

Depth sensor capture to bounded point clouds.

This package implements:
- Pinhole unprojection of sub-sampled depth frames into world space
- Filtering against a bounding cube anchored to the capturing camera
- Throttled background conversion of incoming sensor frames
- ASCII PLY export of the current point cloud
"""

__version__ = "1.0.0"
__author__ = "LiDAR Capture Team"

from .projection import DepthGrid, DepthProjector, load_depth_image, project
from .capture import RateLimiter, PointCloudStore, CaptureSession
from .export import PLYWriter, PointCloudExporter, ExportResult, ExportStatus, serialize, read_ply
from .data_models import (
    Point3D, PointCloud, CameraIntrinsics, CameraPose, BoundingCube,
    DepthFrame, CapturedFrame, CaptureResult
)

__all__ = [
    # Projection
    'DepthGrid', 'DepthProjector', 'load_depth_image', 'project',
    # Capture
    'RateLimiter', 'PointCloudStore', 'CaptureSession',
    # Export
    'PLYWriter', 'PointCloudExporter', 'ExportResult', 'ExportStatus', 'serialize', 'read_ply',
    # Data Models
    'Point3D', 'PointCloud', 'CameraIntrinsics', 'CameraPose', 'BoundingCube',
    'DepthFrame', 'CapturedFrame', 'CaptureResult'
]

"""
Capture Module

Frame throttling, background conversion and the current point cloud holder.
"""

from .throttle import RateLimiter
from .point_cloud_store import PointCloudStore
from .capture_session import CaptureSession

__all__ = ['RateLimiter', 'PointCloudStore', 'CaptureSession']

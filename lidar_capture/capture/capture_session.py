"""
Capture Session

Receives frames from a depth sensor session, throttles them, converts the
accepted ones on a background worker and publishes the filtered cloud.
"""

import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional
import logging
import numpy as np

from ..data_models import CapturedFrame, CaptureResult
from ..projection.depth_projector import DepthProjector
from ..utils.config_manager import ConfigManager
from .point_cloud_store import PointCloudStore
from .throttle import RateLimiter


class CaptureSession:
    """Frame handler turning throttled depth frames into the current point cloud."""

    def __init__(self,
                 projector: Optional[DepthProjector] = None,
                 store: Optional[PointCloudStore] = None,
                 config_manager: Optional[ConfigManager] = None,
                 executor: Optional[ThreadPoolExecutor] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize capture session.

        Args:
            projector: Depth projector; built from configuration if None
            store: Holder for the current point cloud
            config_manager: Configuration manager instance
            executor: Background executor; a single-worker pool if None
            clock: Time source used for throttling
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        capture_config = self.config.get_capture_params()

        self.projector = projector or DepthProjector(self.config)
        self.store = store or PointCloudStore()
        self.clock = clock
        self.throttle = RateLimiter(float(capture_config.get('throttle_interval', 1.0)))

        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=int(capture_config.get('max_workers', 1)),
            thread_name_prefix="depth-convert"
        )
        self._pending: Optional[Future] = None

        self.logger.info(f"Capture session initialized: throttle={self.throttle.min_interval}s")

    def on_frame(self, frame: CapturedFrame) -> Optional[Future]:
        """
        Handle one incoming frame.

        Frames inside the throttle interval and frames without depth are
        dropped.

        Args:
            frame: Depth, intrinsics and pose of one capture

        Returns:
            Future of the background conversion, or None if dropped
        """
        now = frame.timestamp if frame.timestamp is not None else self.clock()

        if not self.throttle.should_proceed(now):
            return None

        if frame.depth is None:
            self.logger.debug("Frame without scene depth dropped")
            return None

        future = self.executor.submit(self._process, frame, now)
        self._pending = future
        return future

    def _convert(self, frame: CapturedFrame, timestamp: float) -> CaptureResult:
        """Project and filter a frame using its own pose."""
        start_time = time.time()

        cube = self.projector.cube
        points = self.projector.project(frame.depth, frame.intrinsics, frame.pose, cube)

        return CaptureResult(
            points=points,
            pose=frame.pose,
            cube=cube,
            timestamp=timestamp,
            processing_time=time.time() - start_time,
            metadata={'width': frame.depth.width, 'height': frame.depth.height,
                      'stride': self.projector.stride}
        )

    def _process(self, frame: CapturedFrame, timestamp: float) -> CaptureResult:
        """Convert a frame and publish the result to the store."""
        try:
            result = self._convert(frame, timestamp)
        except Exception as e:
            self.logger.error(f"Depth conversion failed: {e}")
            raise

        if self.store.replace(result):
            self.logger.debug(f"Point cloud replaced: {len(result.points)} points "
                              f"({result.processing_time * 1000:.1f} ms)")
        else:
            self.logger.debug(f"Discarded stale result from t={result.timestamp}")
        return result

    def cube_world_center(self) -> Optional[np.ndarray]:
        """
        World-space center of the bounding cube for display.

        Uses the pose of the frame that produced the stored cloud, so the
        displayed cube matches the region the points were filtered against.
        """
        result = self.store.current()
        if result is None:
            return None
        return result.cube.world_center(result.pose)

    def wait(self, timeout: Optional[float] = None) -> Optional[CaptureResult]:
        """Block until the most recent conversion finishes."""
        pending = self._pending
        if pending is None:
            return None
        return pending.result(timeout=timeout)

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)

    def __enter__(self) -> "CaptureSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

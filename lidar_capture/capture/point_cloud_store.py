"""
Current Point Cloud Holder

Single-slot store for the latest capture result. Each write replaces the
previous result in full. A result older than the stored one is discarded so
that out-of-order completions from several workers cannot roll the cloud back.
"""

import threading
from typing import Optional

from ..data_models import CaptureResult, PointCloud


class PointCloudStore:
    """Holds the most recent CaptureResult; replace-on-write under a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._result: Optional[CaptureResult] = None

    def replace(self, result: CaptureResult) -> bool:
        """
        Store ``result`` unless the held result has a newer timestamp.

        Results without a timestamp always replace.

        Returns:
            True if the result was stored
        """
        with self._lock:
            held = self._result
            if (held is not None and held.timestamp is not None
                    and result.timestamp is not None and result.timestamp < held.timestamp):
                return False
            self._result = result
            return True

    def current(self) -> Optional[CaptureResult]:
        with self._lock:
            return self._result

    @property
    def points(self) -> PointCloud:
        """Latest point cloud, empty before the first capture."""
        result = self.current()
        return result.points if result is not None else PointCloud.empty()

    def clear(self) -> None:
        with self._lock:
            self._result = None

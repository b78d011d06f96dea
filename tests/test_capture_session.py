"""
Tests for frame throttling, the point cloud store and the capture session
"""

import threading
import pytest
import numpy as np

from lidar_capture.capture.capture_session import CaptureSession
from lidar_capture.capture.point_cloud_store import PointCloudStore
from lidar_capture.capture.throttle import RateLimiter
from lidar_capture.data_models import CapturedFrame, CaptureResult, CameraPose, PointCloud, BoundingCube
from lidar_capture.projection.depth_projector import DepthProjector


class TestRateLimiter:
    """Test suite for the minimum-interval gate."""

    def test_first_event_proceeds(self):
        limiter = RateLimiter(1.0)
        assert limiter.should_proceed(100.0)
        assert limiter.last_update == 100.0

    def test_interval_is_strict(self):
        limiter = RateLimiter(1.0)
        assert limiter.should_proceed(0.0)

        assert not limiter.should_proceed(0.5)
        assert not limiter.should_proceed(1.0)
        assert limiter.should_proceed(1.01)

    def test_rejected_events_do_not_extend_window(self):
        limiter = RateLimiter(1.0)
        limiter.should_proceed(0.0)

        for t in (0.2, 0.4, 0.6, 0.8):
            assert not limiter.should_proceed(t)

        assert limiter.last_update == 0.0
        assert limiter.should_proceed(1.5)

    def test_initial_last_update(self):
        limiter = RateLimiter(1.0, last_update=10.0)
        assert not limiter.should_proceed(10.5)
        assert limiter.should_proceed(11.5)

    def test_reset(self):
        limiter = RateLimiter(1.0)
        limiter.should_proceed(0.0)
        limiter.reset()
        assert limiter.should_proceed(0.1)

    def test_negative_interval(self):
        with pytest.raises(ValueError):
            RateLimiter(-1.0)

    def test_concurrent_callers_single_winner(self):
        limiter = RateLimiter(1.0)
        results = []
        barrier = threading.Barrier(8)

        def attempt():
            barrier.wait()
            results.append(limiter.should_proceed(5.0))

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1


class TestPointCloudStore:
    """Test suite for the current point cloud holder."""

    def _result(self, n, timestamp=None):
        return CaptureResult(points=PointCloud(np.ones((n, 3))), pose=CameraPose.identity(),
                             cube=BoundingCube(edge_length=0.3), timestamp=timestamp)

    def test_initially_empty(self):
        store = PointCloudStore()
        assert store.current() is None
        assert store.points.is_empty

    def test_replace_not_merge(self):
        store = PointCloudStore()
        store.replace(self._result(5))
        store.replace(self._result(2))

        assert len(store.points) == 2

    def test_older_result_does_not_overwrite_newer(self):
        store = PointCloudStore()
        assert store.replace(self._result(5, timestamp=2.0))
        assert not store.replace(self._result(3, timestamp=1.0))

        assert len(store.points) == 5
        assert store.current().timestamp == 2.0

        assert store.replace(self._result(1, timestamp=3.0))
        assert len(store.points) == 1

    def test_untimestamped_result_always_replaces(self):
        store = PointCloudStore()
        store.replace(self._result(5, timestamp=2.0))
        assert store.replace(self._result(3))
        assert store.replace(self._result(4, timestamp=1.0))

        assert len(store.points) == 4

    def test_clear(self):
        store = PointCloudStore()
        store.replace(self._result(5))
        store.clear()
        assert store.current() is None


class TestCaptureSession:
    """Test suite for the capture session."""

    @pytest.fixture
    def session(self, config_manager):
        with CaptureSession(config_manager=config_manager) as session:
            yield session

    def test_session_initialization(self, session):
        assert session.throttle.min_interval == 1.0
        assert session.projector.stride == 8
        assert session.store.current() is None
        assert session.cube_world_center() is None

    def test_frame_processed_and_stored(self, session, captured_frame):
        future = session.on_frame(captured_frame)

        assert future is not None
        result = session.wait(timeout=10)

        assert len(result.points) == 48
        assert session.store.current() is result
        assert result.pose == captured_frame.pose
        assert result.metadata['stride'] == 8

    def test_frames_inside_interval_dropped(self, session, captured_frame):
        assert session.on_frame(captured_frame) is not None

        captured_frame.timestamp = 0.5
        assert session.on_frame(captured_frame) is None

        captured_frame.timestamp = 1.5
        assert session.on_frame(captured_frame) is not None
        session.wait(timeout=10)

    def test_frame_without_depth_consumes_interval(self, session, captured_frame,
                                                   sample_intrinsics, identity_pose):
        no_depth = CapturedFrame(depth=None, intrinsics=sample_intrinsics,
                                 pose=identity_pose, timestamp=3.0)
        assert session.on_frame(no_depth) is None

        captured_frame.timestamp = 3.5
        assert session.on_frame(captured_frame) is None
        assert session.store.current() is None

    def test_result_replaces_previous(self, session, captured_frame, zero_frame):
        session.on_frame(captured_frame)
        session.wait(timeout=10)
        assert len(session.store.points) == 48

        empty_frame = CapturedFrame(depth=zero_frame, intrinsics=captured_frame.intrinsics,
                                    pose=captured_frame.pose, timestamp=5.0)
        session.on_frame(empty_frame)
        session.wait(timeout=10)

        assert session.store.points.is_empty

    def test_cube_center_uses_frame_pose(self, session, planar_frame, sample_intrinsics, translated_pose):
        frame = CapturedFrame(depth=planar_frame, intrinsics=sample_intrinsics,
                              pose=translated_pose, timestamp=0.0)
        session.on_frame(frame)
        session.wait(timeout=10)

        np.testing.assert_allclose(session.cube_world_center(), [0.6, 2.0, 3.0], atol=1e-6)
        assert len(session.store.points) == 48

    def test_clock_used_without_timestamp(self, config_manager, captured_frame):
        times = iter([0.0, 0.2, 2.0])
        with CaptureSession(config_manager=config_manager, clock=lambda: next(times)) as session:
            captured_frame.timestamp = None

            assert session.on_frame(captured_frame) is not None
            assert session.on_frame(captured_frame) is None
            assert session.on_frame(captured_frame) is not None
            session.wait(timeout=10)

    def test_conversion_failure_keeps_previous_cloud(self, config_manager, captured_frame):
        class FailingProjector(DepthProjector):
            def project(self, *args, **kwargs):
                raise RuntimeError("sensor buffer released")

        with CaptureSession(config_manager=config_manager) as session:
            session.on_frame(captured_frame)
            session.wait(timeout=10)
            previous = session.store.current()

            session.projector = FailingProjector(config_manager)
            captured_frame.timestamp = 10.0
            future = session.on_frame(captured_frame)

            with pytest.raises(RuntimeError, match="sensor buffer released"):
                future.result(timeout=10)
            assert session.store.current() is previous

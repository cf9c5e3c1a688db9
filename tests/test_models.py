"""
Smoke tests for typed models and adapters.
"""

import time

import numpy as np
import pytest

from models.detection import BoundingBox, Detection
from models.frame import FrameData, FrameDimensions
from models.status import LoopState, LoopStats


class TestBoundingBox:
    def test_corners(self):
        bbox = BoundingBox(x=100, y=100, width=100, height=50)
        assert bbox.x2 == 200
        assert bbox.y2 == 150

    def test_from_xyxy(self):
        bbox = BoundingBox.from_xyxy(10, 20, 60, 120)
        assert bbox == BoundingBox(10, 20, 50, 100)


class TestDetection:
    def test_confidence_percent(self):
        assert Detection.from_xywh("person", 0.92, 0, 0, 1, 1).confidence_percent == 92
        assert Detection.from_xywh("person", 0.125, 0, 0, 1, 1).confidence_percent == 13
        assert Detection.from_xywh("person", 1.0, 0, 0, 1, 1).confidence_percent == 100

    def test_is_immutable(self):
        det = Detection.from_xywh("cup", 0.3, 70, 70, 20, 20)
        with pytest.raises(AttributeError):
            det.label = "mug"


class TestFrameData:
    def test_from_numpy(self):
        arr = np.zeros((240, 320, 3), dtype=np.uint8)
        ts = time.time()

        frame = FrameData.from_numpy(arr, timestamp=ts, frame_index=4, source="webcam")

        assert frame.width == 320
        assert frame.height == 240
        assert frame.frame_index == 4
        assert frame.dimensions == FrameDimensions(320, 240)

    def test_dimensions_str(self):
        assert str(FrameDimensions(640, 480)) == "640x480"
        assert FrameDimensions.of(np.zeros((10, 20))) == FrameDimensions(20, 10)


class TestLoopModels:
    def test_loop_state_values(self):
        assert LoopState.RUNNING.value == "running"
        assert LoopState.STOPPED == "stopped"

    def test_stats_to_dict(self):
        stats = LoopStats(frames_processed=3, inference_failures=1)
        d = stats.to_dict()
        assert d["frames_processed"] == 3
        assert d["inference_failures"] == 1
        assert d["render_failures"] == 0
        assert d["started_at"] is None
        assert "last_stats_log_time" not in d

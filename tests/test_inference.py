"""
Tests for the inference layer.
"""

import asyncio
import threading

import numpy as np
import pytest

from inference import create_detector_from_config
from inference.backend import ExecutorDetector, collect_detections
from inference.cpu_backend import CpuYoloConfig, UltralyticsCpuBackend
from models.config import DetectionConfig
from models.detection import BoundingBox, Detection

from fakes import make_frame, person_and_cup


class _Boxes:
    def __init__(self, xyxy, conf, cls):
        self.xyxy = np.asarray(xyxy, dtype=np.float32)
        self.conf = np.asarray(conf, dtype=np.float32)
        self.cls = np.asarray(cls, dtype=np.float32)


class _Result:
    def __init__(self, boxes, names):
        self.boxes = boxes
        self.names = names


class FakeYolo:
    """Stands in for ultralytics.YOLO.predict()."""

    def __init__(self, results):
        self.results = results
        self.calls = []

    def predict(self, **kwargs):
        self.calls.append(kwargs)
        return self.results


class RecordingBackend:
    def __init__(self, detections):
        self.detections = detections
        self.threads = []

    def detect(self, frame):
        self.threads.append(threading.current_thread().name)
        return list(self.detections)


class TestUltralyticsCpuBackend:
    def _backend(self, results, **cfg):
        model = FakeYolo(results)
        return UltralyticsCpuBackend(CpuYoloConfig(model="yolov8n.pt", **cfg), model=model), model

    def test_converts_boxes_to_xywh(self):
        boxes = _Boxes([[10, 10, 60, 110], [70, 70, 90, 90]], [0.92, 0.3], [0, 41])
        backend, _ = self._backend([_Result(boxes, {0: "person", 41: "cup"})])

        dets = backend.detect(np.zeros((480, 640, 3), dtype=np.uint8))

        assert [d.label for d in dets] == ["person", "cup"]
        assert dets[0].bbox == BoundingBox(10, 10, 50, 100)
        assert dets[0].confidence == pytest.approx(0.92)

    def test_passes_noise_floor_and_iou(self):
        backend, model = self._backend([], min_confidence=0.1, iou_threshold=0.5, classes=[0])

        assert backend.detect(np.zeros((4, 4, 3), dtype=np.uint8)) == []
        assert model.calls[0]["conf"] == 0.1
        assert model.calls[0]["iou"] == 0.5
        assert model.calls[0]["classes"] == [0]

    def test_class_name_overrides(self):
        boxes = _Boxes([[0, 0, 1, 1]], [0.8], [2])
        backend, _ = self._backend([_Result(boxes, {2: "car"})], class_name_overrides={2: "vehicle"})

        assert backend.detect(np.zeros((4, 4, 3), dtype=np.uint8))[0].label == "vehicle"

    def test_unknown_class_uses_id(self):
        boxes = _Boxes([[0, 0, 1, 1]], [0.8], [7])
        backend, _ = self._backend([_Result(boxes, {})])

        assert backend.detect(np.zeros((4, 4, 3), dtype=np.uint8))[0].label == "7"

    def test_result_without_boxes(self):
        backend, _ = self._backend([_Result(None, {0: "person"})])
        assert backend.detect(np.zeros((4, 4, 3), dtype=np.uint8)) == []


class TestExecutorDetector:
    def test_runs_backend_off_the_event_loop(self):
        backend = RecordingBackend(person_and_cup())
        detector = ExecutorDetector(backend)

        try:
            dets = asyncio.run(detector.detect(make_frame()))
        finally:
            detector.shutdown()

        assert [d.label for d in dets] == ["person", "cup"]
        assert backend.threads[0].startswith("inference")

    def test_backend_error_propagates(self):
        class Broken:
            def detect(self, frame):
                raise RuntimeError("model failed")

        detector = ExecutorDetector(Broken())
        try:
            with pytest.raises(RuntimeError, match="model failed"):
                asyncio.run(detector.detect(make_frame()))
        finally:
            detector.shutdown()

    def test_detect_after_shutdown(self):
        detector = ExecutorDetector(RecordingBackend([]))
        detector.shutdown()
        detector.shutdown()

        with pytest.raises(RuntimeError):
            asyncio.run(detector.detect(make_frame()))


class TestCollectDetections:
    def test_plain_iterable(self):
        dets = asyncio.run(collect_detections(iter(person_and_cup())))
        assert len(dets) == 2

    def test_async_iterable(self):
        async def produce():
            for det in person_and_cup():
                yield det

        async def scenario():
            return await collect_detections(produce())

        assert [d.label for d in asyncio.run(scenario())] == ["person", "cup"]


class TestCreateDetector:
    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_detector_from_config(DetectionConfig(backend="hailo"))

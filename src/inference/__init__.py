"""
Inference layer: turns frames into detections.
"""

from __future__ import annotations

from models.config import DetectionConfig

from .backend import Detector, InferenceBackend, ExecutorDetector, collect_detections
from .cpu_backend import CpuYoloConfig, UltralyticsCpuBackend


def create_detector_from_config(detection_cfg: DetectionConfig) -> ExecutorDetector:
    """Build the async detector described by the `detection` config section."""
    if detection_cfg.backend != "yolo":
        raise ValueError(f"Unsupported detection backend: {detection_cfg.backend}")

    ycfg = detection_cfg.yolo
    model = UltralyticsCpuBackend(
        CpuYoloConfig(
            model=ycfg.model,
            iou_threshold=ycfg.iou_threshold,
            classes=ycfg.classes,
            class_name_overrides=ycfg.class_name_overrides,
        )
    )
    return ExecutorDetector(model, max_workers=detection_cfg.max_workers)


__all__ = [
    "Detector",
    "InferenceBackend",
    "ExecutorDetector",
    "collect_detections",
    "CpuYoloConfig",
    "UltralyticsCpuBackend",
    "create_detector_from_config",
]

"""
Observation layer: where live frames come from.

Pull-based sources (ObservationSource) are wrapped in a LiveFrameBuffer,
which the detection loop samples as a non-blocking FrameSource.
"""

from __future__ import annotations

from typing import Any, Dict

from .base import FrameSource, ObservationSource, ObservationConfig
from .opencv_source import OpenCVSource, OpenCVSourceConfig
from .live import LiveFrameBuffer


def create_source_from_config(camera_cfg: Dict[str, Any], source_id: str = "camera") -> ObservationSource:
    """Build an ObservationSource from the `camera` config section."""
    backend = camera_cfg.get("backend", "opencv")
    if backend != "opencv":
        raise ValueError(f"Unsupported camera backend: {backend}")
    return OpenCVSource(OpenCVSourceConfig.from_camera_config(camera_cfg, source_id=source_id))


__all__ = [
    "FrameSource",
    "ObservationSource",
    "ObservationConfig",
    "OpenCVSource",
    "OpenCVSourceConfig",
    "LiveFrameBuffer",
    "create_source_from_config",
]

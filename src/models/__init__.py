"""
Typed models for the live detection application.

Use the adapter classmethods (from_numpy, Config.from_dict, ...) to build
them from arrays and raw config dicts.
"""

from .frame import FrameData, FrameDimensions
from .detection import Detection, BoundingBox
from .status import LoopState, LoopStats, FrameResult
from .config import (
    Config,
    CameraConfig,
    DetectionConfig,
    YoloConfig,
    DisplayConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    "FrameDimensions",
    # Detection
    "Detection",
    "BoundingBox",
    # Loop
    "LoopState",
    "LoopStats",
    "FrameResult",
    # Config
    "Config",
    "CameraConfig",
    "DetectionConfig",
    "YoloConfig",
    "DisplayConfig",
    "WebConfig",
]

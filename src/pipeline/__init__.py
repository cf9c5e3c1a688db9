"""
Pipeline module for the live detection loop.

The pipeline orchestrates the per-frame flow:
- Frame sampling from the live source
- Asynchronous detection
- Confidence filtering and cumulative counting (stages)
- Overlay rendering onto the presentation surface
"""

from .engine import DetectionLoop, LoopConfig, create_loop_from_config
from .scheduler import PaintScheduler, AsyncioPaintScheduler
from .session import DetectionSession
from .stages.measure import advance

__all__ = [
    "DetectionLoop",
    "LoopConfig",
    "create_loop_from_config",
    "PaintScheduler",
    "AsyncioPaintScheduler",
    "DetectionSession",
    "advance",
]

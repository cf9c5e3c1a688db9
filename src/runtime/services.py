"""
Runtime wiring: build the collaborators from config, tear them down, and
the optional OpenCV preview window.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import cv2

from inference import create_detector_from_config
from models.config import Config
from models.status import FrameResult
from observation import LiveFrameBuffer, create_source_from_config
from observation.rtsp_utils import inject_rtsp_credentials
from pipeline.engine import create_loop_from_config
from runtime.context import RuntimeContext


def build_runtime(
    config: Dict[str, Any],
    config_path: Optional[str] = None,
    detector: Any = None,
    source: Any = None,
) -> RuntimeContext:
    """
    Wire source, detector, surface and loop from the config dict.

    The capture thread is not started here; see start_runtime().

    Args:
        config: Validated application config.
        config_path: Path the config was loaded from (for status output).
        detector: Override the detector built from config (tests, custom models).
        source: Override the frame source built from config.
    """
    if source is None:
        camera_cfg = dict(config.get("camera", {}) or {})
        inject_rtsp_credentials(camera_cfg)
        source = LiveFrameBuffer(create_source_from_config(camera_cfg, source_id="webcam"))
    if detector is None:
        detector = create_detector_from_config(Config.from_dict(config).detection)

    loop = create_loop_from_config(config, source=source, detector=detector)
    return RuntimeContext(
        config=config,
        source=source,
        detector=detector,
        surface=loop.surface,
        loop=loop,
        config_path=config_path,
    )


def start_runtime(ctx: RuntimeContext) -> None:
    if hasattr(ctx.source, "start"):
        ctx.source.start()
    if ctx.settings.display.autostart:
        ctx.loop.start()


async def shutdown_runtime(ctx: RuntimeContext) -> None:
    """Release everything in reverse order of construction. Safe to call twice."""
    await ctx.loop.close()
    if hasattr(ctx.detector, "shutdown"):
        ctx.detector.shutdown()
    if hasattr(ctx.source, "stop"):
        ctx.source.stop()
    logging.info("Runtime shut down")


class PreviewWindow:
    """
    Shows the rendered surface in an OpenCV window after each frame.

    Register with DetectionLoop.add_callback. Pressing `q` in the window
    stops detection.
    """

    def __init__(self, ctx: RuntimeContext, title: str = "Live Object Detection"):
        self.ctx = ctx
        self.title = title

    def __call__(self, result: FrameResult) -> None:
        image = self.ctx.surface.snapshot()
        if image is None:
            return
        cv2.imshow(self.title, image)
        if cv2.waitKey(1) & 0xFF == ord("q"):
            logging.info("Preview window requested stop")
            self.ctx.loop.stop()

    def close(self) -> None:
        cv2.destroyAllWindows()

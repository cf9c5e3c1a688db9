"""
Detection loop: frame -> inference -> filter -> render -> aggregate.

The loop runs on a single asyncio event loop. Each iteration is requested
from a PaintScheduler and starts at the next paint opportunity. The only
suspension point is the await on the detector, and the next iteration is
requested only after the current one has rendered, so iterations never
overlap and each frame is drawn with detections computed from that same
frame.

Every start() and stop() bumps the session epoch. An iteration carries the
epoch it was scheduled under and re-checks it before scheduling and after
the detector returns, so a result that arrives after stop() is dropped
without touching counts, the surface or the schedule.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from inference.backend import Detector, collect_detections
from models.config import Config
from models.status import FrameResult, LoopState, LoopStats
from observation.base import FrameSource
from rendering.overlay import OverlayRenderer
from rendering.surface import RenderSurface
from .scheduler import AsyncioPaintScheduler, PaintScheduler
from .session import DetectionSession
from .stages.filter import clamp_threshold, percent_to_threshold
from .stages.measure import advance

RenderCallback = Callable[[FrameResult], None]


@dataclass
class LoopConfig:
    """
    Configuration for the detection loop.

    Attributes:
        confidence_threshold: Initial threshold in [0, 1].
        stats_log_interval: Seconds between statistics log lines.
    """
    confidence_threshold: float = 0.5
    stats_log_interval: float = 60.0


class DetectionLoop:
    """
    Drives the detect-and-render cycle over a live FrameSource.

    Example:
        loop = DetectionLoop(buffer, detector, AsyncioPaintScheduler(30), RenderSurface())
        async with loop:
            loop.start()
            ...
        # leaving the block stops the loop and releases the pending paint request
    """

    def __init__(
        self,
        source: FrameSource,
        detector: Detector,
        scheduler: PaintScheduler,
        surface: RenderSurface,
        renderer: Optional[OverlayRenderer] = None,
        config: Optional[LoopConfig] = None,
    ):
        self.source = source
        self.detector = detector
        self.scheduler = scheduler
        self.surface = surface
        self.renderer = renderer or OverlayRenderer()
        self.config = config or LoopConfig()
        self.session = DetectionSession(threshold=self.config.confidence_threshold)
        self._paint_handle: Optional[int] = None
        self._tasks: Dict[asyncio.Task, int] = {}
        self._callbacks: List[RenderCallback] = []
        self._closed = False

    @property
    def state(self) -> LoopState:
        return self.session.state

    @property
    def running(self) -> bool:
        return self.session.running

    @property
    def threshold(self) -> float:
        return self.session.threshold

    @property
    def threshold_percent(self) -> int:
        return self.session.threshold_percent

    @property
    def counts(self) -> Dict[str, int]:
        return self.session.counts

    @property
    def stats(self) -> LoopStats:
        return self.session.stats

    @property
    def last_result(self) -> Optional[FrameResult]:
        return self.session.last_result

    @property
    def has_pending_paint(self) -> bool:
        return self._paint_handle is not None

    @property
    def in_flight(self) -> int:
        """Iterations currently awaiting the detector."""
        return sum(1 for t in self._tasks if not t.done())

    def _in_flight_for(self, epoch: int) -> int:
        return sum(1 for t, e in self._tasks.items() if e == epoch and not t.done())

    def add_callback(self, callback: RenderCallback) -> None:
        """Call callback(result) after each rendered frame."""
        self._callbacks.append(callback)

    # -- controls ---------------------------------------------------------

    def start(self, reset_counts: bool = False) -> None:
        """
        Stopped -> Running and request the first iteration.

        Args:
            reset_counts: Clear cumulative counts first. Only honoured when
                starting from Stopped.
        """
        if self._closed:
            raise RuntimeError("DetectionLoop is closed")

        session = self.session
        if session.running:
            # Re-arm a run that went idle because its source disappeared.
            if self._paint_handle is None and self._in_flight_for(session.epoch) == 0:
                logging.info("Detection loop idle; re-arming")
                self._schedule(session.epoch)
            return

        if reset_counts:
            session.aggregator.reset()
        session.state = LoopState.RUNNING
        session.epoch += 1
        session.stats.started_at = time.time()
        logging.info(
            f"Detection started: threshold={session.threshold_percent}%, "
            f"labels_tracked={len(session.aggregator)}"
        )
        self._schedule(session.epoch)

    def stop(self) -> None:
        """Running -> Stopped. No inference starts and nothing is drawn after this returns."""
        session = self.session
        if not session.running:
            return
        session.state = LoopState.STOPPED
        session.epoch += 1
        self._cancel_pending()
        logging.info(
            f"Detection stopped: frames={session.stats.frames_processed}, "
            f"in_flight={self.in_flight}"
        )

    def toggle(self) -> LoopState:
        if self.running:
            self.stop()
        else:
            self.start()
        return self.state

    def set_confidence_threshold(self, value: float) -> float:
        """Set the threshold (fraction, clamped to [0, 1]); applies from the next filter pass."""
        self.session.threshold = clamp_threshold(value)
        logging.debug(f"Confidence threshold set to {self.session.threshold_percent}%")
        return self.session.threshold

    def set_threshold_percent(self, percent: float) -> float:
        return self.set_confidence_threshold(percent_to_threshold(percent))

    def reset_counts(self) -> None:
        self.session.aggregator.reset()
        logging.info("Aggregate counts cleared")

    async def close(self) -> None:
        """Stop, release the pending paint request and cancel in-flight iterations."""
        if self._closed:
            return
        self.stop()
        self._cancel_pending()
        self._closed = True

        current = asyncio.current_task()
        pending = [t for t in self._tasks if not t.done() and t is not current]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logging.info("Detection loop closed")

    async def __aenter__(self) -> "DetectionLoop":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -- scheduling -------------------------------------------------------

    def _schedule(self, epoch: int) -> None:
        if not self.session.is_current(epoch) or self._paint_handle is not None:
            return
        self._paint_handle = self.scheduler.request(partial(self._on_paint, epoch))

    def _cancel_pending(self) -> None:
        if self._paint_handle is not None:
            self.scheduler.cancel(self._paint_handle)
            self._paint_handle = None

    def _on_paint(self, epoch: int, paint_time: float) -> None:
        self._paint_handle = None
        if not self.session.is_current(epoch):
            return
        task = asyncio.ensure_future(self.run_iteration(epoch))
        self._tasks[task] = epoch
        task.add_done_callback(self._forget_task)

    def _forget_task(self, task: asyncio.Task) -> None:
        self._tasks.pop(task, None)

    # -- iteration --------------------------------------------------------

    async def run_iteration(self, epoch: int) -> Optional[FrameResult]:
        """
        One pass: acquire, infer, filter, render, commit counts, reschedule.

        Returns:
            The FrameResult if the frame was rendered, otherwise None.
        """
        session = self.session
        if not session.is_current(epoch):
            return None

        if not self.source.is_available:
            logging.warning("Frame source unavailable; detection idle until restarted")
            return None

        frame = self.source.current_frame()
        if frame is None:
            session.stats.acquisition_misses += 1
            logging.debug("No frame available; skipping iteration")
            self._log_periodic_stats()
            self._schedule(epoch)
            return None

        try:
            detections = await collect_detections(await self.detector.detect(frame))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if session.is_current(epoch):
                session.stats.inference_failures += 1
                logging.warning(f"Detection error on frame {frame.frame_index}: {e}")
                self._log_periodic_stats()
                self._schedule(epoch)
            else:
                session.stats.stale_discards += 1
            return None

        if not session.is_current(epoch):
            session.stats.stale_discards += 1
            logging.debug(f"Discarding result for frame {frame.frame_index}: loop stopped")
            return None

        try:
            result = advance(
                session,
                frame,
                detections,
                draw=lambda r: self.renderer.render(frame, r.filtered, self.surface),
            )
        except Exception as e:
            session.stats.render_failures += 1
            logging.warning(f"Render error on frame {frame.frame_index}: {e}")
            self._log_periodic_stats()
            self._schedule(epoch)
            return None
        session.stats.last_render_ts = time.time()

        for callback in self._callbacks:
            try:
                callback(result)
            except Exception as e:
                logging.warning(f"Render callback error: {e}")

        self._log_periodic_stats()
        self._schedule(epoch)
        return result

    def _log_periodic_stats(self) -> None:
        stats = self.session.stats
        now = time.time()
        if now - stats.last_stats_log_time < self.config.stats_log_interval:
            return
        stats.last_stats_log_time = now
        logging.info(
            f"Loop stats: frames={stats.frames_processed}, "
            f"inference_failures={stats.inference_failures}, "
            f"render_failures={stats.render_failures}, "
            f"acquisition_misses={stats.acquisition_misses}, "
            f"stale_discards={stats.stale_discards}, "
            f"counts={self.session.counts}"
        )


def create_loop_from_config(
    config: Dict[str, Any],
    source: FrameSource,
    detector: Detector,
    surface: Optional[RenderSurface] = None,
    scheduler: Optional[PaintScheduler] = None,
) -> DetectionLoop:
    """
    Build a DetectionLoop from the application config dict.

    Args:
        config: Full application config dict.
        source: Live frame source.
        detector: Async detector.
        surface: Render target. Defaults to one sized to camera.resolution.
        scheduler: Paint scheduler. Defaults to display.paint_fps ticks.
    """
    cfg = Config.from_dict(config)

    if surface is None:
        width, height = cfg.camera.resolution
        surface = RenderSurface(width=int(width), height=int(height))
    if scheduler is None:
        scheduler = AsyncioPaintScheduler(fps=cfg.display.paint_fps)

    loop_config = LoopConfig(
        confidence_threshold=percent_to_threshold(cfg.detection.confidence_threshold),
        stats_log_interval=cfg.display.stats_log_interval,
    )
    return DetectionLoop(source, detector, scheduler, surface, config=loop_config)

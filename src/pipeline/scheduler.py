"""
Frame-paint scheduling.

A PaintScheduler is a queue of one-shot callbacks run at the next paint
opportunity, the point where the host is ready to present a new surface.
Every callback requested before a tick runs at that tick. A request returns
a handle that cancel() accepts; cancelling a handle that already fired, or
was never issued, is a no-op.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

PaintCallback = Callable[[float], None]


class PaintScheduler(ABC):
    """Queue of callbacks run at the next paint opportunity."""

    @abstractmethod
    def request(self, callback: PaintCallback) -> int:
        """Run callback(paint_time) at the next paint opportunity; return a handle."""

    @abstractmethod
    def cancel(self, handle: int) -> None:
        """Withdraw a pending request."""

    @property
    @abstractmethod
    def pending_count(self) -> int:
        """Number of requests that have neither fired nor been cancelled."""


class AsyncioPaintScheduler(PaintScheduler):
    """
    Paint ticks at a fixed cadence on an asyncio event loop.

    Ticks fall on multiples of 1/fps in loop time, so callbacks requested
    within the same interval share a tick the way a display refresh does.

    Args:
        fps: Paint rate in ticks per second.
        loop: Event loop to schedule on. Defaults to the running loop at
            request time.
    """

    def __init__(self, fps: float = 30.0, loop: Optional[asyncio.AbstractEventLoop] = None):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self.interval = 1.0 / fps
        self._loop = loop
        self._pending: Dict[int, asyncio.TimerHandle] = {}
        self._ids = itertools.count(1)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def next_tick(self, now: float) -> float:
        return (math.floor(now / self.interval) + 1) * self.interval

    def request(self, callback: PaintCallback) -> int:
        loop = self._loop or asyncio.get_running_loop()
        handle = next(self._ids)
        self._pending[handle] = loop.call_at(self.next_tick(loop.time()), self._fire, handle, callback, loop)
        return handle

    def _fire(self, handle: int, callback: PaintCallback, loop: asyncio.AbstractEventLoop) -> None:
        if self._pending.pop(handle, None) is None:
            return
        try:
            callback(loop.time())
        except Exception as e:
            logging.error(f"Paint callback failed: {e}")

    def cancel(self, handle: int) -> None:
        timer = self._pending.pop(handle, None)
        if timer is not None:
            timer.cancel()

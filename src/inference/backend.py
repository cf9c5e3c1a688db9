"""
Inference backend interfaces.

The detection loop talks to an asynchronous Detector. Concrete model
backends are usually synchronous (InferenceBackend); ExecutorDetector
adapts one to the async contract by running it in a thread pool so a slow
model never blocks the event loop.

Backends return detections in the original frame's pixel coordinates and
apply no confidence threshold of their own beyond a low noise floor; the
loop filters against the user's threshold.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import AsyncIterable, Iterable, List, Optional, Protocol, Union

import numpy as np

from models.detection import Detection
from models.frame import FrameData

DetectionStream = Union[Iterable[Detection], AsyncIterable[Detection]]


class Detector(Protocol):
    async def detect(self, frame: FrameData) -> DetectionStream:
        ...


class InferenceBackend(Protocol):
    def detect(self, frame: np.ndarray) -> List[Detection]:
        ...


async def collect_detections(stream: DetectionStream) -> List[Detection]:
    """Drain a detector result, which may be a plain or an async iterable."""
    if hasattr(stream, "__aiter__"):
        return [d async for d in stream]
    return list(stream)


class ExecutorDetector:
    """
    Async Detector over a synchronous InferenceBackend.

    Args:
        backend: The blocking model wrapper.
        max_workers: Worker threads; 1 keeps calls into the model serialized.
    """

    def __init__(self, backend: InferenceBackend, max_workers: int = 1):
        self.backend = backend
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="inference",
        )

    async def detect(self, frame: FrameData) -> List[Detection]:
        if self._executor is None:
            raise RuntimeError("Detector has been shut down")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.backend.detect, frame.frame)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
            logging.info("Inference executor shut down")

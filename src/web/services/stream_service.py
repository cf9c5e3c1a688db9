from __future__ import annotations

import asyncio
from typing import AsyncIterator, Optional

from rendering.surface import RenderSurface

SNAPSHOT_FILENAME = "object_detection_snapshot.png"


class StreamService:
    """Out-of-band readers of the rendered surface."""

    def __init__(self, surface: RenderSurface):
        self.surface = surface

    def snapshot_png(self) -> Optional[bytes]:
        return self.surface.encode(".png")

    async def mjpeg_stream(self, fps: int = 10) -> AsyncIterator[bytes]:
        """
        Yield MJPEG multipart chunks of the rendered surface.

        A chunk is only sent when a new frame has been rendered since the
        previous one.
        """
        fps = max(1, min(30, int(fps)))
        delay = 1.0 / fps
        last_sent = None
        while True:
            rendered_at = self.surface.rendered_at
            if rendered_at is not None and rendered_at != last_sent:
                jpg = self.surface.encode(".jpg")
                if jpg is not None:
                    last_sent = rendered_at
                    yield b"--frame\r\nContent-Type: image/jpeg\r\n\r\n" + jpg + b"\r\n"
            await asyncio.sleep(delay)

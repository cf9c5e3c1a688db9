"""
REST API for the detection controls.

Handlers are `async def` so they run on the event loop that drives the
DetectionLoop; control calls never race an iteration.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response, StreamingResponse

from runtime.context import RuntimeContext
from ..api_models import (
    CountsResponse,
    HealthResponse,
    LoopStatusResponse,
    StartRequest,
    ThresholdRequest,
)
from ..services.detection_service import DetectionService
from ..services.health_service import HealthService
from ..services.stream_service import SNAPSHOT_FILENAME, StreamService

router = APIRouter()


def get_ctx(request: Request) -> RuntimeContext:
    return request.app.state.ctx


def get_detection_service(ctx: RuntimeContext = Depends(get_ctx)) -> DetectionService:
    return DetectionService(ctx.loop)


@router.get("/health", response_model=HealthResponse)
async def health(ctx: RuntimeContext = Depends(get_ctx)):
    return HealthService(ctx).get_health_summary()


@router.get("/status", response_model=LoopStatusResponse)
async def status(service: DetectionService = Depends(get_detection_service)):
    return service.status()


@router.post("/detection/start", response_model=LoopStatusResponse)
async def start_detection(
    body: Optional[StartRequest] = None,
    service: DetectionService = Depends(get_detection_service),
):
    return service.start(reset_counts=body.reset_counts if body else False)


@router.post("/detection/stop", response_model=LoopStatusResponse)
async def stop_detection(service: DetectionService = Depends(get_detection_service)):
    return service.stop()


@router.post("/detection/toggle", response_model=LoopStatusResponse)
async def toggle_detection(service: DetectionService = Depends(get_detection_service)):
    return service.toggle()


@router.put("/detection/threshold", response_model=LoopStatusResponse)
async def set_threshold(
    body: ThresholdRequest,
    service: DetectionService = Depends(get_detection_service),
):
    return service.set_threshold(body.percent)


@router.get("/counts", response_model=CountsResponse)
async def counts(service: DetectionService = Depends(get_detection_service)):
    return service.counts()


@router.post("/counts/reset", response_model=CountsResponse)
async def reset_counts(service: DetectionService = Depends(get_detection_service)):
    return service.reset_counts()


@router.get("/snapshot")
async def snapshot(ctx: RuntimeContext = Depends(get_ctx)):
    png = StreamService(ctx.surface).snapshot_png()
    if png is None:
        raise HTTPException(status_code=404, detail="Nothing has been rendered yet")
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{SNAPSHOT_FILENAME}"'},
    )


@router.get("/stream")
async def stream(ctx: RuntimeContext = Depends(get_ctx)):
    fps = ctx.settings.web.stream_fps
    return StreamingResponse(
        StreamService(ctx.surface).mjpeg_stream(fps=fps),
        media_type="multipart/x-mixed-replace; boundary=frame",
    )

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pipeline.stages.filter import MAX_THRESHOLD_PERCENT, MIN_THRESHOLD_PERCENT


class ThresholdRequest(BaseModel):
    percent: int = Field(
        ...,
        ge=MIN_THRESHOLD_PERCENT,
        le=MAX_THRESHOLD_PERCENT,
        description="Confidence threshold in percent",
    )


class StartRequest(BaseModel):
    reset_counts: bool = Field(False, description="Clear cumulative counts before starting")


class LabelCount(BaseModel):
    label: str
    count: int


class CountsResponse(BaseModel):
    """Cumulative counts in first-seen order; empty means nothing detected yet."""
    counts: List[LabelCount]
    total: int


class LoopStatusResponse(BaseModel):
    running: bool
    state: str = Field(..., description="running|stopped")
    threshold_percent: int
    frames_processed: int
    inference_failures: int
    render_failures: int
    acquisition_misses: int
    stale_discards: int
    started_at: Optional[float] = None
    frame_width: Optional[int] = None
    frame_height: Optional[int] = None
    last_render_ts: Optional[float] = None
    last_frame_detections: int = 0


class HealthResponse(BaseModel):
    status: str = Field(..., description="ok|degraded")
    warnings: List[str] = Field(default_factory=list)
    last_frame_age_s: Optional[float] = None
    uptime_seconds: float
    detail: Dict[str, object] = Field(default_factory=dict)

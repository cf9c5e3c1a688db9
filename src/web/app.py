"""
FastAPI application factory for the live detection controls.

Routes:
- /api/* -> REST API (status, start/stop, threshold, counts, snapshot, stream)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from runtime.context import RuntimeContext
from .routes import api


def create_app(ctx: RuntimeContext) -> FastAPI:
    """Create the FastAPI app bound to one runtime."""
    app = FastAPI(
        title="Live Object Detection",
        version="0.1.0",
        description="Real-time object detection with cumulative counts",
    )
    app.state.ctx = ctx

    # CORS for a separately served front end during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api.router, prefix="/api")
    return app

from .context import RuntimeContext
from .services import PreviewWindow, build_runtime, shutdown_runtime, start_runtime

__all__ = [
    "RuntimeContext",
    "PreviewWindow",
    "build_runtime",
    "shutdown_runtime",
    "start_runtime",
]

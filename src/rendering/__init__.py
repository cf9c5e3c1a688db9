"""
Rendering: the presentation surface and the detection overlay.
"""

from .surface import RenderSurface
from .overlay import OverlayRenderer, OverlayItem, format_label, label_origin, layout

__all__ = [
    "RenderSurface",
    "OverlayRenderer",
    "OverlayItem",
    "format_label",
    "label_origin",
    "layout",
]

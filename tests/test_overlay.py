"""
Tests for overlay layout and rendering.
"""

import numpy as np

from models.detection import BoundingBox, Detection
from models.frame import FrameDimensions
from rendering.overlay import (
    BOX_COLOR,
    LABEL_MIN_Y,
    OverlayRenderer,
    format_label,
    label_origin,
    layout,
)
from rendering.surface import RenderSurface

from fakes import make_frame


class TestLabels:
    def test_format_label(self):
        det = Detection.from_xywh("person", 0.92, 10, 10, 50, 100)
        assert format_label(det) == "person (92%)"

    def test_percent_rounds_half_up(self):
        assert format_label(Detection.from_xywh("cup", 0.875, 0, 0, 1, 1)) == "cup (88%)"
        assert format_label(Detection.from_xywh("cup", 0.304, 0, 0, 1, 1)) == "cup (30%)"

    def test_origin_lifted_above_box(self):
        assert label_origin(BoundingBox(40, 100, 20, 20)) == (40, 95)

    def test_origin_pinned_near_top(self):
        """Captions never go above the top margin."""
        assert label_origin(BoundingBox(40, 10, 20, 20)) == (40, LABEL_MIN_Y)
        assert label_origin(BoundingBox(40, 0, 20, 20)) == (40, LABEL_MIN_Y)
        assert label_origin(BoundingBox(40, 11, 20, 20)) == (40, 6)

    def test_layout(self):
        items = layout([Detection.from_xywh("person", 0.92, 10, 10, 50, 100)])
        assert len(items) == 1
        item = items[0]
        assert item.top_left == (10, 10)
        assert item.bottom_right == (60, 110)
        assert item.text == "person (92%)"
        assert item.text_origin == (10, LABEL_MIN_Y)


class TestOverlayRenderer:
    def test_draws_box_over_frame(self):
        surface = RenderSurface(640, 480)
        frame = make_frame(640, 480, index=3, value=0)
        det = Detection.from_xywh("person", 0.92, 10, 10, 50, 100)

        OverlayRenderer().render(frame, [det], surface)

        image = surface.image
        assert tuple(int(c) for c in image[60, 10]) == BOX_COLOR
        assert tuple(int(c) for c in image[110, 35]) == BOX_COLOR
        # Box interior shows the frame
        assert tuple(int(c) for c in image[60, 35]) == (0, 0, 0)
        assert surface.rendered_frame_index == 3

    def test_empty_batch_draws_frame_only(self):
        surface = RenderSurface(640, 480)
        frame = make_frame(640, 480, value=77)

        OverlayRenderer().render(frame, [], surface)

        assert np.all(surface.image == 77)
        assert surface.has_content

    def test_previous_overlays_are_cleared(self):
        surface = RenderSurface(320, 240)
        renderer = OverlayRenderer()
        renderer.render(make_frame(320, 240), [Detection.from_xywh("a", 0.9, 10, 10, 50, 50)], surface)

        renderer.render(make_frame(320, 240, index=2), [], surface)

        assert not np.any(surface.image)

    def test_surface_follows_frame_size(self):
        surface = RenderSurface(640, 480)
        OverlayRenderer().render(make_frame(320, 240, value=9), [], surface)
        assert surface.dimensions == FrameDimensions(320, 240)
        assert np.all(surface.image == 9)

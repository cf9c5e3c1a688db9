"""
Tests for the per-frame step that folds detections into the session.
"""

import pytest

from pipeline.session import DetectionSession
from pipeline.stages.measure import advance

from fakes import make_frame, person_and_cup


class TestAdvance:
    def test_filters_and_commits(self):
        session = DetectionSession(threshold=0.5)

        result = advance(session, make_frame(index=3), person_and_cup())

        assert [d.label for d in result.filtered] == ["person"]
        assert len(result.detections) == 2
        assert result.frame_index == 3
        assert session.counts == {"person": 1}
        assert session.last_result is result
        assert session.stats.frames_processed == 1

    def test_draw_sees_result_before_commit(self):
        session = DetectionSession(threshold=0.5)
        seen = []

        def draw(result):
            seen.append((result.frame_index, session.counts, session.stats.frames_processed))

        advance(session, make_frame(index=1), person_and_cup(), draw=draw)

        assert seen == [(1, {}, 0)]
        assert session.counts == {"person": 1}

    def test_failed_draw_commits_nothing(self):
        """A frame that cannot be drawn leaves counts and totals untouched."""
        session = DetectionSession(threshold=0.5)

        def draw(result):
            raise ValueError("cannot draw")

        with pytest.raises(ValueError):
            advance(session, make_frame(index=1), person_and_cup(), draw=draw)

        assert session.counts == {}
        assert session.last_result is None
        assert session.stats.frames_processed == 0

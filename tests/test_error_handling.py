"""Error handling and edge case tests.

Tests robustness of the application:
    - Invalid inputs (non-finite or negative frames, bad tempo/duration)
    - Degenerate inputs (no frames, unknown tempo, unknown keys)
    - Error classes carry correlation context and log themselves

These tests ensure the decision engine degrades gracefully instead of crashing.
"""

import logging
import math

import pytest

from autodj.core.errors import (
    AutoDJError,
    AnalysisError,
    ConfigurationError,
    MixPointDetectionError,
    PlanningError,
    SelectionError,
    ValidationError,
)
from autodj.core.models import SpectralFrame, Track, TransitionContext, frames_from_rows


# =============================================================================
# INVALID INPUT TESTS
# =============================================================================

@pytest.mark.unit
class TestInvalidInputs:
    """Structurally invalid input is rejected with ValidationError."""

    @pytest.mark.parametrize("row", [
        [math.nan, 0.1, 0.1, 0.0],
        [0.1, math.inf, 0.1, 0.0],
        [0.1, 0.1, 0.1, -1.0],
        [-0.5, 0.1, 0.1, 0.0],
    ])
    def test_bad_frame_values(self, row):
        with pytest.raises(ValidationError):
            SpectralFrame.from_row(row)

    def test_short_row(self):
        """ЧТО ПРОВЕРЯЕМ: a row without a timestamp is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            frames_from_rows([[0.1, 0.2, 0.3]])
        assert exc_info.value.data["row_length"] == 3

    def test_extra_band_columns_use_last_as_time(self):
        frame = SpectralFrame.from_row([0.1, 0.2, 0.3, 0.9, 4.5])
        assert frame.time_sec == 4.5

    @pytest.mark.parametrize("bpm", [-1.0, math.nan, math.inf])
    def test_bad_tempo(self, bpm):
        with pytest.raises(ValidationError):
            Track("Bad", bpm=bpm, duration_sec=100.0)

    @pytest.mark.parametrize("duration", [-0.1, math.nan])
    def test_bad_duration(self, duration):
        with pytest.raises(ValidationError):
            Track("Bad", bpm=120.0, duration_sec=duration)

    def test_bad_frame_interval(self):
        with pytest.raises(ValidationError):
            Track("Bad", frame_interval_sec=0.0)

    def test_raw_rows_become_frames(self):
        track = Track("Raw", frames=[[0.1, 0.1, 0.1, 0.0], (0.2, 0.1, 0.1, 0.1)])

        assert all(isinstance(f, SpectralFrame) for f in track.frames)
        assert track.frames[1].time_sec == 0.1
        assert track.frame_matrix.shape == (2, 4)

    def test_mixed_frames_and_rows(self):
        frame = SpectralFrame(0.1, 0.1, 0.1, 0.0)
        track = Track("Mixed", frames=[frame, [0.2, 0.1, 0.1, 0.1]])

        assert track.frames[0] is frame
        assert track.frames[1].bass == 0.2

    def test_short_row_in_track(self):
        """ЧТО ПРОВЕРЯЕМ: bad rows fail when the Track is built, not later"""
        with pytest.raises(ValidationError) as exc_info:
            Track("Bad", frames=[[0.1, 0.2]])
        assert exc_info.value.data["row_length"] == 2

    @pytest.mark.parametrize("item", [0.5, None, ["a", "b", "c", "d"]])
    def test_non_row_frame_item(self, item):
        with pytest.raises(ValidationError) as exc_info:
            Track("Bad", frames=[item])
        assert exc_info.value.data["index"] == 0


# =============================================================================
# DEGENERATE INPUT TESTS
# =============================================================================

@pytest.mark.unit
class TestGracefulDegradation:
    """Degenerate but valid input always yields finite results."""

    def test_unknown_everything_plans(self):
        from autodj.modules.transition import HeuristicTransitionPlanner

        a = Track("A")
        b = Track("B")
        result = HeuristicTransitionPlanner().plan(TransitionContext(a, b))

        assert result is not None
        assert result.plan.duration_sec > 0
        assert all(math.isfinite(w.volume_in) for w in result.plan.waypoints)
        assert result.plan.start_offset_in == 0.0

    def test_malformed_key_is_clash_not_crash(self):
        from autodj.modules.selection import calculate_compatibility

        a = Track("A", bpm=120.0, key="8A")
        b = Track("B", bpm=120.0, key="X9")
        # Both labels present but not neighbors -> clashing score
        assert calculate_compatibility(a, b) == pytest.approx(0.1 * 0.6 + 0.4)

    def test_key_normalized(self):
        track = Track("A", key=" 8a ")
        assert track.key == "8A"
        assert Track("B", key="  ").key is None

    def test_track_identity_equality(self):
        a = Track("Same", bpm=120.0)
        b = Track("Same", bpm=120.0)
        assert a != b
        assert a == a
        assert len({a, b}) == 2

    def test_track_to_dict_excludes_frames(self):
        track = Track("A", bpm=120.0, frames=frames_from_rows([[0.1, 0.1, 0.1, 0.0]]))
        data = track.to_dict()
        assert data["n_frames"] == 1
        assert "frames" not in data

    def test_with_mix_points(self):
        track = Track("A", duration_sec=100.0)
        updated = track.with_mix_points(10, 90)
        assert (updated.mix_in_point, updated.mix_out_point) == (10.0, 90.0)
        assert track.mix_in_point == 0.0


# =============================================================================
# ERROR CLASS TESTS
# =============================================================================

@pytest.mark.unit
class TestErrorClasses:
    """Tests for the AutoDJError hierarchy."""

    def test_hierarchy(self):
        assert issubclass(ValidationError, AutoDJError)
        assert issubclass(ConfigurationError, AutoDJError)
        assert issubclass(MixPointDetectionError, AnalysisError)
        assert issubclass(SelectionError, AutoDJError)
        assert issubclass(PlanningError, AutoDJError)

    def test_captures_correlation_context(self):
        from autodj.common.logging import set_correlation_id, set_session_id

        set_correlation_id("corr-1")
        set_session_id("sess-1")
        err = PlanningError("boom", data={"track": "A"})

        assert err.correlation_id == "corr-1"
        assert err.session_id == "sess-1"
        assert err.to_dict() == {
            "error": "PlanningError",
            "message": "boom",
            "data": {"track": "A"},
            "correlation_id": "corr-1",
            "session_id": "sess-1",
            "cause": None,
        }

    def test_logs_on_creation(self, caplog):
        with caplog.at_level(logging.ERROR, logger="autodj.core.errors"):
            AnalysisError("analysis broke", cause=ValueError("inner"))

        assert "analysis broke" in caplog.text
        record = caplog.records[-1]
        assert record.structured_data["error_type"] == "AnalysisError"
        assert record.structured_data["cause"] == "inner"

    def test_str_is_message(self):
        assert str(SelectionError("nothing to pick")) == "nothing to pick"


@pytest.mark.unit
class TestKeyValidation:
    """Key labels must be strings or None."""

    def test_non_string_key(self):
        with pytest.raises(ValidationError) as exc_info:
            Track("Bad", key=8)
        assert exc_info.value.data["key_type"] == "int"

"""Unit tests for compatibility scoring, intro window and intuitive fade.

Tests cover:
    - calculate_compatibility() harmony/tempo weighting and range
    - calculate_intro_window() rise detection and fallbacks
    - calculate_intuitive_fade() base selection and key multipliers
"""

import itertools

import numpy as np
import pytest

from autodj.core.models import Track, frames_from_rows
from autodj.modules.config import CompatibilityConfig
from autodj.modules.selection import (
    calculate_compatibility,
    calculate_intro_window,
    calculate_intuitive_fade,
    harmonic_score,
)


def _track_with_frames(frame_builder, segments, duration, mix_in, key=None, bpm=120.0):
    rows = frame_builder(segments, duration)
    return Track("T", bpm=bpm, duration_sec=duration, key=key,
                 frames=frames_from_rows(rows), mix_in_point=mix_in)


# =============================================================================
# COMPATIBILITY
# =============================================================================

@pytest.mark.unit
class TestCompatibility:
    """Tests for calculate_compatibility()."""

    def test_same_key_close_tempo(self):
        """Two '8A' tracks at 120 and 121 BPM.

        ЧТО ПРОВЕРЯЕМ:
            1.0 * 0.6 + (1 - 1/15) * 0.4 ~ 0.973
        """
        a = Track("A", bpm=120.0, key="8A")
        b = Track("B", bpm=121.0, key="8A")

        assert calculate_compatibility(a, b) == pytest.approx(0.97333, abs=1e-4)

    @pytest.mark.parametrize("key_b,expected", [
        ("8A", 1.0),
        ("9A", 0.8),
        ("8B", 0.8),
        ("3B", 0.1),
        (None, 0.5),
    ])
    def test_harmonic_score(self, key_b, expected):
        a = Track("A", key="8A")
        b = Track("B", key=key_b)
        assert harmonic_score(a, b) == expected

    def test_unknown_key_on_either_side(self):
        a = Track("A", bpm=128.0)
        b = Track("B", bpm=128.0, key="8A")
        assert calculate_compatibility(a, b) == pytest.approx(0.5 * 0.6 + 0.4)
        assert calculate_compatibility(b, a) == pytest.approx(0.5 * 0.6 + 0.4)

    def test_tempo_term_floors_at_zero(self):
        a = Track("A", bpm=90.0, key="8A")
        b = Track("B", bpm=174.0, key="8A")
        assert calculate_compatibility(a, b) == pytest.approx(0.6)

    def test_range_over_grid(self):
        """Always in [0, 1] for any tempo/key combination."""
        keys = [None, "1A", "8A", "8B", "12B", "XX"]
        tempos = [0.0, 60.0, 120.0, 127.0, 200.0]
        tracks = [Track("T", bpm=t, key=k) for t, k in itertools.product(tempos, keys)]

        for a in tracks:
            for b in tracks:
                assert 0.0 <= calculate_compatibility(a, b) <= 1.0

    def test_self_beats_different_key_and_tempo(self):
        a = Track("A", bpm=124.0, key="5A")
        for key in ["6A", "5B", "11B", None]:
            b = Track("B", bpm=131.0, key=key)
            assert calculate_compatibility(a, a) >= calculate_compatibility(a, b)

    def test_custom_weights(self):
        cfg = CompatibilityConfig(harmonic_weight=1.0, tempo_weight=0.0)
        a = Track("A", bpm=120.0, key="8A")
        b = Track("B", bpm=180.0, key="9A")
        assert calculate_compatibility(a, b, cfg) == pytest.approx(0.8)


# =============================================================================
# INTRO WINDOW
# =============================================================================

@pytest.mark.unit
class TestIntroWindow:
    """Tests for calculate_intro_window()."""

    def test_rise_after_mix_in(self, frame_builder):
        """Quiet until 20s, loud afterwards; mix-in at 5s -> 15s intro."""
        track = _track_with_frames(frame_builder, [(20.0, 0.1), (60.0, 0.6)], 60.0, 5.0)
        assert calculate_intro_window(track) == pytest.approx(15.0)

    def test_absolute_threshold(self, frame_builder):
        """A frame above 0.4 ends the intro even without a 1.5x rise."""
        track = _track_with_frames(frame_builder, [(10.0, 0.3), (60.0, 0.42)], 60.0, 0.0)
        assert calculate_intro_window(track) == pytest.approx(10.0)

    def test_first_frames_skipped(self, frame_builder):
        """The 10 frames right after the mix-in frame are not scanned."""
        track = _track_with_frames(frame_builder, [(0.5, 0.1), (60.0, 0.9)], 60.0, 0.0)
        # Rise at 0.5s (frame 5) is inside the skipped range -> frame 10 (1.0s)
        assert calculate_intro_window(track) == pytest.approx(1.0)

    def test_no_rise_defaults_to_8s(self, frame_builder):
        track = _track_with_frames(frame_builder, [(60.0, 0.1)], 60.0, 5.0)
        assert calculate_intro_window(track) == 8.0

    def test_scan_limited_to_300_frames(self, frame_builder):
        """Rise 40s after the mix-in is beyond the 30s scan range."""
        track = _track_with_frames(frame_builder, [(45.0, 0.1), (90.0, 0.9)], 90.0, 5.0)
        assert calculate_intro_window(track) == 8.0

    def test_no_frames(self):
        assert calculate_intro_window(Track("Empty", duration_sec=100.0)) == 0.0

    def test_mix_in_beyond_frames(self, frame_builder):
        track = _track_with_frames(frame_builder, [(10.0, 0.1)], 10.0, 50.0)
        assert calculate_intro_window(track) == 8.0

    def test_uses_frame_interval(self):
        """Index arithmetic follows the track's frame_interval_sec."""
        t = np.arange(400) * 0.5
        energy = np.where(t < 100.0, 0.1, 0.9)
        rows = np.column_stack([energy * 0.5, energy * 0.25, energy * 0.25, t])
        track = Track("Sparse", bpm=120.0, duration_sec=200.0, frames=frames_from_rows(rows),
                      mix_in_point=10.0, frame_interval_sec=0.5)

        # Reference frame 20 (10s); rise at frame 200 (100s)
        assert calculate_intro_window(track) == pytest.approx(90.0)


# =============================================================================
# INTUITIVE FADE
# =============================================================================

@pytest.mark.unit
class TestIntuitiveFade:
    """Tests for calculate_intuitive_fade()."""

    @pytest.fixture
    def long_intro(self, frame_builder):
        """Intro of 15s (> 12s)."""
        def make(key):
            return _track_with_frames(frame_builder, [(20.0, 0.1), (60.0, 0.6)], 60.0, 5.0, key=key)
        return make

    def test_long_intro_neighbors(self, long_intro):
        current = Track("A", key="8A")
        assert calculate_intuitive_fade(current, long_intro("9A")) == 14000

    def test_long_intro_clash(self, long_intro):
        current = Track("A", key="8A")
        assert calculate_intuitive_fade(current, long_intro("3B")) == 6000

    def test_long_intro_unknown_key_clamped(self, long_intro):
        current = Track("A")
        assert calculate_intuitive_fade(current, long_intro("9A")) == 8000

    def test_default_intro_same_key(self, frame_builder):
        """No rise -> 8s base, same key x1.4 = 11.2s."""
        nxt = _track_with_frames(frame_builder, [(60.0, 0.1)], 60.0, 5.0, key="8A")
        assert calculate_intuitive_fade(Track("A", key="8A"), nxt) == 11200

    def test_short_intro_clash(self, club_track):
        """Club track intro after mix-in is under 5s -> 4s base, clash x0.6."""
        assert calculate_intro_window(club_track) < 5.0
        assert calculate_intuitive_fade(Track("A", key="2B"), club_track) == 2400

    def test_no_frames_unknown_keys(self):
        """Intro 0 -> 4s base, unknown keys clamp to [4, 8] -> 4s."""
        assert calculate_intuitive_fade(Track("A"), Track("B")) == 4000

    def test_milliseconds_truncated(self):
        """4.0007s -> 4000ms, fractions of a millisecond are dropped."""
        config = CompatibilityConfig(fade_short_sec=4.0007)
        assert calculate_intuitive_fade(Track("A"), Track("B"), config) == 4000

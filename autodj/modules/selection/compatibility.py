"""
Compatibility Scoring - Score how well two tracks mix.

- calculate_compatibility: harmony + tempo, in [0, 1]
- calculate_intro_window: seconds of intro after the mix-in point
- calculate_intuitive_fade: fade length in ms from intro and keys

All functions are stateless and read tracks only.
"""

import math

import numpy as np

from autodj.common.primitives.camelot import is_harmonic_neighbor, tempo_similarity
from autodj.common.primitives.frames import frame_energy, TIME
from autodj.core.models import Track
from autodj.modules.config import CompatibilityConfig, DEFAULT_COMPATIBILITY


def harmonic_score(
    track_a: Track,
    track_b: Track,
    config: CompatibilityConfig = DEFAULT_COMPATIBILITY,
) -> float:
    """
    Score key compatibility.

    Returns:
        1.0 same key, 0.8 Camelot neighbors, 0.1 clashing,
        0.5 when either key is unknown
    """
    if not track_a.has_key or not track_b.has_key:
        return config.score_unknown_key
    if track_a.key == track_b.key:
        return config.score_same_key
    if is_harmonic_neighbor(track_a.key, track_b.key):
        return config.score_neighbor_key
    return config.score_clashing_key


def calculate_compatibility(
    track_a: Track,
    track_b: Track,
    config: CompatibilityConfig = DEFAULT_COMPATIBILITY,
) -> float:
    """
    Pairwise compatibility in [0, 1].

    harmonic * 0.6 + tempo * 0.4, where tempo falls linearly to 0 at
    15 BPM apart.

    Example:
        Two '8A' tracks at 120 and 121 BPM score 0.6 + 0.4 * 14/15 ~ 0.973
    """
    harmonic = harmonic_score(track_a, track_b, config)
    tempo = tempo_similarity(track_a.bpm, track_b.bpm, config.tempo_tolerance_bpm)
    return harmonic * config.harmonic_weight + tempo * config.tempo_weight


def calculate_intro_window(
    track: Track,
    config: CompatibilityConfig = DEFAULT_COMPATIBILITY,
) -> float:
    """
    Estimate how long the intro runs past the mix-in point.

    The frame at the mix-in point gives the reference energy. Scanning
    forward (skipping the first 10 frames, at most 300 frames after the
    reference), the first frame louder than 1.5x the reference or above
    an absolute 0.4 marks the end of the intro.

    Frame indices are derived from the track's frame_interval_sec, so
    the producer's sampling cadence must match it.

    Args:
        track: Analyzed track (mix_in_point set)
        config: Intro thresholds

    Returns:
        Intro length in seconds; 0.0 without frames, 8.0 when the
        scan finds no rise
    """
    if not track.has_frames:
        return 0.0

    matrix = track.frame_matrix
    n = matrix.shape[0]
    start = int(math.floor(track.mix_in_point / track.frame_interval_sec + 1e-9))
    if start < 0 or start >= n:
        return config.intro_default_sec

    energy = frame_energy(matrix)
    initial = float(energy[start])

    lo = start + config.intro_skip_frames
    hi = min(start + config.intro_scan_frames, n)
    if lo >= hi:
        return config.intro_default_sec

    scan = energy[lo:hi]
    rising = (scan > initial * config.intro_rise_ratio) | (scan > config.intro_absolute_energy)
    hits = np.flatnonzero(rising)
    if hits.size == 0:
        return config.intro_default_sec

    return float(matrix[lo + hits[0], TIME]) - track.mix_in_point


def calculate_intuitive_fade(
    current: Track,
    next_track: Track,
    config: CompatibilityConfig = DEFAULT_COMPATIBILITY,
) -> int:
    """
    Fade length a DJ would pick by ear, in milliseconds.

    Base 8s; 10s when the incoming intro is longer than 12s, 4s when it
    is shorter than 5s. With both keys known the base is stretched x1.4
    for neighbors and shortened x0.6 otherwise; with a key missing it is
    clamped to [4s, 8s] instead. Milliseconds are truncated, not rounded.
    """
    intro = calculate_intro_window(next_track, config)

    duration = config.fade_base_sec
    if intro > config.fade_long_intro_sec:
        duration = config.fade_long_sec
    if intro < config.fade_short_intro_sec:
        duration = config.fade_short_sec

    if current.has_key and next_track.has_key:
        if is_harmonic_neighbor(current.key, next_track.key):
            duration *= config.fade_neighbor_factor
        else:
            duration *= config.fade_clash_factor
    else:
        duration = min(max(duration, config.fade_unknown_min_sec), config.fade_unknown_max_sec)

    return int(duration * 1000)

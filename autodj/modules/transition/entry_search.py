"""
Entry-Offset Search - Where the incoming track should start playing.

Matches the tail of the outgoing track (ending at its mix-out point)
against candidate windows of the incoming track on its beat grid.

Each candidate is scored on:
- groove pattern: per-beat (bass, mid, high) fingerprint distance
- spectral continuity: average spectrum distance over the window
- energy: how close the energy jump is to the desired delta
- tail penalty: soft push away from the last 40% of the track

The earliest candidate with the highest score wins.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from autodj.common.primitives.beats import (
    beat_length,
    build_groove_fingerprint,
    sequence_distance,
)
from autodj.common.primitives.frames import (
    window_average_energy,
    window_average_spectrum,
    spectrum_distance,
)
from autodj.core.models import Track
from autodj.modules.config import PlannerConfig, DEFAULT_PLANNER


@dataclass
class EntryOffsetResult:
    """Chosen entry offset plus search diagnostics."""
    offset_sec: float
    pattern_beats: int = 0          # Fingerprint length used, 0 = pattern skipped
    candidates_scanned: int = 0
    best_score: float = float('-inf')


def outgoing_fingerprint(
    current: Track,
    end_time: float,
    config: PlannerConfig = DEFAULT_PLANNER,
) -> Tuple[np.ndarray, int]:
    """
    Groove fingerprint of the last beats before end_time.

    Tries 16 beats, then 8 when fewer than 8 beats had data, then 4 when
    fewer than 4 did.

    Returns:
        (fingerprint, n_beats_requested)
    """
    beat_len = beat_length(current.bpm)
    lengths = config.fingerprint_beats
    fingerprint = np.zeros((0, 3), dtype=np.float64)
    n_beats = lengths[0]

    for i, n_beats in enumerate(lengths):
        start = max(0.0, end_time - beat_len * n_beats)
        fingerprint = build_groove_fingerprint(current.frame_matrix, current.bpm, start, n_beats)
        # Accept unless the next shorter length is still larger than what we got
        if i + 1 >= len(lengths) or len(fingerprint) >= lengths[i + 1]:
            break

    return fingerprint, n_beats


def tail_penalty(t: float, duration_sec: float, config: PlannerConfig = DEFAULT_PLANNER) -> float:
    """0 before 60% of the track, falling linearly to -1 at the end."""
    if duration_sec <= 0:
        return 0.0
    center = duration_sec * config.tail_start_ratio
    if t <= center:
        return 0.0
    span = duration_sec - center
    if span <= 0:
        return -1.0
    return -min(max((t - center) / span, 0.0), 1.0)


def candidate_start_times(min_start: float, max_start: float, bpm: float,
                          config: PlannerConfig = DEFAULT_PLANNER) -> np.ndarray:
    """Grid points in [min_start, max_start] on the beat grid (0.25s grid without tempo)."""
    beat_len = beat_length(bpm)
    if beat_len > 0:
        step = beat_len
        t0 = math.ceil(min_start / beat_len) * beat_len
        if t0 < min_start:
            t0 += beat_len
    else:
        step = config.fallback_step_sec
        t0 = min_start

    if t0 > max_start:
        return np.zeros(0, dtype=np.float64)
    n = int(math.floor((max_start - t0) / step + 1e-9)) + 1
    times = t0 + np.arange(n, dtype=np.float64) * step
    return times[times <= max_start]


def find_best_entry_offset(
    current: Track,
    next_track: Track,
    window_sec: float,
    desired_energy_delta: float,
    config: PlannerConfig = DEFAULT_PLANNER,
) -> EntryOffsetResult:
    """
    Find the best start offset into the incoming track.

    Args:
        current: Outgoing track (mix_out_point set)
        next_track: Incoming track (mix_in_point set)
        window_sec: Comparison window length
        desired_energy_delta: target_energy - current_energy
        config: Search weights and margins

    Returns:
        EntryOffsetResult; offset is next_track.mix_in_point when either
        track has no frames or the candidate range is empty, otherwise it
        lies in [mix_in + 5s, duration - window - 2s]
    """
    fallback = EntryOffsetResult(offset_sec=next_track.mix_in_point)
    if not current.has_frames or not next_track.has_frames:
        return fallback

    matrix_a = current.frame_matrix
    matrix_b = next_track.frame_matrix

    # Reference: tail of the outgoing track
    a_end = current.mix_out_point
    a_start = max(0.0, a_end - window_sec)
    a_spectrum = window_average_spectrum(matrix_a, a_start, a_end)
    a_energy = window_average_energy(matrix_a, a_start, a_end)

    fingerprint_a, n_beats = outgoing_fingerprint(current, a_end, config)

    # Candidate range in the incoming track
    min_start = next_track.mix_in_point + config.entry_min_offset_sec
    max_start = next_track.duration_sec - window_sec - config.entry_end_margin_sec
    if max_start <= min_start:
        return fallback

    use_pattern = len(fingerprint_a) >= config.min_fingerprint_beats and next_track.bpm > 0
    candidates = candidate_start_times(min_start, max_start, next_track.bpm, config)

    best_offset = min_start
    best_score = float('-inf')

    for t in candidates:
        t = float(t)
        b_end = t + window_sec

        pattern_score = 0.0
        if use_pattern:
            fingerprint_b = build_groove_fingerprint(matrix_b, next_track.bpm, t, n_beats)
            if len(fingerprint_b) >= config.min_fingerprint_beats:
                pattern_score = -sequence_distance(fingerprint_a, fingerprint_b)

        continuity_score = -spectrum_distance(a_spectrum, window_average_spectrum(matrix_b, t, b_end))

        energy_delta = window_average_energy(matrix_b, t, b_end) - a_energy
        energy_score = -abs(energy_delta - desired_energy_delta)

        score = (
            config.pattern_weight * pattern_score
            + config.continuity_weight * continuity_score
            + config.energy_weight * energy_score
            + config.tail_weight * tail_penalty(t, next_track.duration_sec, config)
        )

        if score > best_score:
            best_score = score
            best_offset = t

    return EntryOffsetResult(
        offset_sec=best_offset,
        pattern_beats=n_beats if use_pattern else 0,
        candidates_scanned=len(candidates),
        best_score=best_score,
    )

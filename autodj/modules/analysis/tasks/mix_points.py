"""
Mix-Point Detection - Where to start and stop blending a track.

Works on the beat energy profile (one averaged energy per beat):

- Mix-in: first stable high-energy plateau after the intro, i.e. an
  8-beat run clearly above the intro median that is no longer ramping.
- Mix-out: last high plateau that is immediately followed by an 8-beat
  quiet tail (the outro breakdown).

Both searches fall back to fixed positions when no plateau qualifies.
"""

import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from autodj.common.logging import get_logger
from autodj.common.primitives.beats import (
    BeatEnergyProfile,
    compute_beat_energy_profile,
)
from autodj.core.interfaces import TaskResult
from autodj.core.models import Track
from autodj.modules.config import MixPointConfig, DEFAULT_MIX_POINTS
from .base import BaseTask

logger = get_logger(__name__)


@dataclass
class MixPointResult(TaskResult):
    """Result of mix point detection."""
    success: bool = True
    task_name: str = "MixPointDetection"
    processing_time_sec: float = 0.0
    error: Optional[str] = None
    mix_in_point: float = 0.0
    mix_out_point: float = 0.0
    n_beats: int = 0
    mix_in_from_plateau: bool = False
    mix_out_from_plateau: bool = False


def _stable_plateau(window: np.ndarray, threshold: float, stability_ratio: float) -> bool:
    """All beats above threshold and max/min within the stability ratio."""
    lowest = float(window.min())
    return lowest > threshold and float(window.max()) < lowest * stability_ratio


def find_mix_in_point(
    profile: BeatEnergyProfile,
    config: MixPointConfig = DEFAULT_MIX_POINTS,
) -> Tuple[float, bool]:
    """
    Detect the mix-in point.

    Threshold is median(first half of beats) * 1.4. Scanning forward from
    the first beat at or after 2s, the first beat that opens a stable
    8-beat plateau above the threshold wins.

    Args:
        profile: Beat energy profile of the track
        config: Detection thresholds

    Returns:
        (time_sec, found) where found is False for the fallback
        (first beat's time, or 0.0 for an empty profile)
    """
    if profile.is_empty:
        return 0.0, False

    n = len(profile)
    energies = profile.energies
    times = profile.times

    first_half = energies[: n // 2]
    if first_half.size == 0:
        first_half = energies
    threshold = float(np.median(first_half)) * config.mix_in_threshold_ratio

    w = config.window_beats
    start = int(np.searchsorted(times, config.mix_in_min_time_sec, side='left'))

    for i in range(start, n - w + 1):
        if _stable_plateau(energies[i:i + w], threshold, config.plateau_stability_ratio):
            return float(times[i]), True

    return float(times[0]), False


def find_mix_out_point(
    profile: BeatEnergyProfile,
    duration_sec: float,
    config: MixPointConfig = DEFAULT_MIX_POINTS,
) -> Tuple[float, bool]:
    """
    Detect the mix-out point.

    Uses the second half of the beats. Scanning backward, the first
    position where 8 beats above median * 1.1 are immediately followed by
    8 beats below median * 0.6 gives the plateau's last beat, clamped to
    duration - 5s.

    Args:
        profile: Beat energy profile of the track
        duration_sec: Track duration
        config: Detection thresholds

    Returns:
        (time_sec, found); fallback is max(0, duration - 10s)
    """
    fallback = max(0.0, duration_sec - config.mix_out_fallback_sec)
    if profile.is_empty:
        return fallback, False

    n = len(profile)
    half = profile.slice(n // 2, n)
    if half.is_empty:
        half = profile

    energies = half.energies
    times = half.times
    median = float(np.median(energies))
    high = median * config.mix_out_high_ratio
    low = median * config.mix_out_low_ratio

    w = config.window_beats
    for p in range(len(half) - 2 * w, -1, -1):
        plateau = energies[p:p + w]
        tail = energies[p + w:p + 2 * w]
        if plateau.min() > high and tail.max() < low:
            mix_out = min(float(times[p + w - 1]), duration_sec - config.mix_out_end_margin_sec)
            return max(0.0, mix_out), True

    return fallback, False


class MixPointDetectionTask(BaseTask):
    """
    Detect mix-in and mix-out points from the beat energy profile.

    Pure business logic, calls NO other Tasks.
    """

    def __init__(self, config: Optional[MixPointConfig] = None):
        super().__init__()
        self.config = config or DEFAULT_MIX_POINTS

    @property
    def name(self) -> str:
        return "MixPointDetection"

    def execute(self, track: Track) -> MixPointResult:
        """Detect mix points for an already built Track."""
        return self.execute_with_data(track.frame_matrix, track.bpm, track.duration_sec)

    def execute_with_data(
        self,
        frame_matrix: np.ndarray,
        bpm: float,
        duration_sec: float,
    ) -> MixPointResult:
        """
        Detect mix points from explicit data.

        Args:
            frame_matrix: (n_frames, 4) [bass, mid, high, time]
            bpm: Tempo, <= 0 when unknown
            duration_sec: Track duration
        """
        start_time = time.time()

        profile = compute_beat_energy_profile(frame_matrix, bpm)
        mix_in, in_found = find_mix_in_point(profile, self.config)
        mix_out, out_found = find_mix_out_point(profile, duration_sec, self.config)

        logger.debug("Mix points detected", data={
            "n_beats": len(profile),
            "mix_in": round(mix_in, 3),
            "mix_out": round(mix_out, 3),
            "mix_in_from_plateau": in_found,
            "mix_out_from_plateau": out_found,
        })

        return MixPointResult(
            success=True,
            processing_time_sec=time.time() - start_time,
            mix_in_point=mix_in,
            mix_out_point=mix_out,
            n_beats=len(profile),
            mix_in_from_plateau=in_found,
            mix_out_from_plateau=out_found,
        )

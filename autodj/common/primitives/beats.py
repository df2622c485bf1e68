"""
Beat Primitives - Beat-synchronous energy and groove fingerprints.

Two views of a frame matrix on a tempo grid:
- beat energy profile: averaged summed energy per beat window [start, end)
  used for plateau detection
- groove fingerprint: averaged (bass, mid, high) per beat over a fixed
  number of beats, used for pattern matching between two tracks

All functions are pure numpy operations.
"""

import numpy as np
from dataclasses import dataclass
from typing import List

from .frames import N_BANDS, TIME, frame_energy, window_bounds


@dataclass(frozen=True)
class BeatEnergySample:
    """Averaged frame energy over one beat window."""
    beat_index: int
    time_sec: float      # Window midpoint
    energy: float


@dataclass
class BeatEnergyProfile:
    """
    Per-beat energy over a whole track.

    Beats without any frame are omitted, so indices may have gaps.
    """
    beat_indices: np.ndarray   # (n_beats,) int
    times: np.ndarray          # (n_beats,) midpoint seconds
    energies: np.ndarray       # (n_beats,) averaged summed energy
    beat_length_sec: float = 0.0

    def __len__(self) -> int:
        return int(self.energies.shape[0])

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def samples(self) -> List[BeatEnergySample]:
        """Materialize as a list of samples."""
        return [
            BeatEnergySample(int(i), float(t), float(e))
            for i, t, e in zip(self.beat_indices, self.times, self.energies)
        ]

    def slice(self, start: int, stop: int) -> 'BeatEnergyProfile':
        """Sub-profile over sample positions [start, stop)."""
        return BeatEnergyProfile(
            beat_indices=self.beat_indices[start:stop],
            times=self.times[start:stop],
            energies=self.energies[start:stop],
            beat_length_sec=self.beat_length_sec,
        )


def beat_length(bpm: float) -> float:
    """Seconds per beat, 0.0 when tempo is unknown."""
    if bpm <= 0:
        return 0.0
    return 60.0 / bpm


def empty_profile() -> BeatEnergyProfile:
    return BeatEnergyProfile(
        beat_indices=np.zeros(0, dtype=np.int64),
        times=np.zeros(0, dtype=np.float64),
        energies=np.zeros(0, dtype=np.float64),
    )


def compute_beat_energy_profile(matrix: np.ndarray, bpm: float) -> BeatEnergyProfile:
    """
    Average summed band energy per beat window.

    Beat b covers [b * beat_len, (b + 1) * beat_len). Frames are assigned
    to beats by floor division of their timestamp; beats with no frames
    are dropped from the profile.

    Args:
        matrix: Frame matrix (n_frames, 4)
        bpm: Tempo in beats per minute

    Returns:
        BeatEnergyProfile, empty when bpm <= 0 or there are no frames
    """
    beat_len = beat_length(bpm)
    if beat_len <= 0 or matrix.shape[0] == 0:
        return empty_profile()

    beat_of_frame = np.floor(matrix[:, TIME] / beat_len).astype(np.int64)
    beat_of_frame = np.maximum(beat_of_frame, 0)

    energy = frame_energy(matrix)
    sums = np.bincount(beat_of_frame, weights=energy)
    counts = np.bincount(beat_of_frame)

    present = np.nonzero(counts)[0]
    averages = sums[present] / counts[present]

    return BeatEnergyProfile(
        beat_indices=present.astype(np.int64),
        times=(present + 0.5) * beat_len,
        energies=averages.astype(np.float64),
        beat_length_sec=beat_len,
    )


def build_groove_fingerprint(
    matrix: np.ndarray,
    bpm: float,
    start_time: float,
    n_beats: int,
) -> np.ndarray:
    """
    Per-beat average (bass, mid, high) for n_beats starting at start_time.

    Each beat window [start, end] is inclusive on both ends. The sequence
    stops at the first beat with no frames.

    Returns:
        (k, 3) array with k <= n_beats; (0, 3) when bpm <= 0 or no data
    """
    beat_len = beat_length(bpm)
    if matrix.shape[0] == 0 or beat_len <= 0 or n_beats <= 0:
        return np.zeros((0, N_BANDS), dtype=np.float64)

    times = matrix[:, TIME]
    rows = []
    for b in range(n_beats):
        t_start = start_time + b * beat_len
        lo, hi = window_bounds(times, t_start, t_start + beat_len)
        if hi == lo:
            break
        rows.append(matrix[lo:hi, :N_BANDS].mean(axis=0))

    if not rows:
        return np.zeros((0, N_BANDS), dtype=np.float64)
    return np.vstack(rows)


def sequence_distance(seq_a: np.ndarray, seq_b: np.ndarray) -> float:
    """
    Root-mean-square Euclidean distance between two fingerprints.

    Beats are matched element-wise; the longer sequence is truncated
    to the shorter one.

    Returns:
        Distance >= 0, or +inf when either sequence is empty
    """
    n = min(len(seq_a), len(seq_b))
    if n == 0:
        return float('inf')
    diff = np.asarray(seq_a[:n], dtype=np.float64) - np.asarray(seq_b[:n], dtype=np.float64)
    return float(np.sqrt((diff * diff).sum(axis=1).mean()))

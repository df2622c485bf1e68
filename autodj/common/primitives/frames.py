"""
Frame Primitives - Window statistics over a spectral frame matrix.

A frame matrix is an (n_frames, 4) float array with columns
[bass, mid, high, time_sec], rows ordered by non-decreasing time.
This is the in-memory form of a track's spectral map.

All functions are pure and operate on numpy arrays only.
Windows are located with binary search over the time column, so
callers must keep timestamps monotonic.
"""

import numpy as np
from typing import Sequence, Tuple

# Column layout of a frame matrix
BASS = 0
MID = 1
HIGH = 2
TIME = 3
N_BANDS = 3

EMPTY_MATRIX_SHAPE = (0, 4)


def as_frame_matrix(rows: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Stack (bass, mid, high, time) rows into a C-contiguous float64 matrix.

    Args:
        rows: Iterable of 4-element rows

    Returns:
        Frame matrix (n_frames, 4); shape (0, 4) when empty
    """
    if len(rows) == 0:
        return np.zeros(EMPTY_MATRIX_SHAPE, dtype=np.float64)
    return np.ascontiguousarray(np.asarray(rows, dtype=np.float64).reshape(-1, 4))


def frame_energy(matrix: np.ndarray) -> np.ndarray:
    """Summed band energy (bass + mid + high) per frame."""
    if matrix.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    return matrix[:, :N_BANDS].sum(axis=1)


def mean_energy(matrix: np.ndarray) -> float:
    """
    Mean summed band energy over all frames, clamped to [0, 1].

    Returns 0.0 for an empty matrix.
    """
    if matrix.shape[0] == 0:
        return 0.0
    return float(np.clip(frame_energy(matrix).mean(), 0.0, 1.0))


def window_bounds(times: np.ndarray, t_start: float, t_end: float) -> Tuple[int, int]:
    """
    Index range of frames with t_start <= time <= t_end (both inclusive).

    Returns:
        (lo, hi) such that times[lo:hi] is the window; lo == hi when empty
    """
    lo = int(np.searchsorted(times, t_start, side='left'))
    hi = int(np.searchsorted(times, t_end, side='right'))
    return lo, max(lo, hi)


def window_average_spectrum(matrix: np.ndarray, t_start: float, t_end: float) -> np.ndarray:
    """
    Average (bass, mid, high) over frames inside [t_start, t_end].

    Returns:
        3-vector; zeros when no frame falls inside the window
    """
    lo, hi = window_bounds(matrix[:, TIME], t_start, t_end)
    if hi == lo:
        return np.zeros(N_BANDS, dtype=np.float64)
    return matrix[lo:hi, :N_BANDS].mean(axis=0)


def window_average_energy(matrix: np.ndarray, t_start: float, t_end: float) -> float:
    """Average summed band energy inside [t_start, t_end], 0.0 when empty."""
    lo, hi = window_bounds(matrix[:, TIME], t_start, t_end)
    if hi == lo:
        return 0.0
    return float(matrix[lo:hi, :N_BANDS].sum(axis=1).mean())


def spectrum_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two 3-band spectra."""
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))

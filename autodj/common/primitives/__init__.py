"""
Layer 1: PRIMITIVES - Pure numeric functions

Stateless helpers over frame matrices and key labels:
- frames.py    - window statistics over (bass, mid, high, time) frames
- beats.py     - beat energy profile, groove fingerprints
- camelot.py   - Camelot wheel arithmetic, chroma -> key

No logging, no domain models, numpy only.
"""

from .frames import (
    BASS,
    MID,
    HIGH,
    TIME,
    N_BANDS,
    as_frame_matrix,
    frame_energy,
    mean_energy,
    window_bounds,
    window_average_spectrum,
    window_average_energy,
    spectrum_distance,
)
from .beats import (
    BeatEnergySample,
    BeatEnergyProfile,
    beat_length,
    compute_beat_energy_profile,
    build_groove_fingerprint,
    sequence_distance,
)
from .camelot import (
    CAMELOT_MINOR,
    CAMELOT_MAJOR,
    normalize_key,
    parse_camelot,
    is_harmonic_neighbor,
    camelot_from_chroma,
    tempo_similarity,
)

__all__ = [
    # Frames
    'BASS', 'MID', 'HIGH', 'TIME', 'N_BANDS',
    'as_frame_matrix',
    'frame_energy',
    'mean_energy',
    'window_bounds',
    'window_average_spectrum',
    'window_average_energy',
    'spectrum_distance',
    # Beats
    'BeatEnergySample',
    'BeatEnergyProfile',
    'beat_length',
    'compute_beat_energy_profile',
    'build_groove_fingerprint',
    'sequence_distance',
    # Camelot
    'CAMELOT_MINOR',
    'CAMELOT_MAJOR',
    'normalize_key',
    'parse_camelot',
    'is_harmonic_neighbor',
    'camelot_from_chroma',
    'tempo_similarity',
]

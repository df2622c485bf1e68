"""
Domain models shared by analysis, selection and transition planning.

Tracks are immutable once analyzed: mix points are set by the analysis
pipeline and never change afterwards, so a Track can be read from many
threads at once.
"""

import math
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from autodj.common.primitives.beats import BeatEnergySample
from autodj.common.primitives.camelot import normalize_key
from autodj.common.primitives.frames import as_frame_matrix
from autodj.core.errors import ValidationError

DEFAULT_FRAME_INTERVAL_SEC = 0.1


# ============== Spectral Frames ==============

@dataclass(frozen=True)
class SpectralFrame:
    """
    Three-band energy snapshot at one point in time.

    Produced by the external analyzer at a fixed interval (0.1s by default).
    """
    bass: float
    mid: float
    high: float
    time_sec: float

    def __post_init__(self):
        values = (self.bass, self.mid, self.high, self.time_sec)
        if not all(math.isfinite(v) for v in values):
            raise ValidationError(
                "Spectral frame values must be finite",
                data={"frame": list(values)},
            )
        if min(values) < 0:
            raise ValidationError(
                "Spectral frame values must be non-negative",
                data={"frame": list(values)},
            )

    @property
    def energy(self) -> float:
        """Summed band energy."""
        return self.bass + self.mid + self.high

    @classmethod
    def from_row(cls, row: Sequence[float]) -> 'SpectralFrame':
        """Build from a [bass, mid, high, time] row."""
        if len(row) < 4:
            raise ValidationError(
                "Spectral frame row needs bass, mid, high and time",
                data={"row_length": len(row)},
            )
        return cls(float(row[0]), float(row[1]), float(row[2]), float(row[-1]))

    def as_row(self) -> Tuple[float, float, float, float]:
        return (self.bass, self.mid, self.high, self.time_sec)


def frames_from_rows(rows: Sequence[Sequence[float]]) -> Tuple[SpectralFrame, ...]:
    """Convert raw analyzer rows into validated frames."""
    return tuple(SpectralFrame.from_row(row) for row in rows)


# ============== Track ==============

@dataclass(frozen=True, eq=False)
class Track:
    """
    Analyzed track record.

    Identity semantics: two Track objects are equal only if they are the
    same object, so pools may hold tracks with identical metadata.
    """
    title: str
    path: str = ""
    bpm: float = 0.0                   # 0 = unknown
    duration_sec: float = 0.0
    key: Optional[str] = None          # Camelot, e.g. '8A'
    energy: float = 0.0                # Mean summed band energy, [0, 1]
    frames: Tuple[SpectralFrame, ...] = ()
    mix_in_point: float = 0.0
    mix_out_point: float = 0.0
    frame_interval_sec: float = DEFAULT_FRAME_INTERVAL_SEC

    def __post_init__(self):
        if not math.isfinite(self.bpm) or self.bpm < 0:
            raise ValidationError(
                "Track tempo must be a finite non-negative number",
                data={"title": self.title, "bpm": self.bpm},
            )
        if not math.isfinite(self.duration_sec) or self.duration_sec < 0:
            raise ValidationError(
                "Track duration must be a finite non-negative number",
                data={"title": self.title, "duration_sec": self.duration_sec},
            )
        if self.frame_interval_sec <= 0:
            raise ValidationError(
                "Frame interval must be positive",
                data={"title": self.title, "frame_interval_sec": self.frame_interval_sec},
            )
        if self.key is not None and not isinstance(self.key, str):
            raise ValidationError(
                "Track key must be a Camelot label string",
                data={"title": self.title, "key_type": type(self.key).__name__},
            )
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(self, "frames", self._coerce_frames(self.frames))

    def _coerce_frames(self, frames) -> Tuple[SpectralFrame, ...]:
        """Accept SpectralFrame objects or raw [bass, mid, high, time] rows."""
        coerced = []
        for index, item in enumerate(frames):
            if isinstance(item, SpectralFrame):
                coerced.append(item)
                continue
            try:
                coerced.append(SpectralFrame.from_row(item))
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    "Track frame is neither a SpectralFrame nor a numeric row",
                    data={"title": self.title, "index": index, "item_type": type(item).__name__},
                    cause=e,
                ) from e
        return tuple(coerced)

    @cached_property
    def frame_matrix(self) -> np.ndarray:
        """Frames as an (n_frames, 4) [bass, mid, high, time] matrix."""
        return as_frame_matrix([f.as_row() for f in self.frames])

    @property
    def has_frames(self) -> bool:
        return len(self.frames) > 0

    @property
    def has_key(self) -> bool:
        return self.key is not None

    def with_mix_points(self, mix_in_point: float, mix_out_point: float) -> 'Track':
        """Copy of this track with analysis mix points set."""
        return replace(self, mix_in_point=float(mix_in_point), mix_out_point=float(mix_out_point))

    def to_dict(self) -> Dict[str, Any]:
        """Summary without frame data (for logs and diagnostics)."""
        return {
            'title': self.title,
            'path': self.path,
            'bpm': float(self.bpm),
            'duration_sec': float(self.duration_sec),
            'key': self.key,
            'energy': float(self.energy),
            'n_frames': len(self.frames),
            'mix_in_point': float(self.mix_in_point),
            'mix_out_point': float(self.mix_out_point),
        }


# ============== Decision Contexts ==============

@dataclass
class SelectionContext:
    """Desired energy for the next pick (clamped to [0, 1] when used)."""
    target_energy: Optional[float] = None


@dataclass
class TransitionContext:
    """Inputs for planning one transition."""
    current_track: Optional[Track]
    next_track: Optional[Track]
    current_energy: float = 0.0
    target_energy: float = 0.0
    intensity: float = 0.0
    preferred_duration_sec: float = 0.0    # <= 0 means no preference

    @property
    def desired_energy_delta(self) -> float:
        return self.target_energy - self.current_energy


# ============== Transition Plan ==============

@dataclass
class TransitionWaypoint:
    """Mixer state at one moment of the transition."""
    time_sec: float
    volume_out: float
    volume_in: float
    cutoff_out_hz: float      # High-pass on the outgoing track
    cutoff_in_hz: float       # Low-pass on the incoming track
    tempo_percent_in: float   # 100 = unchanged

    def to_dict(self) -> Dict[str, float]:
        return {
            'time_sec': float(self.time_sec),
            'volume_out': float(self.volume_out),
            'volume_in': float(self.volume_in),
            'cutoff_out_hz': float(self.cutoff_out_hz),
            'cutoff_in_hz': float(self.cutoff_in_hz),
            'tempo_percent_in': float(self.tempo_percent_in),
        }


@dataclass
class TransitionPlan:
    """
    Declarative transition plan for the playback applier.

    start_offset_in is authoritative: the incoming stream must seek there.
    start_offset_out is informational; the outgoing track keeps playing.
    """
    duration_sec: float
    start_offset_out: float
    start_offset_in: float
    waypoints: List[TransitionWaypoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'duration_sec': float(self.duration_sec),
            'start_offset_out': float(self.start_offset_out),
            'start_offset_in': float(self.start_offset_in),
            'waypoints': [w.to_dict() for w in self.waypoints],
        }


@dataclass
class PlanDiagnostics:
    """Intermediate values of one planning call, for external logging."""
    base_fade_sec: float = 0.0
    preferred_sec: float = 0.0
    final_duration_sec: float = 0.0
    harmonic_merge: bool = False
    start_offset_out: float = 0.0
    start_offset_in: float = 0.0
    entry_position: float = 0.0
    window_sec: float = 0.0
    desired_energy_delta: float = 0.0
    pattern_beats: int = 0           # Fingerprint length used, 0 = skipped
    candidates_scanned: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base_fade_sec': float(self.base_fade_sec),
            'preferred_sec': float(self.preferred_sec),
            'final_duration_sec': float(self.final_duration_sec),
            'harmonic_merge': bool(self.harmonic_merge),
            'start_offset_out': float(self.start_offset_out),
            'start_offset_in': float(self.start_offset_in),
            'entry_position': float(self.entry_position),
            'window_sec': float(self.window_sec),
            'desired_energy_delta': float(self.desired_energy_delta),
            'pattern_beats': int(self.pattern_beats),
            'candidates_scanned': int(self.candidates_scanned),
        }


@dataclass
class PlanningResult:
    """Plan plus the diagnostics that produced it."""
    plan: TransitionPlan
    diagnostics: PlanDiagnostics


__all__ = [
    'DEFAULT_FRAME_INTERVAL_SEC',
    'SpectralFrame',
    'frames_from_rows',
    'BeatEnergySample',
    'Track',
    'SelectionContext',
    'TransitionContext',
    'TransitionWaypoint',
    'TransitionPlan',
    'PlanDiagnostics',
    'PlanningResult',
]

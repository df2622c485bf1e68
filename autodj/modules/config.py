"""
Module configuration.

Centralized tuning constants for mix-point detection, compatibility
scoring, track selection and transition planning. Defaults are the
calibrated values; components accept an instance to override them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MixPointConfig:
    """Configuration for mix-in / mix-out detection."""
    # Plateau window: 8 beats = 2 bars of 4/4
    window_beats: int = 8
    # Mix-in: skip the first seconds (count-in, silence)
    mix_in_min_time_sec: float = 2.0
    mix_in_threshold_ratio: float = 1.4      # x median of first half
    plateau_stability_ratio: float = 1.4     # window max < min * ratio
    # Mix-out: high plateau followed by a quiet tail
    mix_out_high_ratio: float = 1.1          # x median of second half
    mix_out_low_ratio: float = 0.6
    mix_out_end_margin_sec: float = 5.0      # mix-out <= duration - margin
    mix_out_fallback_sec: float = 10.0       # duration - fallback when nothing found


@dataclass(frozen=True)
class CompatibilityConfig:
    """Configuration for pairwise scoring and fade sizing."""
    tempo_tolerance_bpm: float = 15.0
    harmonic_weight: float = 0.6
    tempo_weight: float = 0.4
    score_same_key: float = 1.0
    score_neighbor_key: float = 0.8
    score_clashing_key: float = 0.1
    score_unknown_key: float = 0.5
    # Intro window
    intro_skip_frames: int = 10
    intro_scan_frames: int = 300
    intro_rise_ratio: float = 1.5
    intro_absolute_energy: float = 0.4
    intro_default_sec: float = 8.0
    # Intuitive fade
    fade_base_sec: float = 8.0
    fade_long_sec: float = 10.0
    fade_short_sec: float = 4.0
    fade_long_intro_sec: float = 12.0
    fade_short_intro_sec: float = 5.0
    fade_neighbor_factor: float = 1.4
    fade_clash_factor: float = 0.6
    fade_unknown_min_sec: float = 4.0
    fade_unknown_max_sec: float = 8.0


@dataclass(frozen=True)
class SelectionConfig:
    """Configuration for next-track scoring."""
    compatibility_weight: float = 0.5
    energy_weight: float = 0.3
    tempo_weight: float = 0.2
    tempo_tolerance_bpm: float = 30.0


@dataclass(frozen=True)
class PlannerConfig:
    """Configuration for the heuristic transition planner."""
    # Duration
    harmonic_merge_factor: float = 1.5
    early_entry_position: float = 0.3
    late_entry_position: float = 0.7
    early_entry_factor: float = 1.2
    late_entry_factor: float = 0.8
    merge_early_entry_factor: float = 1.1
    merge_late_entry_factor: float = 0.9
    outgoing_lead_ratio: float = 0.8        # start_out = mix_out - duration * ratio
    # Entry search
    min_window_sec: float = 2.0
    window_duration_ratio: float = 0.8
    entry_min_offset_sec: float = 5.0       # after next.mix_in
    entry_end_margin_sec: float = 2.0       # before next.duration - window
    fingerprint_beats: tuple = (16, 8, 4)
    min_fingerprint_beats: int = 2
    fallback_step_sec: float = 0.25         # grid step when tempo is unknown
    pattern_weight: float = 0.5
    continuity_weight: float = 0.3
    energy_weight: float = 0.15
    tail_weight: float = 0.05
    tail_start_ratio: float = 0.6
    # Curve
    waypoints_per_sec: float = 10.0
    min_steps: int = 4
    rising_curve_power: float = 0.8
    falling_curve_power: float = 1.2
    merge_intro_end: float = 0.3
    merge_outro_start: float = 0.7
    merge_fade_in_power: float = 0.8
    merge_overlap_dip: float = 0.2
    cutoff_out_start_hz: float = 200.0
    cutoff_out_sweep_hz: float = 4000.0
    cutoff_in_start_hz: float = 8000.0
    cutoff_in_sweep_hz: float = 6000.0


DEFAULT_MIX_POINTS = MixPointConfig()
DEFAULT_COMPATIBILITY = CompatibilityConfig()
DEFAULT_SELECTION = SelectionConfig()
DEFAULT_PLANNER = PlannerConfig()

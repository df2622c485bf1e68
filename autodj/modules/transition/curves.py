"""
Transition Curves - Volume / filter / tempo automation over time.

Two volume shapes:
- crossfade: (1-p)^k out, p^k in; k = 0.8 when energy rises, 1.2 when it falls
- harmonic merge: incoming fades up while the outgoing holds (p < 0.3),
  both stay loud (0.3..0.7), then the outgoing fades out

Filters sweep linearly: high-pass on the outgoing 200 -> 4200 Hz,
low-pass on the incoming 8000 -> 2000 Hz. The incoming tempo glides
towards the outgoing tempo.
"""

from typing import List, Tuple

from autodj.core.models import TransitionWaypoint
from autodj.modules.config import PlannerConfig, DEFAULT_PLANNER


def step_count(duration_sec: float, config: PlannerConfig = DEFAULT_PLANNER) -> int:
    """Number of equal steps (about 10 per second, at least 4)."""
    return max(config.min_steps, int(round(duration_sec * config.waypoints_per_sec)))


def crossfade_volumes(progress: float, power: float) -> Tuple[float, float]:
    return (1.0 - progress) ** power, progress ** power


def merge_volumes(progress: float, config: PlannerConfig = DEFAULT_PLANNER) -> Tuple[float, float]:
    """Three-phase overlap for harmonically related tracks."""
    intro_end = config.merge_intro_end
    outro_start = config.merge_outro_start
    dip = config.merge_overlap_dip

    if progress < intro_end:
        return 1.0, (progress / intro_end) ** config.merge_fade_in_power
    if progress < outro_start:
        mid = (progress - intro_end) / (outro_start - intro_end)
        return 1.0 - dip * mid, (1.0 - dip) + dip * mid
    end = (progress - outro_start) / (1.0 - outro_start)
    return (1.0 - dip) * (1.0 - end), 1.0


def synthesize_waypoints(
    duration_sec: float,
    energy_delta: float,
    harmonic_merge: bool,
    bpm_out: float,
    bpm_in: float,
    config: PlannerConfig = DEFAULT_PLANNER,
) -> List[TransitionWaypoint]:
    """
    Build the waypoint curve for a transition.

    Args:
        duration_sec: Transition length (> 0)
        energy_delta: target_energy - current_energy
        harmonic_merge: Use the three-phase merge shape
        bpm_out: Outgoing tempo (0 = unknown)
        bpm_in: Incoming tempo (0 = unknown)
        config: Curve parameters

    Returns:
        steps + 1 waypoints from t=0 to t=duration_sec
    """
    steps = step_count(duration_sec, config)
    power = config.rising_curve_power if energy_delta >= 0 else config.falling_curve_power
    bpm_ratio = bpm_out / bpm_in if bpm_out > 0 and bpm_in > 0 else 1.0

    waypoints = []
    for i in range(steps + 1):
        t = duration_sec if i == steps else i * (duration_sec / steps)
        progress = t / duration_sec if duration_sec > 0 else 0.0

        if harmonic_merge:
            vol_out, vol_in = merge_volumes(progress, config)
        else:
            vol_out, vol_in = crossfade_volumes(progress, power)

        waypoints.append(TransitionWaypoint(
            time_sec=t,
            volume_out=vol_out,
            volume_in=vol_in,
            cutoff_out_hz=config.cutoff_out_start_hz + progress * config.cutoff_out_sweep_hz,
            cutoff_in_hz=config.cutoff_in_start_hz - progress * config.cutoff_in_sweep_hz,
            tempo_percent_in=100.0 + progress * (bpm_ratio * 100.0 - 100.0),
        ))

    return waypoints

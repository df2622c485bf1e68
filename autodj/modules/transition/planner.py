"""
Heuristic Transition Planner - Plan one transition between two tracks.

Steps:
1. Duration from the intuitive fade and the preferred duration hint
   (x1.5 in harmonic merge mode)
2. Entry offset into the incoming track (entry_search)
3. Duration refinement by where in the incoming track we enter
4. Waypoint curve (curves)

The planner holds no state between calls; the diagnostics of each call
are returned next to the plan.
"""

from typing import Optional

from autodj.common.logging import get_logger, format_duration, format_time
from autodj.common.primitives.camelot import is_harmonic_neighbor
from autodj.core.models import (
    PlanDiagnostics,
    PlanningResult,
    TransitionContext,
    TransitionPlan,
)
from autodj.modules.config import (
    CompatibilityConfig,
    PlannerConfig,
    DEFAULT_COMPATIBILITY,
    DEFAULT_PLANNER,
)
from autodj.modules.selection.compatibility import calculate_intuitive_fade
from .curves import synthesize_waypoints
from .entry_search import find_best_entry_offset

logger = get_logger(__name__)


class HeuristicTransitionPlanner:
    """
    Rule-based transition planner.

    Usage:
        planner = HeuristicTransitionPlanner()
        result = planner.plan(TransitionContext(current, nxt, 0.5, 0.7))
        if result:
            apply(result.plan)
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        compatibility_config: Optional[CompatibilityConfig] = None,
    ):
        self.config = config or DEFAULT_PLANNER
        self.compatibility_config = compatibility_config or DEFAULT_COMPATIBILITY

    @property
    def name(self) -> str:
        return "HeuristicTransitionPlanner"

    def _entry_factor(self, entry_position: float, harmonic_merge: bool) -> float:
        cfg = self.config
        if entry_position < cfg.early_entry_position:
            return cfg.merge_early_entry_factor if harmonic_merge else cfg.early_entry_factor
        if entry_position > cfg.late_entry_position:
            return cfg.merge_late_entry_factor if harmonic_merge else cfg.late_entry_factor
        return 1.0

    def plan(self, context: TransitionContext) -> Optional[PlanningResult]:
        """
        Plan a transition.

        Returns:
            PlanningResult, or None when either track is missing
        """
        current = context.current_track
        nxt = context.next_track
        if current is None or nxt is None:
            return None

        cfg = self.config

        base_fade = calculate_intuitive_fade(current, nxt, self.compatibility_config) / 1000.0
        desired = context.preferred_duration_sec if context.preferred_duration_sec > 0 else base_fade
        duration = 0.5 * base_fade + 0.5 * desired

        harmonic_merge = current.has_key and nxt.has_key and is_harmonic_neighbor(current.key, nxt.key)
        if harmonic_merge:
            duration *= cfg.harmonic_merge_factor

        start_out = max(0.0, current.mix_out_point - duration * cfg.outgoing_lead_ratio)

        energy_delta = context.desired_energy_delta
        window_sec = max(cfg.min_window_sec, duration * cfg.window_duration_ratio)
        entry = find_best_entry_offset(current, nxt, window_sec, energy_delta, cfg)
        start_in = entry.offset_sec

        entry_position = 0.0
        if nxt.duration_sec > 0:
            entry_position = start_in / nxt.duration_sec
            duration *= self._entry_factor(entry_position, harmonic_merge)

        waypoints = synthesize_waypoints(
            duration, energy_delta, harmonic_merge, current.bpm, nxt.bpm, cfg,
        )

        plan = TransitionPlan(
            duration_sec=duration,
            start_offset_out=start_out,
            start_offset_in=start_in,
            waypoints=waypoints,
        )
        diagnostics = PlanDiagnostics(
            base_fade_sec=base_fade,
            preferred_sec=desired,
            final_duration_sec=duration,
            harmonic_merge=harmonic_merge,
            start_offset_out=start_out,
            start_offset_in=start_in,
            entry_position=entry_position,
            window_sec=window_sec,
            desired_energy_delta=energy_delta,
            pattern_beats=entry.pattern_beats,
            candidates_scanned=entry.candidates_scanned,
        )

        logger.debug(
            f"Planned '{current.title}' -> '{nxt.title}': {format_duration(duration)}, "
            f"enter at {format_time(start_in)}",
            data=diagnostics.to_dict(),
        )
        return PlanningResult(plan=plan, diagnostics=diagnostics)

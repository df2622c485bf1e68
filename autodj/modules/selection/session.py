"""
DJ Session - Pool management around the selector and a planner.

Owns the candidate pool and the current/next tracks. Playback itself is
external: the caller reports the playback position, asks whether it is
time to transition, applies the returned plan and then advances.

Usage:
    session = DJSession(tracks)
    session.initialize_first_track()
    session.select_next_track()
    ...
    if session.should_transition(position):
        result = session.prepare_transition()
        player.apply(result.plan)
        session.advance_after_transition()
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from autodj.common.logging import (
    get_logger,
    format_bpm,
    format_key,
    generate_correlation_id,
    set_correlation_id,
    set_session_id,
)
from autodj.common.primitives.camelot import is_harmonic_neighbor
from autodj.core.config import Settings, get_settings
from autodj.core.errors import AutoDJError, PlanningError, SelectionError
from autodj.core.interfaces import TransitionPlannerProtocol
from autodj.core.models import (
    PlanningResult,
    SelectionContext,
    Track,
    TransitionContext,
)
from .compatibility import (
    calculate_compatibility,
    calculate_intro_window,
    calculate_intuitive_fade,
)
from .selector import TrackSelector

logger = get_logger(__name__)


@dataclass
class SessionProgress:
    """Counters for the running session."""
    tracks_played: int = 0
    transitions_planned: int = 0
    remaining: int = 0


class DJSession:
    """
    Keeps the pool, current and next track for a continuous mix.

    The selector never mutates the pool; this class removes a track
    once it becomes current.
    """

    def __init__(
        self,
        pool: Iterable[Track],
        planner: Optional[TransitionPlannerProtocol] = None,
        selector: Optional[TrackSelector] = None,
        settings: Optional[Settings] = None,
        session_id: Optional[str] = None,
    ):
        if planner is None:
            # Import here to avoid circular imports
            from autodj.modules.transition.planner import HeuristicTransitionPlanner
            planner = HeuristicTransitionPlanner()

        self.pool: List[Track] = list(pool)
        self.planner = planner
        self.selector = selector or TrackSelector()
        self.settings = settings or get_settings()
        self.session_id = session_id or generate_correlation_id()

        self.current_track: Optional[Track] = None
        self.next_track: Optional[Track] = None
        self._transition_triggered = False
        self._progress = SessionProgress(remaining=len(self.pool))

        set_session_id(self.session_id)

    @property
    def progress(self) -> SessionProgress:
        self._progress.remaining = len(self.pool)
        return self._progress

    def _remove_from_pool(self, track: Track) -> None:
        # Identity match: pools may hold tracks with equal metadata
        self.pool = [t for t in self.pool if t is not track]

    def initialize_first_track(self) -> bool:
        """
        Start with the slowest track in the pool.

        Returns:
            False when the pool is empty
        """
        if not self.pool:
            logger.warning("Cannot start session: pool is empty")
            return False

        first = min(self.pool, key=lambda t: t.bpm)
        self._remove_from_pool(first)
        self.current_track = first
        self.next_track = None
        self._transition_triggered = False
        self._progress.tracks_played = 1

        logger.info(
            f"Session started with '{first.title}' ({format_bpm(first.bpm)})",
            data={"session_id": self.session_id, "first": first.to_dict(), "pool_size": len(self.pool)},
        )
        return True

    def select_next_track(self) -> Optional[Track]:
        """Choose the next track, aiming at the current track's energy."""
        if self.current_track is None:
            self.next_track = None
            return None

        context = SelectionContext(target_energy=self.current_track.energy)
        try:
            self.next_track = self.selector.choose_next(self.pool, self.current_track, context)
        except AutoDJError:
            raise
        except Exception as e:
            raise SelectionError(
                f"Selection after '{self.current_track.title}' failed",
                data={"current": self.current_track.title, "pool_size": len(self.pool)},
                cause=e,
            ) from e
        return self.next_track

    def prepare_transition(self) -> Optional[PlanningResult]:
        """
        Plan the transition from the current to the next track.

        Returns:
            PlanningResult, or None without both tracks
        """
        if self.current_track is None or self.next_track is None:
            return None

        set_correlation_id(generate_correlation_id())
        context = TransitionContext(
            current_track=self.current_track,
            next_track=self.next_track,
            current_energy=self.current_track.energy,
            target_energy=self.next_track.energy,
            intensity=self.settings.transition_intensity,
            preferred_duration_sec=self.settings.preferred_transition_sec,
        )
        try:
            result = self.planner.plan(context)
        except AutoDJError:
            raise
        except Exception as e:
            raise PlanningError(
                f"Planner {self.planner.name} failed",
                data={"current": self.current_track.title, "next": self.next_track.title},
                cause=e,
            ) from e
        self._transition_triggered = True
        if result is not None:
            self._progress.transitions_planned += 1
        self.log_transition_summary(result)
        return result

    def advance_after_transition(self) -> Optional[Track]:
        """Make the next track current and drop it from the pool."""
        if self.next_track is None:
            return None

        self._remove_from_pool(self.next_track)
        self.current_track = self.next_track
        self.next_track = None
        self._transition_triggered = False
        self._progress.tracks_played += 1
        set_correlation_id(None)
        return self.current_track

    def pre_mix_out_position(self, seconds_before: float) -> float:
        """Seek target a few seconds before the current track's mix-out."""
        if self.current_track is None:
            return 0.0
        return max(0.0, self.current_track.mix_out_point - seconds_before)

    def should_transition(self, position_sec: float) -> bool:
        """True once playback passes mix-out and a next track is ready."""
        if self.current_track is None or self.next_track is None:
            return False
        if self._transition_triggered:
            return False
        return position_sec >= self.current_track.mix_out_point

    def log_transition_summary(self, result: Optional[PlanningResult]) -> str:
        """Log one line describing the transition and return it."""
        current = self.current_track
        nxt = self.next_track
        if current is None or nxt is None:
            return ""

        cfg = self.selector.compatibility_config
        compatibility = calculate_compatibility(current, nxt, cfg)
        neighbor = is_harmonic_neighbor(current.key, nxt.key)
        intro = calculate_intro_window(nxt, cfg)
        fade_ms = calculate_intuitive_fade(current, nxt, cfg)

        line = (
            f"CURRENT='{current.title}' ({format_bpm(current.bpm)}, {format_key(current.key)}, "
            f"mix {current.mix_in_point:.2f}-{current.mix_out_point:.2f}s) | "
            f"NEXT='{nxt.title}' ({format_bpm(nxt.bpm)}, {format_key(nxt.key)}, "
            f"mix {nxt.mix_in_point:.2f}-{nxt.mix_out_point:.2f}s) | "
            f"compat={compatibility:.3f} neighbor={neighbor} "
            f"intro_next={intro:.2f}s fade={fade_ms / 1000.0:.2f}s"
        )

        data = {
            "current": current.to_dict(),
            "next": nxt.to_dict(),
            "compatibility": round(compatibility, 4),
            "harmonic_neighbor": neighbor,
            "intro_window_sec": round(intro, 3),
            "intuitive_fade_ms": fade_ms,
        }

        if result is not None:
            d = result.diagnostics
            line += (
                f" | pattern_beats={d.pattern_beats} | planner[base={d.base_fade_sec:.2f}s "
                f"preferred={d.preferred_sec:.2f}s final={d.final_duration_sec:.2f}s "
                f"merge={d.harmonic_merge} start_out={d.start_offset_out:.2f}s "
                f"start_in={d.start_offset_in:.2f}s entry_pos={d.entry_position:.2f} "
                f"window={d.window_sec:.2f}s dE={d.desired_energy_delta:.3f}]"
            )
            data["planner"] = d.to_dict()

        logger.info(line, data=data)
        return line

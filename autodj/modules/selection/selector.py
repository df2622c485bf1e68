"""
Track Selector - Pick the best next track from a candidate pool.

Score = compatibility * 0.5 + energy * 0.3 + tempo * 0.2

The selector never touches the pool; removing the chosen track is the
caller's job (see DJSession).
"""

from typing import Iterable, Optional

from autodj.common.logging import get_logger
from autodj.common.primitives.camelot import tempo_similarity
from autodj.core.models import SelectionContext, Track
from autodj.modules.config import (
    CompatibilityConfig,
    SelectionConfig,
    DEFAULT_COMPATIBILITY,
    DEFAULT_SELECTION,
)
from .compatibility import calculate_compatibility

logger = get_logger(__name__)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class TrackSelector:
    """
    Scores candidates against the current track.

    Usage:
        selector = TrackSelector()
        nxt = selector.choose_next(pool, current, SelectionContext(target_energy=0.6))
    """

    def __init__(
        self,
        config: Optional[SelectionConfig] = None,
        compatibility_config: Optional[CompatibilityConfig] = None,
    ):
        self.config = config or DEFAULT_SELECTION
        self.compatibility_config = compatibility_config or DEFAULT_COMPATIBILITY

    def score(
        self,
        current: Optional[Track],
        candidate: Optional[Track],
        context: Optional[SelectionContext] = None,
    ) -> float:
        """
        Score one candidate.

        Returns:
            Weighted score, or -inf when either track is missing
        """
        if current is None or candidate is None:
            return float('-inf')

        target = current.energy
        if context is not None and context.target_energy is not None:
            target = context.target_energy

        compatibility = calculate_compatibility(current, candidate, self.compatibility_config)
        energy_score = 1.0 - abs(_clamp01(candidate.energy) - _clamp01(target))
        tempo_score = tempo_similarity(current.bpm, candidate.bpm, self.config.tempo_tolerance_bpm)

        return (
            compatibility * self.config.compatibility_weight
            + energy_score * self.config.energy_weight
            + tempo_score * self.config.tempo_weight
        )

    def choose_next(
        self,
        pool: Iterable[Track],
        current: Optional[Track],
        context: Optional[SelectionContext] = None,
    ) -> Optional[Track]:
        """
        Return the highest scoring pool member.

        Ties keep the earliest candidate in pool order.

        Returns:
            Chosen track, or None for an empty pool or missing current track
        """
        if current is None:
            return None

        best: Optional[Track] = None
        best_score = float('-inf')
        n_candidates = 0
        for candidate in pool:
            n_candidates += 1
            s = self.score(current, candidate, context)
            if best is None or s > best_score:
                best = candidate
                best_score = s

        if best is not None:
            logger.debug(
                f"Selected '{best.title}' from {n_candidates} candidates",
                data={"current": current.title, "next": best.title,
                      "score": round(best_score, 4), "n_candidates": n_candidates},
            )
        return best


_default_selector = TrackSelector()


def score(
    current: Optional[Track],
    candidate: Optional[Track],
    context: Optional[SelectionContext] = None,
) -> float:
    """Score with default weights."""
    return _default_selector.score(current, candidate, context)


def choose_next(
    pool: Iterable[Track],
    current: Optional[Track],
    context: Optional[SelectionContext] = None,
) -> Optional[Track]:
    """Choose with default weights."""
    return _default_selector.choose_next(pool, current, context)

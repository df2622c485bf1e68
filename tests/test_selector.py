"""Unit tests for the track selector.

Tests cover:
    - score() weighting and missing-track handling
    - choose_next() argmax, tie-break by pool order, no pool mutation
"""

import pytest

from autodj.core.models import SelectionContext, Track
from autodj.modules.config import SelectionConfig
from autodj.modules.selection import TrackSelector, choose_next, score


@pytest.fixture
def current():
    return Track("Current", bpm=124.0, key="8A", energy=0.5)


@pytest.fixture
def pool():
    return [
        Track("Clash far", bpm=140.0, key="3B", energy=0.9),
        Track("Neighbor", bpm=125.0, key="9A", energy=0.55),
        Track("Same key slow", bpm=110.0, key="8A", energy=0.2),
        Track("Unknown key", bpm=124.0, energy=0.5),
    ]


@pytest.mark.unit
class TestScore:
    """Tests for TrackSelector.score()."""

    def test_missing_tracks(self, current):
        assert score(None, current) == float('-inf')
        assert score(current, None) == float('-inf')

    def test_weighted_sum(self, current):
        """ЧТО ПРОВЕРЯЕМ: compat*0.5 + energy*0.3 + tempo*0.2"""
        candidate = Track("C", bpm=130.0, key="9A", energy=0.8)

        compat = 0.8 * 0.6 + (1 - 6 / 15) * 0.4
        energy = 1 - abs(0.8 - 0.5)
        tempo = 1 - 6 / 30
        assert score(current, candidate) == pytest.approx(compat * 0.5 + energy * 0.3 + tempo * 0.2)

    def test_context_target_energy(self, current):
        candidate = Track("C", bpm=124.0, key="8A", energy=0.9)

        assert score(current, candidate, SelectionContext(target_energy=0.9)) == pytest.approx(1.0)
        assert score(current, candidate, SelectionContext()) == pytest.approx(1.0 - 0.3 * 0.4)

    def test_target_energy_clamped(self, current):
        candidate = Track("C", bpm=124.0, key="8A", energy=1.0)
        assert score(current, candidate, SelectionContext(target_energy=5.0)) == pytest.approx(1.0)

    def test_custom_weights(self, current):
        selector = TrackSelector(SelectionConfig(compatibility_weight=0.0, energy_weight=1.0, tempo_weight=0.0))
        candidate = Track("C", bpm=60.0, key="1B", energy=0.25)
        assert selector.score(current, candidate) == pytest.approx(0.75)


@pytest.mark.unit
class TestChooseNext:
    """Tests for TrackSelector.choose_next()."""

    def test_empty_pool(self, current):
        assert choose_next([], current) is None

    def test_missing_current(self, pool):
        assert choose_next(pool, None) is None

    def test_returns_argmax(self, current, pool):
        chosen = choose_next(pool, current)

        best = max(pool, key=lambda t: score(current, t))
        assert chosen is best
        assert chosen.title == "Neighbor"

    def test_pool_not_mutated(self, current, pool):
        before = list(pool)
        choose_next(pool, current)
        assert pool == before

    def test_exclusion_never_returns_chosen(self, current, pool):
        """Removing the pick from a copy never yields it again."""
        remaining = list(pool)
        picked = []
        while remaining:
            chosen = choose_next(remaining, current)
            assert chosen not in picked
            picked.append(chosen)
            remaining = [t for t in remaining if t is not chosen]

        assert len(picked) == len(pool)

    def test_tie_keeps_pool_order(self, current):
        first = Track("Twin", bpm=124.0, key="8A", energy=0.5)
        second = Track("Twin", bpm=124.0, key="8A", energy=0.5)

        assert choose_next([first, second], current) is first
        assert choose_next([second, first], current) is second

    def test_accepts_iterables(self, current, pool):
        assert choose_next(iter(pool), current) is choose_next(pool, current)

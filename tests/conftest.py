"""
Pytest configuration for autodj tests.

Automatically adds project root to sys.path so that 'from autodj...' imports work.
Defines markers and shared fixtures.
"""
import sys
import numpy as np
import pytest
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Pytest Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "invariant: Architectural invariant tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Analysis -> selection -> planning flows")


# =============================================================================
# Synthetic Frame Builders
# =============================================================================

# Default band split: bass 1/2, mid 1/4, high 1/4 (exact in binary floating point)
DEFAULT_BANDS = (0.5, 0.25, 0.25)


def build_frames(
    segments: Sequence[Tuple[float, float]],
    duration_sec: float,
    bands: Tuple[float, float, float] = DEFAULT_BANDS,
) -> np.ndarray:
    """
    Build a (n, 4) frame matrix at 0.1s spacing.

    Args:
        segments: (end_time, energy) pairs; a frame takes the energy of the
            first segment whose end_time is greater than its timestamp
        duration_sec: Track length; frames cover [0, duration)
        bands: Energy split over (bass, mid, high)

    Timestamps are i / 10 so that beat boundaries land exactly on frames.
    """
    n = int(round(duration_sec * 10))
    times = np.arange(n) / 10.0
    energy = np.full(n, segments[-1][1], dtype=np.float64)
    assigned = np.zeros(n, dtype=bool)
    for end_time, value in segments:
        mask = (times < end_time) & ~assigned
        energy[mask] = value
        assigned |= mask

    rows = np.empty((n, 4), dtype=np.float64)
    rows[:, 0] = energy * bands[0]
    rows[:, 1] = energy * bands[1]
    rows[:, 2] = energy * bands[2]
    rows[:, 3] = times
    return rows


# Intro 0.2 -> groove 0.8 -> break 0.6 -> peak 0.9 -> outro 0.1 (120s at 120 BPM)
CLUB_SEGMENTS = [(30.0, 0.2), (60.0, 0.8), (90.0, 0.6), (100.0, 0.9), (120.0, 0.1)]


@pytest.fixture
def project_root() -> Path:
    """Return project root path."""
    return PROJECT_ROOT


@pytest.fixture
def frame_builder() -> Callable[..., np.ndarray]:
    """Factory for synthetic frame matrices."""
    return build_frames


@pytest.fixture
def club_frames() -> np.ndarray:
    """Typical club track energy shape, 120s."""
    return build_frames(CLUB_SEGMENTS, 120.0)


@pytest.fixture
def club_track(club_frames):
    """Analyzed club track: 120 BPM, key 8A."""
    from autodj.modules.analysis.pipelines import analyze_track
    return analyze_track("Club", "/music/club.wav", bpm=120.0, duration_sec=120.0,
                         key="8A", frames=club_frames)


@pytest.fixture
def track_factory() -> Callable[..., "Track"]:
    """Factory for analyzed tracks from segment descriptions."""
    from autodj.modules.analysis.pipelines import analyze_track

    def make(
        title: str = "Track",
        bpm: float = 120.0,
        key: Optional[str] = "8A",
        segments: Optional[List[Tuple[float, float]]] = None,
        duration_sec: float = 120.0,
        bands: Tuple[float, float, float] = DEFAULT_BANDS,
    ):
        frames = build_frames(segments or CLUB_SEGMENTS, duration_sec, bands)
        return analyze_track(title, f"/music/{title}.wav", bpm=bpm,
                             duration_sec=duration_sec, key=key, frames=frames)

    return make


@pytest.fixture(autouse=True)
def clean_logging_context():
    """Reset correlation context and cached settings around each test."""
    from autodj.common.logging import clear_context
    from autodj.core.config import reset_settings

    clear_context()
    reset_settings()
    yield
    clear_context()
    reset_settings()

"""
Selection - Compatibility scoring, next-track choice and the DJ session.
"""

from .compatibility import (
    harmonic_score,
    calculate_compatibility,
    calculate_intro_window,
    calculate_intuitive_fade,
)
from .selector import TrackSelector, score, choose_next
from .session import DJSession, SessionProgress

__all__ = [
    'harmonic_score',
    'calculate_compatibility',
    'calculate_intro_window',
    'calculate_intuitive_fade',
    'TrackSelector',
    'score',
    'choose_next',
    'DJSession',
    'SessionProgress',
]

"""
Camelot Primitives - Harmonic-mixing key arithmetic.

Camelot notation: '<1-12><A|B>' where A = minor, B = major.
Wheel-adjacent keys mix without clashing:
- same key
- same number, other letter (relative major/minor)
- same letter, number +/-1 (12 wraps to 1)

All functions are stateless and never raise on malformed keys.
"""

import numpy as np
from typing import Optional, Sequence, Tuple

CAMELOT_LETTERS = ('A', 'B')
CAMELOT_NUMBERS = range(1, 13)

# Chroma root (0 = C, 1 = C#, ...) -> Camelot key
CAMELOT_MINOR = ('5A', '12A', '7A', '2A', '9A', '4A', '11A', '6A', '1A', '8A', '3A', '10A')
CAMELOT_MAJOR = ('8B', '3B', '10B', '5B', '12B', '7B', '2B', '9B', '4B', '11B', '6B', '1B')


def normalize_key(key: Optional[str]) -> Optional[str]:
    """Strip and upper-case a key label; None for missing or blank."""
    if not isinstance(key, str):
        return None
    cleaned = key.strip().upper()
    return cleaned or None


def parse_camelot(key: Optional[str]) -> Optional[Tuple[int, str]]:
    """
    Split a Camelot key into (number, letter).

    Args:
        key: Camelot key, e.g. '8A', '11B'

    Returns:
        (number, letter) or None when the key is missing or malformed
    """
    cleaned = normalize_key(key)
    if cleaned is None or len(cleaned) < 2:
        return None

    letter = cleaned[-1]
    try:
        number = int(cleaned[:-1])
    except ValueError:
        return None

    if letter not in CAMELOT_LETTERS or number not in CAMELOT_NUMBERS:
        return None
    return number, letter


def is_harmonic_neighbor(key_a: Optional[str], key_b: Optional[str]) -> bool:
    """
    Check Camelot wheel adjacency.

    Reflexive and symmetric. Missing or malformed keys are never
    neighbors of anything except an identical label.

    Args:
        key_a: First Camelot key
        key_b: Second Camelot key

    Returns:
        True if the keys can be mixed harmonically
    """
    a = normalize_key(key_a)
    b = normalize_key(key_b)
    if a is None or b is None:
        return False
    if a == b:
        return True

    parsed_a = parse_camelot(a)
    parsed_b = parse_camelot(b)
    if parsed_a is None or parsed_b is None:
        return False

    num_a, letter_a = parsed_a
    num_b, letter_b = parsed_b

    # Relative major/minor
    if num_a == num_b and letter_a != letter_b:
        return True

    if letter_a == letter_b:
        if abs(num_a - num_b) == 1:
            return True
        if {num_a, num_b} == {1, 12}:
            return True

    return False


def camelot_from_chroma(chroma: Sequence[float]) -> Optional[str]:
    """
    Map a 12-bin chroma vector to a Camelot key.

    The strongest pitch class is the root; the mode is minor when the
    minor third outweighs the major third.

    Args:
        chroma: 12 accumulated pitch-class magnitudes, index 0 = C

    Returns:
        Camelot key, or None for a silent / malformed chroma
    """
    values = np.asarray(chroma, dtype=np.float64).ravel()
    if values.shape[0] != 12 or not np.all(np.isfinite(values)) or values.max() <= 0:
        return None

    root = int(np.argmax(values))
    minor_third = values[(root + 3) % 12]
    major_third = values[(root + 4) % 12]

    if minor_third > major_third:
        return CAMELOT_MINOR[root]
    return CAMELOT_MAJOR[root]


def tempo_similarity(bpm_a: float, bpm_b: float, tolerance_bpm: float) -> float:
    """
    Linear tempo similarity: 1 at equal tempo, 0 at tolerance_bpm apart.

    Returns:
        Score in [0, 1]
    """
    if tolerance_bpm <= 0:
        return 1.0 if bpm_a == bpm_b else 0.0
    return max(0.0, 1.0 - abs(bpm_a - bpm_b) / tolerance_bpm)

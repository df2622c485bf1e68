"""Time and value formatting utilities for log summaries."""

from typing import Optional


def format_time(seconds: float, include_hours: bool = True) -> str:
    """Format seconds as MM:SS or HH:MM:SS.

    Args:
        seconds: Time in seconds (can be float)
        include_hours: If True, include hours when > 0

    Returns:
        Formatted time string

    Examples:
        >>> format_time(65.5)
        '01:05'
        >>> format_time(3665.5)
        '01:01:05'
        >>> format_time(3665.5, include_hours=False)
        '61:05'
    """
    if seconds < 0:
        return "-" + format_time(-seconds, include_hours)

    total_secs = int(seconds)
    mins, secs = divmod(total_secs, 60)

    if include_hours and mins >= 60:
        hours, mins = divmod(mins, 60)
        return f"{hours:02d}:{mins:02d}:{secs:02d}"

    return f"{mins:02d}:{secs:02d}"


def format_duration(seconds: float) -> str:
    """Format duration with appropriate units.

    Examples:
        >>> format_duration(0.5)
        '500ms'
        >>> format_duration(11.2)
        '11.20s'
        >>> format_duration(65)
        '1m 5s'
    """
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"

    if seconds < 60:
        return f"{seconds:.2f}s"

    mins, secs = divmod(int(seconds), 60)
    if secs:
        return f"{mins}m {secs}s"
    return f"{mins}m"


def format_bpm(bpm: float, precision: int = 1) -> str:
    """Format BPM value, '?' when tempo is unknown."""
    if bpm <= 0:
        return "? BPM"
    return f"{bpm:.{precision}f} BPM"


def format_percent(value: float, precision: int = 1) -> str:
    """Format value in [0, 1] as percentage."""
    return f"{value * 100:.{precision}f}%"


def format_key(key: Optional[str]) -> str:
    """Format Camelot key, '?' when unknown."""
    return key if key else "?"

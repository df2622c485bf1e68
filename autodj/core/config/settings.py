"""
Settings - Application configuration using dataclasses.

Environment variables:
- AUTODJ_FRAME_INTERVAL_SEC: spacing of analysis frames (default 0.1)
- AUTODJ_PREFERRED_TRANSITION_SEC: preferred transition length (default 8.0)
- AUTODJ_TRANSITION_INTENSITY: intensity hint passed to planners (default 0.7)

Log level and format are not settings: LoggingConfig reads them from
logging-config.yaml and LOG_LEVEL / LOG_JSON_FORMAT.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from autodj.core.errors import ConfigurationError


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be a number",
            data={"variable": name, "value": raw},
            cause=e,
        )


@dataclass
class Settings:
    """Application settings from environment."""

    # Analysis
    frame_interval_sec: float = field(
        default_factory=lambda: _env_float("AUTODJ_FRAME_INTERVAL_SEC", 0.1)
    )

    # Session
    preferred_transition_sec: float = field(
        default_factory=lambda: _env_float("AUTODJ_PREFERRED_TRANSITION_SEC", 8.0)
    )
    transition_intensity: float = field(
        default_factory=lambda: _env_float("AUTODJ_TRANSITION_INTENSITY", 0.7)
    )

    def __post_init__(self):
        if self.frame_interval_sec <= 0:
            raise ConfigurationError(
                "Frame interval must be positive",
                data={"frame_interval_sec": self.frame_interval_sec},
            )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None

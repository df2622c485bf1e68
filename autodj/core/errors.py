"""
Custom error classes with structured logging.

All errors include correlation context and structured data for observability.
Planning and selection degrade gracefully on bad musical data; these errors
are reserved for structurally invalid input and broken configuration.
"""

from typing import Optional, Dict, Any
from autodj.common.logging import get_logger
from autodj.common.logging.correlation import get_correlation_id, get_session_id

logger = get_logger(__name__)


class AutoDJError(Exception):
    """
    Base error class for all application errors.

    Automatically logs errors with correlation context when raised.
    """

    def __init__(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """
        Initialize error with structured context.

        Args:
            message: Human-readable error message
            data: Structured data for observability
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.data = data or {}
        self.cause = cause

        self.correlation_id = get_correlation_id()
        self.session_id = get_session_id()

        self._log_error()

    def _log_error(self):
        """Log error with structured data."""
        log_data = {
            "error_type": self.__class__.__name__,
            "correlation_id": self.correlation_id,
            "session_id": self.session_id,
            **self.data,
        }

        if self.cause:
            log_data["cause"] = str(self.cause)

        logger.error(self.message, data=log_data, exc_info=self.cause)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "data": self.data,
            "correlation_id": self.correlation_id,
            "session_id": self.session_id,
            "cause": str(self.cause) if self.cause else None,
        }


# Input validation errors
class ValidationError(AutoDJError):
    """Error validating input data (frames, tempo, keys)."""
    pass


# Configuration errors
class ConfigurationError(AutoDJError):
    """Error in configuration."""
    pass


# Analysis errors
class AnalysisError(AutoDJError):
    """Error during track analysis."""
    pass


class MixPointDetectionError(AnalysisError):
    """Error during mix-in / mix-out detection."""
    pass


# Decision errors
class SelectionError(AutoDJError):
    """Error while choosing the next track."""
    pass


class PlanningError(AutoDJError):
    """Error while planning a transition."""
    pass

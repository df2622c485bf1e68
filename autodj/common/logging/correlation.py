"""Correlation context for tracing a session step through the logs."""

import uuid
import logging
import contextvars


# Context variable for correlation ID (thread-safe, async-safe)
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Context variable for DJ session ID
session_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)


def generate_correlation_id() -> str:
    """Generate unique correlation ID."""
    return str(uuid.uuid4())[:8]


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return correlation_id_var.get()


def set_correlation_id(cid: str | None):
    """Set correlation ID in context."""
    correlation_id_var.set(cid)


def get_session_id() -> str | None:
    """Get current session ID from context."""
    return session_id_var.get()


def set_session_id(sid: str | None):
    """Set session ID in context."""
    session_id_var.set(sid)


def clear_context():
    """Reset all correlation context vars."""
    correlation_id_var.set(None)
    session_id_var.set(None)


class CorrelationLogFilter(logging.Filter):
    """
    Logging filter that adds correlation_id and session_id to log records.

    Use with standard logging to auto-inject context vars.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        record.session_id = get_session_id()
        return True

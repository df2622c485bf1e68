"""Structured logging for autodj."""

from .logger import setup_logging, get_logger
from .logging_config import LoggingConfig, get_logging_config
from .formatters import JSONFormatter, StructuredLogAdapter
from .correlation import (
    CorrelationLogFilter,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    get_session_id,
    set_session_id,
    clear_context,
)
from .format import (
    format_time,
    format_duration,
    format_bpm,
    format_percent,
    format_key,
)

__all__ = [
    # Logger
    'setup_logging',
    'get_logger',
    # Logging config
    'LoggingConfig',
    'get_logging_config',
    # Structured logging
    'JSONFormatter',
    'StructuredLogAdapter',
    # Correlation
    'CorrelationLogFilter',
    'generate_correlation_id',
    'get_correlation_id',
    'set_correlation_id',
    'get_session_id',
    'set_session_id',
    'clear_context',
    # Format
    'format_time',
    'format_duration',
    'format_bpm',
    'format_percent',
    'format_key',
]

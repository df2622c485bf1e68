"""Structured JSON logging formatter with correlation ID support."""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any


class JSONFormatter(logging.Formatter):
    """
    One JSON object per log line.

    Fields: timestamp, level, component, logger, message, plus
    correlation_id / session_id / data / exception when present.
    """

    def __init__(self, include_path: bool = True):
        super().__init__()
        self.include_path = include_path

    @staticmethod
    def _extract_component(logger_name: str) -> str:
        """
        Short component name for dashboards.

        Examples:
            autodj.modules.transition.planner -> transition.planner
            autodj.core.errors -> core.errors
            __main__ -> main
        """
        if logger_name == "__main__":
            return "main"

        parts = logger_name.split(".")
        if parts[0] == "autodj":
            parts = parts[1:]
        if parts and parts[0] == "modules":
            parts = parts[1:]
        return ".".join(parts) if parts else logger_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "component": self._extract_component(record.name),
            "logger": record.name,
            "message": record.getMessage().strip(),
        }
        if self.include_path:
            entry["path"] = f"{record.pathname}:{record.lineno}"

        for attr in ("correlation_id", "session_id"):
            value = getattr(record, attr, None)
            if value:
                entry[attr] = value

        data = getattr(record, "structured_data", None)
        if data:
            entry["data"] = data

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


class StructuredLogAdapter(logging.LoggerAdapter):
    """
    Logger adapter with a `data=` keyword for structured fields.

    Usage:
        logger = StructuredLogAdapter(logging.getLogger(__name__))
        logger.info("Plan ready", data={"duration_sec": 11.2, "start_in": 64.0})

    Correlation and session IDs come from the context vars via
    CorrelationLogFilter on the handlers.
    """

    def __init__(self, logger: logging.Logger):
        super().__init__(logger, {})

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        data = kwargs.pop("data", None)
        if data:
            extra = dict(kwargs.get("extra") or {})
            extra["structured_data"] = data
            kwargs["extra"] = extra
        return msg, kwargs

"""Structured logging with correlation context for the image services."""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .logging_config import setup_logger


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class LogContext:
    """Context attached to every message of one ingestion operation."""

    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Create new context with operation set."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=operation,
            component=self.component,
            metadata=self.metadata.copy(),
        )

    def with_metadata(self, **kwargs: Any) -> "LogContext":
        """Create new context with additional metadata."""
        new_metadata = self.metadata.copy()
        new_metadata.update(kwargs)
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=self.component,
            metadata=new_metadata,
        )


def format_message(
    message: str, context: Optional[LogContext] = None, **kwargs: Any
) -> str:
    """Render ``[operation] [correlation_id] message (key=value, ...)``."""
    if context is None:
        fields = kwargs
        formatted = message
    else:
        fields = {**context.metadata, **kwargs}
        formatted = f"[{context.correlation_id}] {message}"
        if context.operation:
            formatted = f"[{context.operation}] {formatted}"

    if fields:
        formatted += " (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")"
    return formatted


class StructuredLogger:
    """Logger accepting a LogContext and key/value fields on each call."""

    def __init__(self, name: str, level: Optional[str] = None):
        self._logger: logging.Logger = setup_logger(name, level=level)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        **kwargs: Any,
    ) -> None:
        getattr(self._logger, level.value.lower())(
            format_message(message, context, **kwargs)
        )

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(
        self, message: str, context: Optional[LogContext] = None, **kwargs: Any
    ):
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any):
        self._log(LogLevel.ERROR, message, context, **kwargs)

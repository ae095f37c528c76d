"""Structured JSON logging with node execution context."""
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from src.flare_nodes.config import get_settings


CONTEXT_FIELDS = ("node", "resource", "operation", "item_index")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class NodeContextFilter(logging.Filter):
    """Add node execution context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add default context fields if not present."""
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, None)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with standardized field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # item_index 0 is meaningful, so only None is dropped
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value
            else:
                log_record.pop(field, None)


def setup_logging(stream: Any = None) -> None:
    """
    Configure structured logging for the node runtime.

    Args:
        stream: Target stream, stdout by default
    """
    settings = get_settings()

    handler = logging.StreamHandler(stream or sys.stdout)

    if settings.log_format == "text":
        formatter: logging.Formatter = logging.Formatter(TEXT_FORMAT)
    else:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    handler.setFormatter(formatter)
    handler.addFilter(NodeContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges call-site extra over the bound context."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "ContextLoggerAdapter":
        """Return a new adapter with additional bound context."""
        return ContextLoggerAdapter(self.logger, {**(self.extra or {}), **context})


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a logger with node context support.

    Args:
        name: Logger name (typically __name__)
        **context: Context fields bound to every record

    Returns:
        LoggerAdapter that can accept node context in extra dict
    """
    logger = logging.getLogger(name)
    return ContextLoggerAdapter(logger, context)


def with_node_context(
    node: str | None = None,
    resource: str | None = None,
    operation: str | None = None,
    item_index: int | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    Create an extra dict with node context for logging.

    Args:
        node: Node type
        resource: Selected resource
        operation: Selected operation
        item_index: Index of the item being processed
        **kwargs: Additional context fields

    Returns:
        Dict to pass as extra parameter to logger methods
    """
    extra = kwargs.copy()
    if node:
        extra["node"] = node
    if resource:
        extra["resource"] = resource
    if operation:
        extra["operation"] = operation
    if item_index is not None:
        extra["item_index"] = item_index
    return extra

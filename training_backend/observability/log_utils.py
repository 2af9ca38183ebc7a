"""
Structured logging helpers.

Log context travels in ``extra=`` and must be flat, printable and safe to
attach to a LogRecord. These helpers turn ids, enums, timestamps and
collections into short strings before they reach the logging module.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

# LogRecord attributes that extra= keys must not overwrite
_RESERVED_KEYS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value as a short string for log context.

    Args:
        value: Any value (ids, enums, timestamps, collections, ...)
        max_length: Longer renderings are cut and marked as truncated

    Returns:
        str: Printable representation
    """
    try:
        if value is None:
            rendered = "None"
        elif isinstance(value, enum.Enum):
            rendered = str(value.value)
        elif isinstance(value, datetime):
            rendered = value.isoformat()
        elif isinstance(value, (str, UUID)):
            rendered = str(value)
        elif isinstance(value, (list, tuple, set, frozenset)):
            rendered = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            rendered = f"dict({len(value)} keys)"
        else:
            rendered = str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(rendered) > max_length:
        return rendered[:max_length] + f"... (truncated, {len(rendered)} total)"
    return rendered


def _build_extra(context: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in _RESERVED_KEYS else key): safe_log_value(value)
        for key, value in context.items()
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with keyword context rendered through safe_log_value.

    Keys that collide with LogRecord attributes are prefixed with ``ctx_``.
    """
    logger.log(level, message, extra=_build_extra(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log an error with its traceback, exception type and keyword context."""
    extra = _build_extra(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)

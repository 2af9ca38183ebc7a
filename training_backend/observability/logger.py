"""
Root logging setup.

One stdout handler whose lines carry the request correlation ID, so every
log emitted while serving a request can be grouped by it.

Dependencies: logging (stdlib), training_backend.observability.correlation
System role: Process-wide logging configuration
"""

import logging
import sys

from training_backend.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty at INFO; only their warnings are worth keeping
_QUIET_LOGGERS = ("urllib3", "botocore", "boto3", "sqlalchemy.engine")


class CorrelationIdFilter(logging.Filter):
    """Stamp ``correlation_id`` on each record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install the stdout handler on the root logger.

    Safe to call more than once: handlers from an earlier call (or from
    uvicorn's defaults) are replaced rather than stacked.

    Args:
        level: Root level name, e.g. "INFO" or "DEBUG"
    """
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

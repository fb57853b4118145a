"""Logging configuration for SwingSubmit."""

from __future__ import annotations

import logging

import structlog


class SubmissionContextFilter(logging.Filter):
    """Copy structlog context variables onto stdlib log records.

    Keys already set on the record through ``extra`` are left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in structlog.contextvars.get_contextvars().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


_context_filter = SubmissionContextFilter()


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger whose records carry the bound submission context."""
    log = logging.getLogger(name)
    if _context_filter not in log.filters:
        log.addFilter(_context_filter)
    return log


def configure_logging(level: int = logging.INFO) -> None:
    """Configure stdlib logging and the structlog JSON pipeline."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def bind_submission_context(**values: str) -> None:
    """Attach per-submission identifiers to structlog's context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_submission_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*(keys or ("session_id",)))

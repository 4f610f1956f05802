"""Scrape error taxonomy and logging helpers.

No scrape failure is raised to the metrics endpoint. Each one is classified,
logged at the level its kind calls for, and turned into a metric value by the
collector.
"""

import logging
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class ScrapeErrorKind(str, Enum):
    """Stage of the scrape at which an error occurred."""

    REQUEST = "request"
    TRANSPORT = "transport"
    READ = "read"
    DECODE = "decode"
    INTERNAL = "internal"


# Log level per error kind
LOG_LEVELS: dict[ScrapeErrorKind, int] = {
    ScrapeErrorKind.REQUEST: logging.ERROR,
    ScrapeErrorKind.TRANSPORT: logging.WARNING,
    ScrapeErrorKind.READ: logging.ERROR,
    ScrapeErrorKind.DECODE: logging.ERROR,
    ScrapeErrorKind.INTERNAL: logging.ERROR,
}

# Maximum length for error details and logged bodies
MAX_ERROR_LENGTH = 500


def truncate_error(error: str, max_length: int = MAX_ERROR_LENGTH) -> str:
    """Truncate error message if too long.

    Args:
        error: The error message.
        max_length: Maximum allowed length.

    Returns:
        Truncated error message.
    """
    if len(error) <= max_length:
        return error

    return error[: max_length - 3] + "..."


def classify_exception(exc: Exception) -> ScrapeErrorKind:
    """Classify an exception raised while scraping.

    Read failures surface as transport exceptions too, so callers that know
    they are reading a body pass ``ScrapeErrorKind.READ`` explicitly.

    Args:
        exc: The exception to classify.

    Returns:
        Appropriate error kind.
    """
    # Header values must be ASCII, so a bad token fails while building the request
    if isinstance(exc, (httpx.InvalidURL, UnicodeEncodeError)):
        return ScrapeErrorKind.REQUEST

    if isinstance(exc, (httpx.RequestError, ConnectionError, TimeoutError)):
        return ScrapeErrorKind.TRANSPORT

    if isinstance(exc, httpx.StreamError):
        return ScrapeErrorKind.READ

    if isinstance(exc, (ValidationError, ValueError)):
        return ScrapeErrorKind.DECODE

    return ScrapeErrorKind.INTERNAL


def log_scrape_error(
    exc: Exception,
    kind: ScrapeErrorKind | None = None,
    **context: Any,
) -> ScrapeErrorKind:
    """Log a scrape error with context.

    Args:
        exc: The exception that occurred.
        kind: Optional pre-classified error kind.
        **context: Additional context to include in log.

    Returns:
        The error kind that was logged.
    """
    if kind is None:
        kind = classify_exception(exc)

    log_extra = {
        "error_kind": kind.value,
        "error_type": type(exc).__name__,
        **context,
    }

    if kind == ScrapeErrorKind.INTERNAL:
        logger.exception("Unexpected scrape error", extra=log_extra)
    else:
        logger.log(
            LOG_LEVELS[kind],
            f"Scrape {kind.value} error: {truncate_error(str(exc))}",
            extra=log_extra,
        )

    return kind

"""Utility functions for scrape error handling."""

from instance_health_exporter.utils.errors import (
    ScrapeErrorKind,
    classify_exception,
    log_scrape_error,
    truncate_error,
)

__all__ = [
    "ScrapeErrorKind",
    "classify_exception",
    "log_scrape_error",
    "truncate_error",
]

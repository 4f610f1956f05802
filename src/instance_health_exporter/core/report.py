"""Decoding of instance health response bodies."""

import logging

from pydantic import ValidationError

from instance_health_exporter.models.health import HealthCheckReport
from instance_health_exporter.utils.errors import (
    ScrapeErrorKind,
    log_scrape_error,
    truncate_error,
)

logger = logging.getLogger(__name__)


def parse_report(body: bytes, **context) -> HealthCheckReport:
    """Decode a response body into a health report.

    A body that is not valid JSON, or whose top level is not a report object,
    is logged together with the offending body and decodes to an empty report.

    Args:
        body: Raw response body.
        **context: Extra fields for log records (e.g. fqdn).

    Returns:
        The decoded report, empty on failure.
    """
    try:
        report = HealthCheckReport.model_validate_json(body)
    except ValidationError as e:
        log_scrape_error(e, ScrapeErrorKind.DECODE, **context)
        raw = truncate_error(body.decode("utf-8", errors="replace"))
        logger.info(f"Problem decoding the following body: {raw}", extra=context)
        return HealthCheckReport()

    logger.debug(f"Decoded {len(report.statuses)} health checks")
    return report

"""Prometheus collector that scrapes the instance health endpoint on demand.

Every ``collect()`` call makes one upstream request and yields, in order:

- the up gauge (1 if any response arrived, whatever its status code)
- one health gauge sample per reported check, in payload order
- the collect duration gauge

When no response arrives only the up gauge is yielded. ``collect()`` never
raises; failures are logged and show up as ``up == 0`` or missing samples.
"""

import logging
import time
from collections.abc import Iterator

import httpx
from prometheus_client.core import Metric
from prometheus_client.registry import Collector

from instance_health_exporter.config import TargetSettings
from instance_health_exporter.core.descriptors import (
    MetricDescriptorSet,
    build_descriptor_set,
)
from instance_health_exporter.core.report import parse_report
from instance_health_exporter.models.health import HealthCheckEntry
from instance_health_exporter.utils.errors import ScrapeErrorKind, log_scrape_error

logger = logging.getLogger(__name__)


def bool_to_float(value: bool) -> float:
    """Convert a boolean to a gauge value."""
    return 1.0 if value else 0.0


def health_label_values(entry: HealthCheckEntry, fqdn: str) -> list[str]:
    """Label values of a health sample, in descriptor label order."""
    return [
        str(entry.id),
        entry.complete_key,
        entry.name,
        entry.description,
        entry.failure_reason,
        entry.application,
        entry.severity,
        entry.documentation,
        entry.tag,
        fqdn,
    ]


class InstanceHealthCollector(Collector):
    """Custom collector bridging one Atlassian instance into Prometheus."""

    def __init__(
        self,
        target: TargetSettings,
        client: httpx.Client,
        descriptors: MetricDescriptorSet | None = None,
    ):
        self.target = target
        self.client = client
        self.descriptors = descriptors or build_descriptor_set()

    def describe(self) -> list[Metric]:
        """Return the fixed metric descriptors."""
        return self.descriptors.describe()

    def build_request(self) -> httpx.Request:
        """Build the authenticated request for the health endpoint.

        Raises:
            httpx.InvalidURL: If the configured target does not form a usable URL.
            UnicodeEncodeError: If the token cannot be sent as an ASCII header.
        """
        request = self.client.build_request(
            "GET",
            self.target.url,
            headers={
                "Authorization": f"Basic {self.target.token}",
                "content-type": "application/json",
            },
            timeout=self.target.timeout_seconds,
        )
        if not request.url.host:
            raise httpx.InvalidURL(f"Missing host in target URL: {self.target.url}")
        return request

    def collect(self) -> Iterator[Metric]:
        """Scrape the target and yield up, health and duration metrics."""
        start_time = time.perf_counter()
        fqdn = self.target.fqdn
        up = self.descriptors.up.family()

        logger.debug("Create a request object")
        try:
            request = self.build_request()
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            log_scrape_error(e, fqdn=fqdn)
            up.add_metric(["", fqdn], 0)
            yield up
            return

        logger.debug(f"Get url: {request.url}")
        try:
            response = self.client.send(request, stream=True)
        except Exception as e:
            # Transport failures log as warnings, anything unexpected with a traceback
            log_scrape_error(e, fqdn=fqdn)
            up.add_metric(["", fqdn], 0)
            yield up
            return

        try:
            logger.debug(f"Set scrape metric status code: {response.status_code}")
            up.add_metric([str(response.status_code), fqdn], 1)
            body = self._read_body(response)
        finally:
            response.close()

        yield up

        report = parse_report(body, fqdn=fqdn)
        entries = self._cap_entries(report.statuses)

        if entries:
            health = self.descriptors.health.family()
            for entry in entries:
                logger.debug(f"Create health metric for: {entry.description}")
                health.add_metric(health_label_values(entry, fqdn), bool_to_float(entry.is_healthy))
            yield health

        duration = self.descriptors.duration.family()
        duration.add_metric([fqdn], time.perf_counter() - start_time)
        yield duration
        logger.debug("Collect finished")

    def _read_body(self, response: httpx.Response) -> bytes:
        """Read the whole body, keeping whatever arrived before a read failure."""
        chunks: list[bytes] = []
        try:
            for chunk in response.iter_bytes():
                chunks.append(chunk)
        except (httpx.HTTPError, httpx.StreamError) as e:
            log_scrape_error(e, ScrapeErrorKind.READ, fqdn=self.target.fqdn)
        return b"".join(chunks)

    def _cap_entries(self, entries: list[HealthCheckEntry]) -> list[HealthCheckEntry]:
        """Drop entries beyond the configured max_entries."""
        limit = self.target.max_entries
        if limit is None or len(entries) <= limit:
            return entries

        logger.warning(
            f"Dropping {len(entries) - limit} health checks beyond max_entries={limit}",
            extra={"fqdn": self.target.fqdn},
        )
        return entries[:limit]

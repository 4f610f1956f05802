"""Metric descriptors for the instance health exporter.

The label schema of every metric is fixed here, independent of what the
upstream payload contains.
"""

from dataclasses import dataclass

from prometheus_client.core import GaugeMetricFamily

from instance_health_exporter.config import CHECK_PATH

EXPORTER_NAME = "atlassian_instance_health"

HEALTH_LABELS = (
    "id",
    "completekey",
    "name",
    "description",
    "failurereason",
    "application",
    "severity",
    "documentation",
    "tag",
    "fqdn",
)
DURATION_LABELS = ("fqdn",)
UP_LABELS = ("httpcode", "fqdn")


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help text and label names of one gauge."""

    name: str
    documentation: str
    labels: tuple[str, ...]

    def family(self) -> GaugeMetricFamily:
        """Create an empty gauge family carrying this identity."""
        return GaugeMetricFamily(self.name, self.documentation, labels=list(self.labels))


@dataclass(frozen=True)
class MetricDescriptorSet:
    """The three metrics the exporter can produce."""

    health: MetricDescriptor
    duration: MetricDescriptor
    up: MetricDescriptor

    def describe(self) -> list[GaugeMetricFamily]:
        """Return sample-less families for static registration."""
        return [self.health.family(), self.duration.family(), self.up.family()]


def build_descriptor_set(exporter_name: str = EXPORTER_NAME) -> MetricDescriptorSet:
    """Build the descriptor set for an exporter name.

    Args:
        exporter_name: Metric name prefix.

    Returns:
        Immutable descriptor set.
    """
    return MetricDescriptorSet(
        health=MetricDescriptor(
            name=exporter_name,
            documentation=(
                "metric used to monitor the Atlassian Troubleshooting and Support Tools "
                f"Plugin endpoint (https://<url>{CHECK_PATH})"
            ),
            labels=HEALTH_LABELS,
        ),
        duration=MetricDescriptor(
            name=f"{exporter_name}_collect_duration_seconds",
            documentation="Used to keep track of how long the exporter took to collect metrics",
            labels=DURATION_LABELS,
        ),
        up=MetricDescriptor(
            name=f"{exporter_name}_scrape_url_up",
            documentation=(
                f"metric used to check if the rest endpoint is accessible (https://<url>{CHECK_PATH})"
            ),
            labels=UP_LABELS,
        ),
    )

"""Shared fixtures for unit tests."""

import json

import httpx
import pytest

from instance_health_exporter.config import TargetSettings

FQDN = "jira.example.com"


def make_status(**overrides) -> dict:
    """Build one upstream status object."""
    status = {
        "id": 0,
        "completeKey": "com.atlassian.troubleshooting.plugin-jira:eolHealthCheck",
        "name": "End of Life",
        "description": "Checks if the running version of JIRA is approaching, or has reached End of Life.",
        "isHealthy": True,
        "failureReason": "",
        "application": "JIRA",
        "time": 1584048923185,
        "severity": "undefined",
        "documentation": "https://confluence.atlassian.com/x/HjnRLg",
        "tag": "Supported Platforms",
        "healthy": True,
    }
    status.update(overrides)
    return status


def make_body(*statuses: dict) -> bytes:
    """Encode statuses as an instance health response body."""
    return json.dumps({"statuses": list(statuses)}).encode()


def mock_client(handler) -> httpx.Client:
    """Create an httpx client whose requests are answered by handler."""
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def target():
    """Target settings for a test Jira instance."""
    return TargetSettings(fqdn=FQDN, token="dXNlcjpwYXNz", timeout_seconds=5)

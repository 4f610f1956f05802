"""Prometheus exporter for the Atlassian Instance Health endpoint."""

__version__ = "1.0.0"

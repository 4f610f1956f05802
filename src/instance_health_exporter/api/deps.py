"""Dependency injection for API handlers."""

from typing import Annotated

from fastapi import Depends, Request
from prometheus_client import CollectorRegistry


def get_registry(request: Request) -> CollectorRegistry:
    """Get the registry holding the instance health collector.

    Each application owns its registry, so tests can build several apps
    without colliding metric names.
    """
    return request.app.state.registry


RegistryDep = Annotated[CollectorRegistry, Depends(get_registry)]

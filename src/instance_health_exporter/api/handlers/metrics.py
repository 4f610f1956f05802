"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from instance_health_exporter.api.deps import RegistryDep

router = APIRouter()


@router.get("/metrics")
def metrics(registry: RegistryDep) -> Response:
    """Scrape the upstream instance and return the exposition text.

    Declared sync so the blocking upstream call runs in the worker threadpool.
    """
    return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

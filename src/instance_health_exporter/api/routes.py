"""API route registration."""

from fastapi import APIRouter

from instance_health_exporter.api.handlers.index import router as index_router
from instance_health_exporter.api.handlers.metrics import router as metrics_router

# Main API router that aggregates all endpoint routers
api_router = APIRouter()

api_router.include_router(index_router, tags=["index"])

api_router.include_router(metrics_router, tags=["metrics"])

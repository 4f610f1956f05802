"""Root and favicon handlers."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from instance_health_exporter.core.descriptors import EXPORTER_NAME

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root(request: Request) -> str:
    """Report that the exporter is running."""
    remote_addr = request.client.host if request.client else None
    logger.info(
        f"{remote_addr} requested {request.url}",
        extra={"remote_addr": remote_addr, "path": request.url.path},
    )
    return f"{EXPORTER_NAME} is running"


@router.get("/favicon.ico")
async def favicon() -> Response:
    """Answer browser favicon requests with an empty body."""
    return Response(content=b"")

"""Health check endpoint for service monitoring."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from src import __version__
from src.core.dependencies import get_ledger_store
from src.domain.exceptions import StorageException
from src.domain.interfaces import LedgerStore

logger = structlog.get_logger(__name__)

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    database: str = "ok"


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service and its database.",
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
async def health_check(
    response: Response,
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> HealthResponse:
    try:
        await store.ping()
    except StorageException:
        logger.warning("health_check_degraded", database="unavailable")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="degraded", version=__version__, database="unavailable")

    return HealthResponse(version=__version__)

"""Marketplace stats and service health endpoints."""

from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter, Depends

from reloop.query import QueryService
from .dependencies import get_query_service
from .models import HealthResponse, StatsResponse

router = APIRouter(tags=["System"])


def _version() -> str:
    try:
        return version("reloop-indexer")
    except PackageNotFoundError:
        return "unknown"


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    service: QueryService = Depends(get_query_service)
) -> StatsResponse:
    """Get marketplace totals."""
    return StatsResponse(**service.get_stats())


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="ok", version=_version())

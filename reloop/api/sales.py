"""Sale endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from reloop.query import DEFAULT_LIMIT, QueryService
from .dependencies import get_query_service

router = APIRouter(
    prefix="/sales",
    tags=["Sales"]
)


@router.get("")
def list_sales(
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """List sales, newest first."""
    return service.list_sales(limit, offset)

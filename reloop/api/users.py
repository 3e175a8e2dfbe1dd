"""User profile endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from reloop.query import QueryService
from .dependencies import get_query_service, parse_address
from .models import ErrorResponse

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


@router.get("/{address}", responses={400: {"model": ErrorResponse}})
def get_user(
    address: str,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Get stats, owned and minted tokens and recent profits of an address.

    Addresses without activity get zeroed stats.
    """
    return service.get_user(parse_address(address))

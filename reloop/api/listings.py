"""Marketplace listing endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from reloop.query import DEFAULT_LIMIT, QueryService
from .dependencies import get_query_service, parse_token_id
from .models import ErrorResponse

router = APIRouter(
    prefix="/listings",
    tags=["Listings"]
)


@router.get("")
def list_listings(
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """List active listings, newest first."""
    return service.list_listings(limit, offset)


@router.get(
    "/{token_id}",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def get_listing(
    token_id: str,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Get the active listing of a token."""
    listing = service.get_listing(parse_token_id(token_id))
    if listing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found"
        )
    return listing

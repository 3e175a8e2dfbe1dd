"""Token endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from reloop.query import DEFAULT_LIMIT, QueryService
from .dependencies import get_query_service, parse_token_id
from .models import ErrorResponse

router = APIRouter(
    prefix="/tokens",
    tags=["Tokens"]
)


@router.get("")
def list_tokens(
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """List tokens, newest mint first."""
    return service.list_tokens(limit, offset)


@router.get(
    "/{token_id}",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def get_token(
    token_id: str,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Get a token with its owner history, active listing and sales."""
    token = service.get_token(parse_token_id(token_id))
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Token not found"
        )
    return token


@router.get(
    "/{token_id}/profits",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
def get_token_profits(
    token_id: str,
    service: QueryService = Depends(get_query_service)
) -> Dict[str, Any]:
    """Get the profit cascade payments of a token."""
    profits = service.get_token_profits(parse_token_id(token_id))
    if profits is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Token not found"
        )
    return profits

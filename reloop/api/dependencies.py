"""Shared dependencies of the API routes."""

from functools import lru_cache

from fastapi import HTTPException, status
from eth_utils import is_address

from reloop.query import QueryService


@lru_cache(maxsize=None)
def get_query_service() -> QueryService:
    """Query service over the database at ``RELOOP_DB_PATH``.

    Override this dependency to serve another database.
    """
    return QueryService.create()


def parse_token_id(token_id: str) -> int:
    """Parse a decimal token id path parameter.

    Raises:
        HTTPException: 400 if the id is not a non-negative integer
    """
    if not token_id.isdigit():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid token id `{token_id}`"
        )
    return int(token_id)


def parse_address(address: str) -> str:
    """Validate an address path parameter.

    Raises:
        HTTPException: 400 if it's not a 20-byte hex address
    """
    if not is_address(address):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid address `{address}`"
        )
    return address.lower()

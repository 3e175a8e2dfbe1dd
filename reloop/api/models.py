"""Response models of the HTTP API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str


class HealthResponse(BaseModel):
    """Model for service health."""
    status: str
    version: str


class StatsResponse(BaseModel):
    """Model for marketplace totals. Wei amounts are decimal strings."""
    totalTokens: int
    totalSales: int
    activeListings: int
    totalVolume: str
    totalProfitDistributed: str

"""Neighborhood model."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class Neighborhood(BaseModel):
    """Neighborhood (geo zone) with aggregate sale statistics."""
    id: str = Field(..., description="Neighborhood ID (ULID text)")
    name: Optional[str] = Field(None, description="Zone name, used to reuse zones on form intake")
    polygon: Optional[Any] = Field(None, description="Boundary geometry (opaque JSON)")
    avgSalePrice: Optional[float] = None
    transactionCount: Optional[int] = None

"""Transaction model."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class Transaction(BaseModel):
    """Sale of a property."""
    id: str = Field(..., description="Transaction ID (ULID text)")
    propertyId: Optional[str] = Field(None, description="Sold property ID (weak reference)")
    saleDate: Optional[datetime] = None
    salePrice: Optional[float] = None
    buyerId: Optional[str] = Field(None, description="Buying agent ID (weak reference)")
    sellerId: Optional[str] = Field(None, description="Selling agent ID (weak reference)")
    type: Optional[str] = Field(None, description="Free-form type, e.g. purchase")

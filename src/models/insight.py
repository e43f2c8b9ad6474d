"""Computed insight models (wire shape)."""

from typing import Optional
from pydantic import BaseModel, Field

from src.models.property import Property


class EstateValue(BaseModel):
    """Estimated market value of a property."""
    propertyId: str
    areaSqFt: Optional[int] = None
    estimatedValue: float = Field(..., description="areaSqFt * basedOnZoneAverage, unrounded")
    basedOnZoneAverage: float = Field(..., description="Zone average price, 0 when unknown")


class TaxInfo(BaseModel):
    """Tax estimate from the most recent sale."""
    propertyId: str
    lastSoldFor: Optional[float] = None
    taxRate: float
    estimatedTax: float
    handledBy: str = Field(..., description="Seller (else buyer) agent name, or Unknown")


class PropertyInsight(BaseModel):
    """Property details bundled with its value and tax estimates."""
    propertyDetails: Property
    marketValue: EstateValue
    taxEstimate: Optional[TaxInfo] = None

"""Property models (storage shape)."""

from typing import Optional
from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    """Geo-point embedded in an address."""
    type: Optional[str] = Field(None, description="Geometry format, e.g. Point")
    coordinates: Optional[list[float]] = Field(None, description="[longitude, latitude]")


class Address(BaseModel):
    """Postal address of a property."""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    loc: Optional[GeoPoint] = None


class Property(BaseModel):
    """Listed property."""
    id: str = Field(..., description="Property ID (ULID text)")
    address: Optional[Address] = None
    type: Optional[str] = Field(None, description="Category, e.g. condo or house")
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    yearBuilt: Optional[int] = None
    sqft: Optional[int] = Field(None, description="Living area in square feet")
    lotSize: Optional[int] = Field(None, description="Lot size in square feet")
    ownerAgentId: Optional[str] = Field(None, description="Owning agent ID (weak reference)")
    neighborhoodId: Optional[str] = Field(None, description="Neighborhood ID (weak reference)")

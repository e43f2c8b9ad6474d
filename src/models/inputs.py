"""Write inputs (wire shape)."""

from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class GeoPointInput(BaseModel):
    geoFormat: Optional[str] = None
    coordinates: Optional[list[float]] = None


class LocationDetailsInput(BaseModel):
    """Property location; either coordinates or geoCoordinates may carry the point."""
    streetAddress: str
    cityName: Optional[str] = None
    stateName: Optional[str] = None
    postalCode: Optional[str] = None
    coordinates: Optional[list[float]] = Field(None, min_length=2, max_length=2, description="[lng, lat]")
    geoCoordinates: Optional[GeoPointInput] = None


class PropertyInput(BaseModel):
    locationDetails: LocationDetailsInput
    propertyCategory: str
    bedroomCount: int
    bathroomCount: float
    builtYear: int
    areaSqFt: int
    lotSizeInSqFt: Optional[int] = None
    ownerAgentId: Optional[str] = None
    geoZoneId: Optional[str] = None


class AgentInput(BaseModel):
    fullName: str
    phoneNumber: Optional[str] = None
    emailAddress: Optional[str] = None
    agencyName: Optional[str] = None


class TransactionInput(BaseModel):
    propertyId: str
    saleDate: datetime
    salePrice: float
    buyerId: Optional[str] = None
    sellerId: Optional[str] = None
    transactionType: str


class NeighborhoodInput(BaseModel):
    zoneName: str
    boundaryPolygon: Optional[Any] = None
    averagePrice: Optional[float] = None
    totalTransactions: Optional[int] = None


class AddPropertyFormInput(BaseModel):
    """Loosely structured form submission; numeric fields stay free text."""
    address: str
    propertyType: str
    bedrooms: str
    bathrooms: str
    squareFeet: str
    yearBuilt: str
    purchasePrice: str
    description: Optional[str] = None
    amenities: Optional[list[str]] = None
    # Optional agent info
    agentName: Optional[str] = None
    agentPhone: Optional[str] = None
    agentEmail: Optional[str] = None
    agentAgency: Optional[str] = None
    # Optional neighborhood info
    neighborhoodName: Optional[str] = None

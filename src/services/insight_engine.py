"""Insight computation engine - derived, read-only views over stored entities."""

from typing import Optional

from src.models.insight import EstateValue, PropertyInsight, TaxInfo
from src.models.property import Property
from src.services.entity_store import EntityStore, get_entity_store
from src.utils.logging import get_structured_logger, timed
from src.utils.settings import AppConfig

logger = get_structured_logger(__name__)

UNKNOWN_AGENT = "Unknown"


@timed("estimate_value")
async def estimate_value(property_id: str, store: Optional[EntityStore] = None) -> EstateValue:
    """
    Estimate market value as living area times the zone's average sale price.

    Raises NotFoundError if the property does not exist. A missing zone
    reference, zone record or zone average counts as an average of 0.
    """
    store = store or get_entity_store()
    prop = await store.properties.get(property_id)
    return await _value_of(prop, store)


async def _value_of(prop: Property, store: EntityStore) -> EstateValue:
    zone = await store.neighborhoods.find_by_id(prop.neighborhoodId)
    zone_average = (zone.avgSalePrice if zone else None) or 0.0

    if zone is None and prop.neighborhoodId:
        logger.info(
            "Property references unknown neighborhood",
            property_id=prop.id,
            neighborhood_id=prop.neighborhoodId,
        )

    return EstateValue(
        propertyId=prop.id,
        areaSqFt=prop.sqft,
        estimatedValue=(prop.sqft or 0) * zone_average,
        basedOnZoneAverage=zone_average,
    )


@timed("tax_info")
async def tax_info(
    property_id: str,
    store: Optional[EntityStore] = None,
    tax_rate: Optional[float] = None,
) -> Optional[TaxInfo]:
    """
    Estimate tax from the most recent sale of a property.

    Returns None when the property has no sales. The handling agent is the
    seller, falling back to the buyer.
    """
    store = store or get_entity_store()
    rate = AppConfig.TAX_RATE if tax_rate is None else tax_rate

    txn = await store.transactions.find_one({"propertyId": property_id}, sort=("saleDate", True))
    if txn is None:
        return None

    agent = await store.agents.find_by_id(txn.sellerId or txn.buyerId)

    return TaxInfo(
        propertyId=property_id,
        lastSoldFor=txn.salePrice,
        taxRate=rate,
        estimatedTax=(txn.salePrice or 0.0) * rate,
        handledBy=(agent.name if agent and agent.name else UNKNOWN_AGENT),
    )


@timed("property_insight")
async def property_insight(
    property_id: str,
    store: Optional[EntityStore] = None,
    tax_rate: Optional[float] = None,
) -> PropertyInsight:
    """Bundle property details with its value estimate and tax estimate."""
    store = store or get_entity_store()
    prop = await store.properties.get(property_id)

    market_value = await _value_of(prop, store)
    tax_estimate = await tax_info(property_id, store=store, tax_rate=tax_rate)

    return PropertyInsight(
        propertyDetails=prop,
        marketValue=market_value,
        taxEstimate=tax_estimate,
    )

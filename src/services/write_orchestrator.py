"""Write orchestrator - single and compound entity creation."""

from datetime import datetime, timezone
from typing import Optional

from src.models.agent import Agent
from src.models.inputs import (
    AddPropertyFormInput,
    AgentInput,
    NeighborhoodInput,
    PropertyInput,
    TransactionInput,
)
from src.models.neighborhood import Neighborhood
from src.models.property import Property
from src.models.transaction import Transaction
from src.services.entity_store import EntityStore, get_entity_store
from src.services.field_aliasing import EntityKind, to_storage
from src.services.form_parsing import parse_address, parse_float, parse_int
from src.utils.logging import get_structured_logger, log_timing, mask_sensitive_data

logger = get_structured_logger(__name__)

POINT_FORMAT = "Point"
PURCHASE_TRANSACTION = "purchase"


def _property_wire_input(data: PropertyInput) -> dict:
    """Dump a property input, folding bare coordinates into a geo-point."""
    wire = data.model_dump(exclude_none=True)
    location = wire.get("locationDetails", {})
    coordinates = location.pop("coordinates", None)
    if coordinates is not None:
        location["geoCoordinates"] = {"geoFormat": POINT_FORMAT, "coordinates": coordinates}
    elif "geoCoordinates" in location and location["geoCoordinates"].get("coordinates"):
        location["geoCoordinates"].setdefault("geoFormat", POINT_FORMAT)
    return wire


async def add_property(data: PropertyInput, store: Optional[EntityStore] = None) -> Property:
    store = store or get_entity_store()
    record = to_storage(EntityKind.PROPERTY, _property_wire_input(data))
    return await store.properties.create(record)


async def add_agent(data: AgentInput, store: Optional[EntityStore] = None) -> Agent:
    store = store or get_entity_store()
    record = to_storage(EntityKind.AGENT, data.model_dump(exclude_none=True))
    return await store.agents.create(record)


async def add_transaction(data: TransactionInput, store: Optional[EntityStore] = None) -> Transaction:
    store = store or get_entity_store()
    record = to_storage(EntityKind.TRANSACTION, data.model_dump(exclude_none=True))
    return await store.transactions.create(record)


async def add_neighborhood(data: NeighborhoodInput, store: Optional[EntityStore] = None) -> Neighborhood:
    store = store or get_entity_store()
    record = to_storage(EntityKind.NEIGHBORHOOD, data.model_dump(exclude_none=True))
    return await store.neighborhoods.create(record)


async def _resolve_form_neighborhood(form: AddPropertyFormInput, store: EntityStore) -> str:
    """
    Reuse a neighborhood with the same name or create one seeded from the price.

    Lookup and create are separate store calls, so concurrent forms naming the
    same new zone can each create it.
    """
    existing = await store.neighborhoods.find_one({"name": form.neighborhoodName})
    if existing is not None:
        logger.info("Reusing neighborhood", neighborhood_id=existing.id, name=form.neighborhoodName)
        return existing.id

    created = await store.neighborhoods.create({
        "name": form.neighborhoodName,
        "avgSalePrice": parse_float(form.purchasePrice),
        "transactionCount": 1,
    })
    return created.id


async def add_property_from_form(
    form: AddPropertyFormInput,
    store: Optional[EntityStore] = None,
) -> Property:
    """
    Create a property from a loosely structured form submission.

    Optionally creates the agent and neighborhood named on the form first,
    and records a purchase transaction when a price was given. Creates are
    not rolled back: if a later step fails, earlier records stay persisted.
    """
    store = store or get_entity_store()
    created: dict[str, str] = {}

    with log_timing("add_property_from_form", logger=logger):
        try:
            agent_id = None
            if form.agentName:
                agent = await store.agents.create({
                    "name": form.agentName,
                    "phone": form.agentPhone,
                    "email": form.agentEmail,
                    "agency": form.agentAgency,
                })
                agent_id = created["agent_id"] = agent.id
                logger.info(
                    "Created agent from form",
                    agent_id=agent.id,
                    contact=mask_sensitive_data(f"{form.agentEmail or ''} {form.agentPhone or ''}".strip()),
                )

            neighborhood_id = None
            if form.neighborhoodName:
                neighborhood_id = created["neighborhood_id"] = await _resolve_form_neighborhood(form, store)

            prop = await store.properties.create({
                "address": {**parse_address(form.address), "loc": None},
                "type": form.propertyType,
                "bedrooms": parse_int(form.bedrooms),
                "bathrooms": parse_float(form.bathrooms),
                "yearBuilt": parse_int(form.yearBuilt),
                "sqft": parse_int(form.squareFeet),
                "lotSize": 0,
                "ownerAgentId": agent_id,
                "neighborhoodId": neighborhood_id,
            })
            created["property_id"] = prop.id

            if form.purchasePrice and form.purchasePrice.strip():
                txn = await store.transactions.create({
                    "propertyId": prop.id,
                    "saleDate": datetime.now(timezone.utc),
                    "salePrice": parse_float(form.purchasePrice),
                    "buyerId": agent_id,
                    "sellerId": None,
                    "type": PURCHASE_TRANSACTION,
                })
                created["transaction_id"] = txn.id
        except Exception:
            if created:
                logger.error("Form intake failed after partial creation", exc_info=True, **created)
            raise

    logger.info("Property created from form", **created)
    return prop

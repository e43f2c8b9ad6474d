"""Request dispatcher - maps GraphQL-style operations onto the service layer.

A request names one operation and passes its arguments as variables. The
result is returned in wire shape inside a ``{"data": ..., "errors": ...}``
envelope. Entity results can expand their relation fields one level deep
through an ``expand`` variable, e.g. ``{"id": "...", "expand": ["ownerAgent"]}``.
"""

import asyncio
from typing import Any, Awaitable, Callable, NamedTuple, Optional

from pydantic import BaseModel, ValidationError

from src.models.inputs import (
    AddPropertyFormInput,
    AgentInput,
    NeighborhoodInput,
    PropertyInput,
    TransactionInput,
)
from src.services import insight_engine, relations, write_orchestrator
from src.services.entity_store import EntityStore, get_entity_store
from src.services.field_aliasing import EntityKind, to_wire
from src.utils.errors import EstateError, InvalidRequestError, OperationTimeoutError
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

QUERY = "query"
MUTATION = "mutation"


class Relation(NamedTuple):
    resolve: Callable[[Any, EntityStore], Awaitable[Any]]
    kind: EntityKind


RELATIONS: dict[EntityKind, dict[str, Relation]] = {
    EntityKind.PROPERTY: {
        "ownerAgent": Relation(relations.owner_agent, EntityKind.AGENT),
        "geoZone": Relation(relations.geo_zone, EntityKind.NEIGHBORHOOD),
        "propertyTransactions": Relation(relations.property_transactions, EntityKind.TRANSACTION),
    },
    EntityKind.AGENT: {
        "managedProperties": Relation(relations.managed_properties, EntityKind.PROPERTY),
    },
    EntityKind.TRANSACTION: {
        "relatedProperty": Relation(relations.related_property, EntityKind.PROPERTY),
        "buyer": Relation(relations.buyer, EntityKind.AGENT),
        "seller": Relation(relations.seller, EntityKind.AGENT),
    },
    EntityKind.NEIGHBORHOOD: {
        "propertiesInZone": Relation(relations.properties_in_zone, EntityKind.PROPERTY),
    },
}


# ---------------- Argument handling ----------------

def _require(variables: dict, name: str) -> Any:
    value = variables.get(name)
    if value is None or value == "":
        raise InvalidRequestError(f"Missing required argument: {name}")
    return value


def _parse_input(model: type[BaseModel], variables: dict) -> BaseModel:
    raw = _require(variables, "input")
    if not isinstance(raw, dict):
        raise InvalidRequestError("Argument 'input' must be an object")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in error["loc"]) for error in e.errors())
        raise InvalidRequestError(f"Invalid {model.__name__}: {fields}") from e


def _expand_fields(variables: dict, kind: EntityKind) -> list[str]:
    expand = variables.get("expand") or []
    if not isinstance(expand, list) or not all(isinstance(field, str) for field in expand):
        raise InvalidRequestError("Argument 'expand' must be a list of field names")
    unknown = [field for field in expand if field not in RELATIONS[kind]]
    if unknown:
        raise InvalidRequestError(f"Cannot expand {', '.join(unknown)} on {kind.value}")
    return expand


# ---------------- Wire serialization ----------------

async def entity_to_wire(kind: EntityKind, entity: Any, store: EntityStore, expand: Optional[list[str]] = None) -> Optional[dict]:
    """Alias an entity to wire shape and attach the requested relations."""
    if entity is None:
        return None

    wire = to_wire(kind, entity)
    fields = expand or []
    resolved = await asyncio.gather(*(RELATIONS[kind][field].resolve(entity, store) for field in fields))
    for field, value in zip(fields, resolved):
        related_kind = RELATIONS[kind][field].kind
        if isinstance(value, list):
            wire[field] = [to_wire(related_kind, item) for item in value]
        else:
            wire[field] = to_wire(related_kind, value) if value is not None else None
    return wire


async def entities_to_wire(kind: EntityKind, entities: list, store: EntityStore, expand: Optional[list[str]] = None) -> list[dict]:
    return list(await asyncio.gather(*(entity_to_wire(kind, entity, store, expand) for entity in entities)))


# ---------------- Resolvers ----------------

def _list_resolver(kind: EntityKind):
    async def resolve(variables: dict, store: EntityStore) -> list[dict]:
        expand = _expand_fields(variables, kind)
        entities = await store.collection(kind).find()
        return await entities_to_wire(kind, entities, store, expand)
    return resolve


def _get_resolver(kind: EntityKind):
    async def resolve(variables: dict, store: EntityStore) -> Optional[dict]:
        expand = _expand_fields(variables, kind)
        entity = await store.collection(kind).find_by_id(_require(variables, "id"))
        return await entity_to_wire(kind, entity, store, expand)
    return resolve


def _create_resolver(kind: EntityKind, input_model: type[BaseModel], create: Callable):
    async def resolve(variables: dict, store: EntityStore) -> dict:
        expand = _expand_fields(variables, kind)
        created = await create(_parse_input(input_model, variables), store=store)
        return await entity_to_wire(kind, created, store, expand)
    return resolve


async def _agent_insights(variables: dict, store: EntityStore) -> list[dict]:
    """Raw agent records in storage naming."""
    agents = await store.agents.find()
    return [agent.model_dump(mode="json", exclude={"id"}) for agent in agents]


async def _estate_value(variables: dict, store: EntityStore) -> dict:
    value = await insight_engine.estimate_value(_require(variables, "propertyId"), store=store)
    return value.model_dump(mode="json")


async def _tax_info(variables: dict, store: EntityStore) -> Optional[dict]:
    info = await insight_engine.tax_info(_require(variables, "propertyId"), store=store)
    return info.model_dump(mode="json") if info else None


async def _property_insight(variables: dict, store: EntityStore) -> dict:
    expand = _expand_fields(variables, EntityKind.PROPERTY)
    insight = await insight_engine.property_insight(_require(variables, "propertyId"), store=store)
    return {
        "propertyDetails": await entity_to_wire(EntityKind.PROPERTY, insight.propertyDetails, store, expand),
        "marketValue": insight.marketValue.model_dump(mode="json"),
        "taxEstimate": insight.taxEstimate.model_dump(mode="json") if insight.taxEstimate else None,
    }


async def _map_overview(variables: dict, store: EntityStore) -> dict:
    """Everything the map view needs, fetched concurrently."""
    properties, zones, agents = await asyncio.gather(
        store.properties.find(),
        store.neighborhoods.find(),
        store.agents.find(),
    )
    return {
        "listedProperties": [to_wire(EntityKind.PROPERTY, prop) for prop in properties],
        "geoZones": [to_wire(EntityKind.NEIGHBORHOOD, zone) for zone in zones],
        "agentProfiles": [to_wire(EntityKind.AGENT, agent) for agent in agents],
    }


class Operation(NamedTuple):
    kind: str
    resolve: Callable[[dict, EntityStore], Awaitable[Any]]


OPERATIONS: dict[str, Operation] = {
    # Entity queries
    "listedProperties": Operation(QUERY, _list_resolver(EntityKind.PROPERTY)),
    "listedProperty": Operation(QUERY, _get_resolver(EntityKind.PROPERTY)),
    "agentProfiles": Operation(QUERY, _list_resolver(EntityKind.AGENT)),
    "agentInsightz": Operation(QUERY, _agent_insights),
    "agentProfile": Operation(QUERY, _get_resolver(EntityKind.AGENT)),
    "geoZones": Operation(QUERY, _list_resolver(EntityKind.NEIGHBORHOOD)),
    "geoZone": Operation(QUERY, _get_resolver(EntityKind.NEIGHBORHOOD)),
    "propertyTransactions": Operation(QUERY, _list_resolver(EntityKind.TRANSACTION)),
    "propertyTransaction": Operation(QUERY, _get_resolver(EntityKind.TRANSACTION)),
    "mapOverview": Operation(QUERY, _map_overview),
    # Computed queries
    "estateValue": Operation(QUERY, _estate_value),
    "taxInfo": Operation(QUERY, _tax_info),
    "propertyInsight": Operation(QUERY, _property_insight),
    # Mutations
    "addProperty": Operation(MUTATION, _create_resolver(EntityKind.PROPERTY, PropertyInput, write_orchestrator.add_property)),
    "addAgent": Operation(MUTATION, _create_resolver(EntityKind.AGENT, AgentInput, write_orchestrator.add_agent)),
    "addTransaction": Operation(MUTATION, _create_resolver(EntityKind.TRANSACTION, TransactionInput, write_orchestrator.add_transaction)),
    "addNeighborhood": Operation(MUTATION, _create_resolver(EntityKind.NEIGHBORHOOD, NeighborhoodInput, write_orchestrator.add_neighborhood)),
    "addPropertyFromForm": Operation(MUTATION, _create_resolver(EntityKind.PROPERTY, AddPropertyFormInput, write_orchestrator.add_property_from_form)),
}


def list_operations() -> dict[str, list[str]]:
    """Operation names grouped by type."""
    grouped: dict[str, list[str]] = {QUERY: [], MUTATION: []}
    for name, operation in OPERATIONS.items():
        grouped[operation.kind].append(name)
    return grouped


def _format_error(error: Exception, operation_name: str, message: Optional[str] = None) -> dict:
    return {
        "message": message or str(error),
        "path": [operation_name],
        "extensions": {"code": getattr(error, "code", "INTERNAL_SERVER_ERROR")},
    }


async def execute(
    operation_name: str,
    variables: Optional[dict] = None,
    store: Optional[EntityStore] = None,
    timeout: Optional[float] = None,
) -> dict:
    """
    Run one operation and wrap the outcome in a response envelope.

    ``timeout`` (seconds) cancels the pending store calls when it elapses.
    Errors never escape; they are reported in the ``errors`` list.
    """
    operation = OPERATIONS.get(operation_name)
    if operation is None:
        error = InvalidRequestError(f"Unknown operation: {operation_name}")
        logger.warning("Unknown operation requested", operation=operation_name)
        return {"data": None, "errors": [_format_error(error, operation_name)]}

    if variables is not None and not isinstance(variables, dict):
        error = InvalidRequestError("Variables must be an object")
        return {"data": None, "errors": [_format_error(error, operation_name)]}

    store = store or get_entity_store()

    try:
        with log_timing(operation_name, logger=logger, operation_type=operation.kind):
            pending = operation.resolve(variables or {}, store)
            if timeout:
                result = await asyncio.wait_for(pending, timeout)
            else:
                result = await pending
        return {"data": {operation_name: result}}
    except asyncio.TimeoutError:
        error = OperationTimeoutError(f"{operation_name} timed out after {timeout}s")
        logger.warning("Operation timed out", operation=operation_name, timeout_seconds=timeout)
        return {"data": {operation_name: None}, "errors": [_format_error(error, operation_name)]}
    except EstateError as e:
        logger.warning(
            "Operation failed",
            operation=operation_name,
            error=str(e),
            code=e.code,
        )
        return {"data": {operation_name: None}, "errors": [_format_error(e, operation_name)]}
    except Exception as e:
        logger.exception("Unhandled error in operation", operation=operation_name, error=str(e))
        return {
            "data": {operation_name: None},
            "errors": [_format_error(e, operation_name, message="Internal server error")],
        }

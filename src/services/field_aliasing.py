"""Bidirectional field aliasing between wire shape and storage shape.

Each entity kind declares a table of (storage path, wire path) pairs using
dotted paths for nested structures. ``to_wire`` and ``to_storage`` are generic
over those tables, so adding a field means adding one table row.
"""

from enum import Enum
from typing import Any, NamedTuple, Optional, Union

from pydantic import BaseModel


class EntityKind(str, Enum):
    """Record kinds held by the entity store."""
    PROPERTY = "property"
    TRANSACTION = "transaction"
    AGENT = "agent"
    NEIGHBORHOOD = "neighborhood"


class FieldAlias(NamedTuple):
    storage: str
    wire: str


PROPERTY_FIELDS = (
    FieldAlias("id", "_id"),
    FieldAlias("address.street", "locationDetails.streetAddress"),
    FieldAlias("address.city", "locationDetails.cityName"),
    FieldAlias("address.state", "locationDetails.stateName"),
    FieldAlias("address.zip", "locationDetails.postalCode"),
    # "type" is overloaded on the wire, the geo-point exposes it as geoFormat
    FieldAlias("address.loc.type", "locationDetails.geoCoordinates.geoFormat"),
    FieldAlias("address.loc.coordinates", "locationDetails.geoCoordinates.coordinates"),
    FieldAlias("type", "propertyCategory"),
    FieldAlias("bedrooms", "bedroomCount"),
    FieldAlias("bathrooms", "bathroomCount"),
    FieldAlias("yearBuilt", "builtYear"),
    FieldAlias("sqft", "areaSqFt"),
    FieldAlias("lotSize", "lotSizeInSqFt"),
    FieldAlias("ownerAgentId", "ownerAgentId"),
    FieldAlias("neighborhoodId", "geoZoneId"),
)

TRANSACTION_FIELDS = (
    FieldAlias("id", "_id"),
    FieldAlias("propertyId", "propertyId"),
    FieldAlias("saleDate", "saleDate"),
    FieldAlias("salePrice", "salePrice"),
    FieldAlias("buyerId", "buyerId"),
    FieldAlias("sellerId", "sellerId"),
    FieldAlias("type", "transactionType"),
)

AGENT_FIELDS = (
    FieldAlias("id", "_id"),
    FieldAlias("name", "fullName"),
    FieldAlias("phone", "phoneNumber"),
    FieldAlias("email", "emailAddress"),
    FieldAlias("agency", "agencyName"),
)

NEIGHBORHOOD_FIELDS = (
    FieldAlias("id", "_id"),
    FieldAlias("name", "zoneName"),
    FieldAlias("polygon", "boundaryPolygon"),
    FieldAlias("avgSalePrice", "averagePrice"),
    FieldAlias("transactionCount", "totalTransactions"),
)

ALIAS_TABLES: dict[EntityKind, tuple[FieldAlias, ...]] = {
    EntityKind.PROPERTY: PROPERTY_FIELDS,
    EntityKind.TRANSACTION: TRANSACTION_FIELDS,
    EntityKind.AGENT: AGENT_FIELDS,
    EntityKind.NEIGHBORHOOD: NEIGHBORHOOD_FIELDS,
}


def _check_table(kind: EntityKind, table: tuple[FieldAlias, ...]) -> None:
    """Every storage path and every wire path must appear exactly once."""
    for side in ("storage", "wire"):
        paths = [getattr(alias, side) for alias in table]
        duplicates = {path for path in paths if paths.count(path) > 1}
        if duplicates:
            raise ValueError(f"{kind.value} alias table repeats {side} paths: {sorted(duplicates)}")
        # A leaf path may not also be the parent of another path
        for path in paths:
            if any(other.startswith(path + ".") for other in paths):
                raise ValueError(f"{kind.value} alias table uses {side} path {path!r} as both leaf and parent")


for _kind, _table in ALIAS_TABLES.items():
    _check_table(_kind, _table)


def get_path(record: Any, path: str) -> Any:
    """Read a dotted path, yielding None when any segment is missing."""
    value = record
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
        if value is None:
            return None
    return value


def set_path(record: dict, path: str, value: Any) -> None:
    """Write a dotted path, creating intermediate objects as needed."""
    keys = path.split(".")
    target = record
    for key in keys[:-1]:
        nested = target.get(key)
        if not isinstance(nested, dict):
            nested = {}
            target[key] = nested
        target = nested
    target[keys[-1]] = value


def _as_dict(record: Union[BaseModel, dict, None]) -> dict:
    if record is None:
        return {}
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")
    return record


def to_wire(kind: EntityKind, record: Union[BaseModel, dict, None]) -> dict:
    """Translate a storage record to wire shape.

    Every wire path of the table is present in the result; unset storage
    values (including whole missing substructures) surface as None.
    """
    source = _as_dict(record)
    wire: dict = {}
    for alias in ALIAS_TABLES[kind]:
        set_path(wire, alias.wire, get_path(source, alias.storage))
    return wire


def to_storage(kind: EntityKind, wire_record: Optional[dict]) -> dict:
    """Translate a wire record to storage shape.

    Absent or null wire values are left out, so nested storage objects only
    exist when at least one of their fields is set.
    """
    storage: dict = {}
    for alias in ALIAS_TABLES[kind]:
        value = get_path(wire_record or {}, alias.wire)
        if value is not None:
            set_path(storage, alias.storage, value)
    return storage


def wire_fields(kind: EntityKind) -> list[str]:
    """Wire paths declared for an entity kind."""
    return [alias.wire for alias in ALIAS_TABLES[kind]]

"""Relation resolvers - follow weak references between entities.

Unresolved references are tolerated: single lookups yield None, list
lookups yield an empty list.
"""

from typing import Optional

from src.models.agent import Agent
from src.models.neighborhood import Neighborhood
from src.models.property import Property
from src.models.transaction import Transaction
from src.services.entity_store import EntityStore, get_entity_store


async def owner_agent(prop: Property, store: Optional[EntityStore] = None) -> Optional[Agent]:
    store = store or get_entity_store()
    return await store.agents.find_by_id(prop.ownerAgentId)


async def geo_zone(prop: Property, store: Optional[EntityStore] = None) -> Optional[Neighborhood]:
    store = store or get_entity_store()
    return await store.neighborhoods.find_by_id(prop.neighborhoodId)


async def property_transactions(prop: Property, store: Optional[EntityStore] = None) -> list[Transaction]:
    store = store or get_entity_store()
    return await store.transactions.find({"propertyId": prop.id})


async def managed_properties(agent: Agent, store: Optional[EntityStore] = None) -> list[Property]:
    store = store or get_entity_store()
    return await store.properties.find({"ownerAgentId": agent.id})


async def related_property(txn: Transaction, store: Optional[EntityStore] = None) -> Optional[Property]:
    store = store or get_entity_store()
    return await store.properties.find_by_id(txn.propertyId)


async def buyer(txn: Transaction, store: Optional[EntityStore] = None) -> Optional[Agent]:
    store = store or get_entity_store()
    return await store.agents.find_by_id(txn.buyerId)


async def seller(txn: Transaction, store: Optional[EntityStore] = None) -> Optional[Agent]:
    store = store or get_entity_store()
    return await store.agents.find_by_id(txn.sellerId)


async def properties_in_zone(zone: Neighborhood, store: Optional[EntityStore] = None) -> list[Property]:
    store = store or get_entity_store()
    return await store.properties.find({"neighborhoodId": zone.id})

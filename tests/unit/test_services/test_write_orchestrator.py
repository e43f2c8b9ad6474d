"""Tests for single and compound entity creation."""

import asyncio
from datetime import datetime, timezone

import pytest
from freezegun import freeze_time

from src.models.inputs import (
    AddPropertyFormInput,
    AgentInput,
    NeighborhoodInput,
    PropertyInput,
    TransactionInput,
)
from src.services.write_orchestrator import (
    add_agent,
    add_neighborhood,
    add_property,
    add_property_from_form,
    add_transaction,
)
from src.utils.errors import StoreError
from tests.utils.factories import create_neighborhood_data


# ---------------- direct creates ----------------

@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_property_aliases_input(store, sample_property_input):
    prop = await add_property(PropertyInput.model_validate(sample_property_input), store=store)

    assert len(prop.id) == 26
    assert prop.address.street == "400 Elm Ave"
    assert prop.address.zip == "62701"
    assert prop.address.loc.type == "Point"
    assert prop.address.loc.coordinates == [-89.65, 39.78]
    assert prop.type == "condo"
    assert prop.bathrooms == 1.5
    assert prop.yearBuilt == 2008
    assert prop.sqft == 1100
    assert store.properties.rows[0]["id"] == prop.id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_property_without_coordinates_has_no_geo_point(store, sample_property_input):
    del sample_property_input["locationDetails"]["coordinates"]

    prop = await add_property(PropertyInput.model_validate(sample_property_input), store=store)

    assert prop.address.loc is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_property_with_zone_and_owner_references(store, sample_property_input):
    sample_property_input["geoZoneId"] = "zone-1"
    sample_property_input["ownerAgentId"] = "agent-1"

    prop = await add_property(PropertyInput.model_validate(sample_property_input), store=store)

    assert prop.neighborhoodId == "zone-1"
    assert prop.ownerAgentId == "agent-1"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_agent(store):
    agent = await add_agent(AgentInput(fullName="Dana Reyes", agencyName="Prairie Homes"), store=store)

    assert agent.name == "Dana Reyes"
    assert agent.agency == "Prairie Homes"
    assert agent.phone is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_transaction(store):
    txn = await add_transaction(TransactionInput(
        propertyId="p1",
        saleDate=datetime(2024, 3, 1, tzinfo=timezone.utc),
        salePrice=410000.0,
        sellerId="a1",
        transactionType="resale",
    ), store=store)

    assert txn.type == "resale"
    assert txn.saleDate == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert txn.buyerId is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_neighborhood(store):
    zone = await add_neighborhood(NeighborhoodInput(
        zoneName="Old Town",
        boundaryPolygon={"type": "Polygon", "coordinates": []},
        averagePrice=215.0,
        totalTransactions=12,
    ), store=store)

    assert zone.name == "Old Town"
    assert zone.polygon == {"type": "Polygon", "coordinates": []}
    assert zone.avgSalePrice == 215.0
    assert zone.transactionCount == 12


# ---------------- add_property_from_form ----------------

@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_creates_agent_zone_property_and_purchase(store, sample_form_input):
    with freeze_time("2024-12-09 12:00:00"):
        prop = await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    assert len(store.agents.rows) == 1
    assert len(store.neighborhoods.rows) == 1
    assert len(store.properties.rows) == 1
    assert len(store.transactions.rows) == 1

    agent = await store.agents.get(prop.ownerAgentId)
    assert agent.name == "Dana Reyes"
    assert agent.email == "dana@example.com"

    zone = await store.neighborhoods.get(prop.neighborhoodId)
    assert zone.name == "Old Town"
    assert zone.avgSalePrice == 350000.0
    assert zone.transactionCount == 1

    assert prop.address.street == "12 Main St"
    assert prop.address.city == "Springfield"
    assert prop.address.state == "IL"
    assert prop.address.zip == "62704"
    assert prop.address.loc is None
    assert prop.type == "house"
    assert prop.bedrooms == 3
    assert prop.bathrooms == 2.5
    assert prop.yearBuilt == 1995
    assert prop.sqft == 1800
    assert prop.lotSize == 0

    txn = (await store.transactions.find({"propertyId": prop.id}))[0]
    assert txn.type == "purchase"
    assert txn.salePrice == 350000.0
    assert txn.buyerId == agent.id
    assert txn.sellerId is None
    assert txn.saleDate == datetime(2024, 12, 9, 12, 0, tzinfo=timezone.utc)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_reuses_existing_neighborhood(store, sample_form_input):
    existing = store.neighborhoods.seed(create_neighborhood_data(name="Old Town", avg_sale_price=180.0))

    prop = await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    assert prop.neighborhoodId == existing["id"]
    assert len(store.neighborhoods.rows) == 1
    assert store.neighborhoods.rows[0]["avgSalePrice"] == 180.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_creates_agent_every_time(store, sample_form_input):
    """Agents from forms are never deduplicated."""
    form = AddPropertyFormInput.model_validate(sample_form_input)

    first = await add_property_from_form(form, store=store)
    second = await add_property_from_form(form, store=store)

    assert len(store.agents.rows) == 2
    assert first.ownerAgentId != second.ownerAgentId


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_without_agent_or_neighborhood(store, sample_form_input):
    for key in ("agentName", "agentPhone", "agentEmail", "agentAgency", "neighborhoodName"):
        sample_form_input.pop(key)

    prop = await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    assert prop.ownerAgentId is None
    assert prop.neighborhoodId is None
    assert store.agents.rows == []
    assert store.neighborhoods.rows == []
    txn = store.transactions.rows[0]
    assert txn["buyerId"] is None
    assert txn["sellerId"] is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_non_numeric_fields_default_to_zero(store, sample_form_input):
    sample_form_input.update({
        "bedrooms": "abc",
        "bathrooms": "two",
        "squareFeet": "",
        "yearBuilt": "unknown",
    })

    prop = await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    assert prop.bedrooms == 0
    assert prop.bathrooms == 0.0
    assert prop.sqft == 0
    assert prop.yearBuilt == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_unparsable_price_seeds_zero_average(store, sample_form_input):
    sample_form_input["purchasePrice"] = "call for price"

    prop = await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    zone = await store.neighborhoods.get(prop.neighborhoodId)
    assert zone.avgSalePrice == 0
    assert store.transactions.rows[0]["salePrice"] == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_overflowing_price_is_stored_as_zero(store, sample_form_input):
    sample_form_input["purchasePrice"] = "1e999"

    prop = await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    zone = await store.neighborhoods.get(prop.neighborhoodId)
    assert zone.avgSalePrice == 0
    assert store.transactions.rows[0]["salePrice"] == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_blank_price_skips_transaction(store, sample_form_input):
    sample_form_input["purchasePrice"] = "  "

    await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    assert store.transactions.rows == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_form_partial_creation_is_not_rolled_back(store, sample_form_input):
    """If the property insert fails, the agent and zone already created remain."""
    store.properties.fail_inserts = True

    with pytest.raises(StoreError):
        await add_property_from_form(AddPropertyFormInput.model_validate(sample_form_input), store=store)

    assert len(store.agents.rows) == 1
    assert len(store.neighborhoods.rows) == 1
    assert store.properties.rows == []
    assert store.transactions.rows == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_forms_may_duplicate_new_neighborhood(store, sample_form_input):
    """
    Neighborhood reuse is best-effort only.

    Two concurrent forms naming the same new zone can both miss the lookup and
    each create the zone; this is an accepted limitation, not strict dedup.
    """
    form = AddPropertyFormInput.model_validate(sample_form_input)

    first, second = await asyncio.gather(
        add_property_from_form(form, store=store),
        add_property_from_form(form, store=store),
    )

    zones = await store.neighborhoods.find({"name": "Old Town"})
    assert 1 <= len(zones) <= 2
    zone_ids = {zone.id for zone in zones}
    assert first.neighborhoodId in zone_ids
    assert second.neighborhoodId in zone_ids

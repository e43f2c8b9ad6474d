"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import Mock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("STORE_CONNECT_RETRY_DELAY_SECONDS", "0")

from src.services.entity_store import EntityStore, set_entity_store
from tests.utils.fakes import InMemoryCollection


@pytest.fixture
def store():
    """Entity store backed by in-memory collections."""
    return EntityStore(collection_class=InMemoryCollection)


@pytest.fixture
def global_store(store):
    """Install the in-memory store as the process-wide singleton."""
    set_entity_store(store)
    yield store
    set_entity_store(None)


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for testing."""
    client = Mock()
    client.table = Mock(return_value=Mock())
    return client


@pytest.fixture
def sample_form_input():
    """Form submission as sent by the add-property page."""
    return {
        "address": "12 Main St, Springfield, IL 62704",
        "propertyType": "house",
        "bedrooms": "3",
        "bathrooms": "2.5",
        "squareFeet": "1800",
        "yearBuilt": "1995",
        "purchasePrice": "350000",
        "description": "Corner lot",
        "amenities": ["garage"],
        "agentName": "Dana Reyes",
        "agentPhone": "555-867-5309",
        "agentEmail": "dana@example.com",
        "agentAgency": "Prairie Homes",
        "neighborhoodName": "Old Town",
    }


@pytest.fixture
def sample_property_input():
    """Fully populated property input in wire shape."""
    return {
        "locationDetails": {
            "streetAddress": "400 Elm Ave",
            "cityName": "Springfield",
            "stateName": "IL",
            "postalCode": "62701",
            "coordinates": [-89.65, 39.78],
        },
        "propertyCategory": "condo",
        "bedroomCount": 2,
        "bathroomCount": 1.5,
        "builtYear": 2008,
        "areaSqFt": 1100,
        "lotSizeInSqFt": 0,
    }


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time

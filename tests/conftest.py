"""
Pytest configuration and shared fixtures for the mock API test suite.
"""

import pytest
from fastapi.testclient import TestClient

from slant3d_mock.core.config import Settings
from slant3d_mock.domain.store import EntityStore
from slant3d_mock.main import create_app


API_KEY = "sl-test-key"


@pytest.fixture
def settings():
    """Settings with no slicing delay and random order ids (the default)."""
    return Settings(
        SLICER_MIN_DELAY_MS=0,
        SLICER_MAX_DELAY_MS=0,
        WEBHOOK_TEST_TIMEOUT=2.0,
        _env_file=None,
    )


@pytest.fixture
def store():
    """A fresh entity store."""
    return EntityStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    """TestClient with startup/shutdown run, so the outbound HTTP client exists."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"api-key": API_KEY}


@pytest.fixture
def order_item():
    """Factory for a complete, valid order item; keyword overrides replace fields."""
    def _make(**overrides):
        item = {
            "email": "jane@example.com",
            "phone": "555-0100",
            "name": "Jane Q Doe",
            "orderNumber": "WEB-1001",
            "filename": "bracket.stl",
            "fileURL": "https://files.example.com/bracket.stl",
            "bill_to_street_1": "1 Market St",
            "bill_to_street_2": "Suite 200",
            "bill_to_city": "San Francisco",
            "bill_to_state": "CA",
            "bill_to_zip": "94105",
            "bill_to_country_as_iso": "US",
            "bill_to_is_US_residential": "false",
            "ship_to_name": "Jane Doe",
            "ship_to_street_1": "500 Howard St",
            "ship_to_city": "San Francisco",
            "ship_to_state": "CA",
            "ship_to_zip": "94107",
            "ship_to_country_as_iso": "US",
            "ship_to_is_US_residential": "true",
            "order_item_name": "Bracket",
            "order_quantity": "4",
            "order_item_color": "black",
            "profile": "PLA",
        }
        item.update(overrides)
        return item
    return _make

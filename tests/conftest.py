"""Pytest configuration and fixtures for tests."""
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment variables BEFORE any imports
os.environ["OPENAI_API_KEY"] = "test-key-for-ci"
os.environ["LLM_PROVIDER"] = "openai"
os.environ["LANGFUSE_ENABLED"] = "false"
os.environ["LOG_FILE"] = ""
os.environ["BASKET_API_URL"] = "http://basket.test"
os.environ["CATALOG_API_URL"] = "http://catalog.test"
os.environ["ORDERING_API_URL"] = "http://ordering.test"

import pytest
from unittest.mock import MagicMock, AsyncMock

from storefront.analytics.telemetry import TelemetryClient
from storefront.basket.state import BasketState
from storefront.services.identity import AuthenticationContext
from storefront.services.schemas import BasketQuantity, CatalogItem


CATALOG = {
    5: CatalogItem(id=5, name="Alpine Fleece Jacket", price=120.0),
    7: CatalogItem(id=7, name="Trekking Poles", price=45.5),
    9: CatalogItem(id=9, name="Wool Hiking Socks", price=12.0),
}


class FakeBasketService:
    """In-memory stand-in for the remote basket service that records calls."""

    def __init__(self, lines=None):
        self.lines = list(lines or [])
        self.get_basket = AsyncMock(side_effect=self._get)
        self.update_basket = AsyncMock(side_effect=self._update)
        self.delete_basket = AsyncMock(side_effect=self._delete)

    async def _get(self):
        return list(self.lines)

    async def _update(self, items):
        self.lines = list(items)

    async def _delete(self):
        self.lines = []


@pytest.fixture
def signed_in_user():
    return AuthenticationContext(
        claims={
            "sub": "buyer-123",
            "name": "Alice",
            "last_name": "Walker",
            "address_city": "Redmond",
            "email": "alice@example.com",
            "role": "admin",
        },
        access_token="token-abc",
    )


@pytest.fixture
def anonymous_user():
    return AuthenticationContext.anonymous()


@pytest.fixture
def telemetry():
    return TelemetryClient(enabled=False)


@pytest.fixture
def basket_service():
    return FakeBasketService()


@pytest.fixture
def catalog_service():
    mock = MagicMock()

    async def get_items_by_ids(ids):
        return [CATALOG[i] for i in ids if i in CATALOG]

    async def get_item(item_id):
        return CATALOG.get(item_id)

    mock.get_items_by_ids = AsyncMock(side_effect=get_items_by_ids)
    mock.get_item = AsyncMock(side_effect=get_item)
    mock.search_by_text = AsyncMock()
    return mock


@pytest.fixture
def ordering_service():
    mock = MagicMock()
    mock.create_order = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def make_basket_state(basket_service, catalog_service, ordering_service, telemetry):
    """Build a BasketState over the fakes for a given user."""

    def factory(auth_context, lines=None):
        if lines is not None:
            basket_service.lines = list(lines)
        return BasketState(
            basket_service=basket_service,
            catalog_service=catalog_service,
            ordering_service=ordering_service,
            auth_context=auth_context,
            telemetry=telemetry,
        )

    return factory


@pytest.fixture
def direct_line():
    return BasketQuantity(product_id=5, quantity=1, ai_influenced="direct")

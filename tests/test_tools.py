"""Tests for the assistant's tool registry and tools."""
import json

import httpx
import pytest
from unittest.mock import AsyncMock

from storefront.mcp.tools import create_tool_registry
from storefront.mcp.tools.cart_tools import (
    ADD_FAILED_MESSAGE,
    CART_CONTENTS_FAILED_MESSAGE,
    ITEM_ADDED_MESSAGE,
    LOGIN_REQUIRED_MESSAGE,
)
from storefront.mcp.tools.catalog_tools import CATALOG_ERROR_MESSAGE
from storefront.services.catalog_service import ProductImageUrlProvider
from storefront.services.errors import ServiceError, UnauthenticatedError
from storefront.services.schemas import BasketQuantity, CatalogItem, CatalogPage


@pytest.fixture
def registry_for(make_basket_state, catalog_service, telemetry):
    def factory(auth_context, lines=None):
        basket_state = make_basket_state(auth_context, lines or [])
        registry = create_tool_registry(
            catalog_service=catalog_service,
            basket_state=basket_state,
            auth_context=auth_context,
            image_urls=ProductImageUrlProvider("http://images.test"),
            telemetry=telemetry,
        )
        return registry, basket_state

    return factory


class TestRegistry:
    """Dispatch and argument validation."""

    def test_tools_are_registered_with_schemas(self, registry_for, signed_in_user):
        registry, _ = registry_for(signed_in_user)

        names = {schema["name"] for schema in registry.list_tools()}
        assert names == {"get_user_info", "search_catalog", "add_to_cart", "get_cart_contents"}
        add_schema = registry.get_tool("add_to_cart").get_parameters()
        assert add_schema["properties"]["item_id"]["type"] == "integer"
        assert add_schema["required"] == ["item_id"]

    @pytest.mark.asyncio
    async def test_unknown_tool_returns_message(self, registry_for, signed_in_user):
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("delete_everything", {})

        assert result == "Unknown tool: delete_everything."

    @pytest.mark.asyncio
    async def test_invalid_arguments_rejected_before_handler(self, registry_for, signed_in_user, catalog_service):
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("add_to_cart", {"item_id": "not-a-number"})

        assert result.startswith("Invalid arguments for add_to_cart")
        catalog_service.get_item.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_required_argument_rejected(self, registry_for, signed_in_user, catalog_service):
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("search_catalog", {})

        assert result.startswith("Invalid arguments for search_catalog")
        catalog_service.search_by_text.assert_not_called()

    def test_langchain_tools_mirror_registry(self, registry_for, signed_in_user):
        registry, _ = registry_for(signed_in_user)

        tools = registry.as_langchain_tools()

        assert sorted(tool.name for tool in tools) == sorted(registry.tools)


class TestUserInfoTool:
    @pytest.mark.asyncio
    async def test_returns_allow_listed_profile_only(self, registry_for, signed_in_user, telemetry):
        registry, _ = registry_for(signed_in_user)

        profile = json.loads(await registry.invoke("get_user_info"))

        assert profile["Name"] == "Alice"
        assert profile["LastName"] == "Walker"
        assert profile["City"] == "Redmond"
        assert profile["PhoneNumber"] == ""
        assert "role" not in profile
        assert "sub" not in profile
        assert telemetry.get_recent_events(1)[0]["name"] == "aiFunc_GetUserInfo"


class TestSearchCatalogTool:
    @pytest.mark.asyncio
    async def test_search_resolves_image_urls(self, registry_for, signed_in_user, catalog_service):
        catalog_service.search_by_text.return_value = CatalogPage(
            page_index=0,
            page_size=8,
            count=1,
            data=[CatalogItem(id=5, name="Alpine Fleece Jacket", price=120.0, picture_url="5.webp")],
        )
        registry, _ = registry_for(signed_in_user)

        result = json.loads(await registry.invoke("search_catalog", {"product_description": "warm jacket"}))

        catalog_service.search_by_text.assert_awaited_once_with(0, 8, "warm jacket")
        assert result["data"][0]["pictureUrl"] == "http://images.test/api/catalog/items/5/pic"
        assert result["data"][0]["name"] == "Alpine Fleece Jacket"

    @pytest.mark.asyncio
    async def test_search_returns_at_most_eight(self, registry_for, signed_in_user, catalog_service):
        catalog_service.search_by_text.return_value = CatalogPage(
            count=12,
            data=[CatalogItem(id=i, name=f"Item {i}", price=1.0) for i in range(12)],
        )
        registry, _ = registry_for(signed_in_user)

        result = json.loads(await registry.invoke("search_catalog", {"product_description": "gear"}))

        assert len(result["data"]) == 8

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [httpx.ConnectError("refused"), ServiceError("catalog", "boom", 500)],
    )
    async def test_catalog_failure_returns_error_text(self, registry_for, signed_in_user, catalog_service, error):
        catalog_service.search_by_text.side_effect = error
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("search_catalog", {"product_description": "tent"})

        assert result == CATALOG_ERROR_MESSAGE


class TestCartTools:
    @pytest.mark.asyncio
    async def test_add_to_cart_tags_line_as_direct(self, registry_for, signed_in_user, basket_service, telemetry):
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("add_to_cart", {"item_id": 7})

        assert result == ITEM_ADDED_MESSAGE
        assert basket_service.lines == [BasketQuantity(product_id=7, quantity=1, ai_influenced="direct")]
        assert telemetry.get_recent_events(1)[0]["name"] == "aiFunc_AddToCart"

    @pytest.mark.asyncio
    async def test_add_to_cart_unauthenticated_message(self, registry_for, anonymous_user, basket_service):
        basket_service.get_basket.side_effect = UnauthenticatedError("basket")
        registry, _ = registry_for(anonymous_user)

        result = await registry.invoke("add_to_cart", {"item_id": 7})

        assert result == LOGIN_REQUIRED_MESSAGE

    @pytest.mark.asyncio
    async def test_add_to_cart_unknown_product(self, registry_for, signed_in_user, basket_service):
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("add_to_cart", {"item_id": 12345})

        assert result == ADD_FAILED_MESSAGE
        basket_service.update_basket.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_to_cart_remote_failure(self, registry_for, signed_in_user, basket_service):
        basket_service.update_basket.side_effect = ServiceError("basket", "unavailable", 503)
        registry, _ = registry_for(signed_in_user)

        result = await registry.invoke("add_to_cart", {"item_id": 7})

        assert result == ADD_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_get_cart_contents(self, registry_for, signed_in_user):
        registry, _ = registry_for(
            signed_in_user, [BasketQuantity(product_id=9, quantity=2, ai_influenced="none")]
        )

        contents = json.loads(await registry.invoke("get_cart_contents"))

        assert contents[0]["productName"] == "Wool Hiking Socks"
        assert contents[0]["quantity"] == 2

    @pytest.mark.asyncio
    async def test_get_cart_contents_failure(self, registry_for, signed_in_user, basket_service):
        basket_service.get_basket.side_effect = ServiceError("basket", "down", 503)
        registry, _ = registry_for(signed_in_user)

        assert await registry.invoke("get_cart_contents") == CART_CONTENTS_FAILED_MESSAGE

"""Tests for the httpx-based storefront service clients."""
import json
import uuid
from datetime import datetime

import httpx
import pytest
from unittest.mock import patch

from storefront.services.basket_service import BasketService
from storefront.services.catalog_service import CatalogService
from storefront.services.errors import ServiceError, UnauthenticatedError
from storefront.services.ordering_service import OrderingService
from storefront.services.schemas import BasketQuantity, CreateOrderRequest

_RealAsyncClient = httpx.AsyncClient


@pytest.fixture
def transport():
    """Route every client created by the services through a recording MockTransport."""
    state = {"requests": [], "handler": lambda request: httpx.Response(200, json={})}

    def handler(request):
        state["requests"].append(request)
        return state["handler"](request)

    def client_factory(*args, **kwargs):
        return _RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)

    with patch("storefront.services.base.httpx.AsyncClient", side_effect=client_factory):
        yield state


@pytest.mark.asyncio
async def test_get_basket_parses_lines_and_forwards_token(transport):
    transport["handler"] = lambda request: httpx.Response(
        200, json={"items": [{"productId": 5, "quantity": 2, "aiInfluenced": "direct"}]}
    )

    lines = await BasketService(access_token="token-abc", base_url="http://basket.test").get_basket()

    assert lines == [BasketQuantity(product_id=5, quantity=2, ai_influenced="direct")]
    request = transport["requests"][0]
    assert request.url == "http://basket.test/api/basket"
    assert request.headers["Authorization"] == "Bearer token-abc"


@pytest.mark.asyncio
async def test_update_basket_sends_camel_case(transport):
    await BasketService(base_url="http://basket.test").update_basket(
        [BasketQuantity(product_id=7, quantity=3, ai_influenced="none")]
    )

    request = transport["requests"][0]
    assert request.method == "PUT"
    assert json.loads(request.content) == {
        "items": [{"productId": 7, "quantity": 3, "aiInfluenced": "none"}]
    }
    assert "Authorization" not in request.headers


@pytest.mark.asyncio
async def test_401_raises_unauthenticated(transport):
    transport["handler"] = lambda request: httpx.Response(401)

    with pytest.raises(UnauthenticatedError):
        await BasketService(base_url="http://basket.test").get_basket()


@pytest.mark.asyncio
async def test_server_error_raises_service_error(transport):
    transport["handler"] = lambda request: httpx.Response(503)

    with pytest.raises(ServiceError) as exc_info:
        await BasketService(base_url="http://basket.test").delete_basket()

    assert exc_info.value.status_code == 503
    assert not isinstance(exc_info.value, UnauthenticatedError)


@pytest.mark.asyncio
async def test_get_items_by_ids_batches_ids(transport):
    transport["handler"] = lambda request: httpx.Response(
        200,
        json=[
            {"id": 5, "name": "Alpine Fleece Jacket", "price": 120.0},
            {"id": 7, "name": "Trekking Poles", "price": 45.5},
        ],
    )

    items = await CatalogService(base_url="http://catalog.test").get_items_by_ids([5, 7])

    assert [item.id for item in items] == [5, 7]
    assert len(transport["requests"]) == 1
    assert transport["requests"][0].url.params.get_list("ids") == ["5", "7"]


@pytest.mark.asyncio
async def test_get_items_by_ids_empty_makes_no_call(transport):
    assert await CatalogService(base_url="http://catalog.test").get_items_by_ids([]) == []
    assert transport["requests"] == []


@pytest.mark.asyncio
async def test_get_item_not_found_returns_none(transport):
    transport["handler"] = lambda request: httpx.Response(404)

    assert await CatalogService(base_url="http://catalog.test").get_item(42) is None


@pytest.mark.asyncio
async def test_search_by_text_sends_paging(transport):
    transport["handler"] = lambda request: httpx.Response(
        200,
        json={"pageIndex": 0, "pageSize": 8, "count": 1, "data": [{"id": 9, "name": "Socks", "price": 12.0}]},
    )

    page = await CatalogService(base_url="http://catalog.test").search_by_text(0, 8, "warm socks")

    assert page.count == 1
    assert page.data[0].name == "Socks"
    params = transport["requests"][0].url.params
    assert params["text"] == "warm socks"
    assert params["pageSize"] == "8"


@pytest.mark.asyncio
async def test_create_order_sends_request_id_header(transport):
    request_id = uuid.uuid4()
    order = CreateOrderRequest(
        user_id="buyer-123",
        user_name="Alice",
        city="Redmond",
        street="1 Summit Way",
        state="WA",
        country="USA",
        zip_code="98052",
        card_number="4012888888881881",
        card_holder_name="Alice Walker",
        card_expiration=datetime(2030, 1, 1),
        card_security_number="123",
        card_type_id=1,
        buyer="buyer-123",
        items=[],
    )

    await OrderingService(base_url="http://ordering.test").create_order(order, request_id)

    request = transport["requests"][0]
    assert request.method == "POST"
    assert request.headers["x-requestid"] == str(request_id)
    body = json.loads(request.content)
    assert body["userId"] == "buyer-123"
    assert body["zipCode"] == "98052"

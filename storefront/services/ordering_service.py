"""Client for the remote ordering service."""

from typing import Optional
from uuid import UUID

from storefront.services.base import StorefrontServiceClient
from storefront.services.schemas import CreateOrderRequest
from storefront.utils.config import settings


class OrderingService(StorefrontServiceClient):
    service_name = "ordering"

    def __init__(self, access_token: Optional[str] = None, base_url: Optional[str] = None):
        super().__init__(base_url or settings.ordering_api_url, access_token=access_token)

    async def create_order(self, request: CreateOrderRequest, request_id: UUID) -> None:
        """Submit an order. ``request_id`` is the idempotency key."""
        await self._request(
            "POST",
            "/api/orders",
            headers={"x-requestid": str(request_id)},
            json=request.to_wire(),
        )

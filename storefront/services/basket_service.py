"""Client for the remote basket service."""

from typing import List, Optional

from storefront.services.base import StorefrontServiceClient
from storefront.services.schemas import BasketQuantity
from storefront.utils.config import settings


class BasketService(StorefrontServiceClient):
    """Read, replace and delete the signed-in user's basket."""

    service_name = "basket"

    def __init__(self, access_token: Optional[str] = None, base_url: Optional[str] = None):
        super().__init__(base_url or settings.basket_api_url, access_token=access_token)

    async def get_basket(self) -> List[BasketQuantity]:
        response = await self._request("GET", "/api/basket")
        data = response.json() or {}
        return [BasketQuantity.model_validate(row) for row in data.get("items", [])]

    async def update_basket(self, items: List[BasketQuantity]) -> None:
        await self._request(
            "PUT", "/api/basket", json={"items": [item.to_wire() for item in items]}
        )

    async def delete_basket(self) -> None:
        await self._request("DELETE", "/api/basket")

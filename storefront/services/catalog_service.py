"""Client for the remote catalog service."""

from typing import Iterable, List, Optional

from storefront.services.base import StorefrontServiceClient
from storefront.services.errors import ServiceError
from storefront.services.schemas import CatalogItem, CatalogPage
from storefront.utils.config import settings


class CatalogService(StorefrontServiceClient):
    """Look up catalog items by id and search them by description."""

    service_name = "catalog"

    def __init__(self, access_token: Optional[str] = None, base_url: Optional[str] = None):
        super().__init__(base_url or settings.catalog_api_url, access_token=access_token)

    async def get_items_by_ids(self, ids: Iterable[int]) -> List[CatalogItem]:
        """Batch-fetch catalog items. Unknown ids are simply absent from the result."""
        ids = list(ids)
        if not ids:
            return []
        response = await self._request("GET", "/api/catalog/items/by", params={"ids": ids})
        return [CatalogItem.model_validate(row) for row in response.json()]

    async def get_item(self, item_id: int) -> Optional[CatalogItem]:
        try:
            response = await self._request("GET", f"/api/catalog/items/{item_id}")
        except ServiceError as e:
            if e.status_code == 404:
                return None
            raise
        return CatalogItem.model_validate(response.json())

    async def search_by_text(self, skip: int, take: int, text: str) -> CatalogPage:
        """Semantic-relevance search; ``skip`` is a page index, ``take`` the page size."""
        response = await self._request(
            "GET",
            "/api/catalog/items/withsemanticrelevance",
            params={"text": text, "pageIndex": skip, "pageSize": take},
        )
        return CatalogPage.model_validate(response.json())


class ProductImageUrlProvider:
    """Resolve the public image URL of a catalog item."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.catalog_api_url).rstrip("/")

    def get_product_image_url(self, product_id: int) -> str:
        return f"{self.base_url}/api/catalog/items/{product_id}/pic"

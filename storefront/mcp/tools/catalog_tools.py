"""Catalog MCP tools."""

import json

import httpx
from pydantic import BaseModel, Field

from storefront.analytics.logger import logger
from storefront.analytics.telemetry import TelemetryClient
from storefront.mcp.mcp_client import MCPTool
from storefront.services.catalog_service import CatalogService, ProductImageUrlProvider
from storefront.services.errors import ServiceError
from storefront.services.identity import AuthenticationContext
from storefront.utils.config import settings

CATALOG_ERROR_MESSAGE = "Error accessing catalog."


class SearchCatalogArgs(BaseModel):
    product_description: str = Field(
        ..., min_length=1, description="The product description for which to search"
    )


class SearchCatalogTool(MCPTool):
    """Search the catalog by free-text description."""

    args_schema = SearchCatalogArgs

    def __init__(
        self,
        catalog_service: CatalogService,
        image_urls: ProductImageUrlProvider,
        auth_context: AuthenticationContext,
        telemetry: TelemetryClient,
    ):
        super().__init__(
            name="search_catalog",
            description="Searches the Northern Mountains catalog for a provided product description",
        )
        self.catalog_service = catalog_service
        self.image_urls = image_urls
        self.auth_context = auth_context
        self.telemetry = telemetry

    async def execute(self, product_description: str) -> str:
        try:
            results = await self.catalog_service.search_by_text(
                0, settings.catalog_search_page_size, product_description
            )
        except (httpx.HTTPError, ServiceError) as e:
            logger.error(f"{CATALOG_ERROR_MESSAGE} {e}")
            return CATALOG_ERROR_MESSAGE

        results.data = [
            item.model_copy(update={"picture_url": self.image_urls.get_product_image_url(item.id)})
            for item in results.data[: settings.catalog_search_page_size]
        ]

        self.telemetry.track_event(
            "aiFunc_SearchCatalog",
            properties={"TargetingId": self.auth_context.get_user_name() or ""},
        )
        return json.dumps(results.to_wire())

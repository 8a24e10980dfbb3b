"""Tools the assistant may call during a completion."""

from storefront.analytics.telemetry import TelemetryClient
from storefront.basket.state import BasketState
from storefront.mcp.mcp_client import MCPToolRegistry
from storefront.mcp.tools.cart_tools import AddToCartTool, GetCartContentsTool
from storefront.mcp.tools.catalog_tools import SearchCatalogTool
from storefront.mcp.tools.user_tools import GetUserInfoTool
from storefront.services.catalog_service import CatalogService, ProductImageUrlProvider
from storefront.services.identity import AuthenticationContext


def create_tool_registry(
    catalog_service: CatalogService,
    basket_state: BasketState,
    auth_context: AuthenticationContext,
    image_urls: ProductImageUrlProvider,
    telemetry: TelemetryClient,
) -> MCPToolRegistry:
    """Build the registry of tools bound to one chat session."""
    registry = MCPToolRegistry()
    registry.register(GetUserInfoTool(auth_context, telemetry))
    registry.register(SearchCatalogTool(catalog_service, image_urls, auth_context, telemetry))
    registry.register(AddToCartTool(catalog_service, basket_state, auth_context, telemetry))
    registry.register(GetCartContentsTool(basket_state, auth_context, telemetry))
    return registry

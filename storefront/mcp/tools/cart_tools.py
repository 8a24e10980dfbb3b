"""Shopping cart MCP tools."""

import json

from pydantic import BaseModel, Field

from storefront.analytics.logger import logger
from storefront.analytics.telemetry import TelemetryClient
from storefront.basket.state import BasketState
from storefront.mcp.mcp_client import MCPTool
from storefront.services.catalog_service import CatalogService
from storefront.services.errors import UnauthenticatedError
from storefront.services.identity import AuthenticationContext
from storefront.services.schemas import AI_INFLUENCE_DIRECT

ITEM_ADDED_MESSAGE = "Item added to shopping cart."
LOGIN_REQUIRED_MESSAGE = "Unable to add an item to the cart. You must be logged in."
ADD_FAILED_MESSAGE = "Unable to add the item to the cart."
CART_CONTENTS_FAILED_MESSAGE = "Unable to get the cart's contents."


class AddToCartArgs(BaseModel):
    item_id: int = Field(..., description="The id of the product to add to the shopping cart (basket)")


class AddToCartTool(MCPTool):
    """Add a catalog item to the user's basket on the assistant's behalf."""

    args_schema = AddToCartArgs

    def __init__(
        self,
        catalog_service: CatalogService,
        basket_state: BasketState,
        auth_context: AuthenticationContext,
        telemetry: TelemetryClient,
    ):
        super().__init__(
            name="add_to_cart",
            description="Adds a product to the user's shopping cart.",
        )
        self.catalog_service = catalog_service
        self.basket_state = basket_state
        self.auth_context = auth_context
        self.telemetry = telemetry

    async def execute(self, item_id: int) -> str:
        try:
            item = await self.catalog_service.get_item(item_id)
            if item is None:
                logger.warning(f"{ADD_FAILED_MESSAGE} Product {item_id} not found")
                return ADD_FAILED_MESSAGE
            await self.basket_state.add(item, AI_INFLUENCE_DIRECT)
        except UnauthenticatedError:
            return LOGIN_REQUIRED_MESSAGE
        except Exception as e:
            logger.error(f"{ADD_FAILED_MESSAGE} {e}", exc_info=True)
            return ADD_FAILED_MESSAGE

        self.telemetry.track_event(
            "aiFunc_AddToCart",
            properties={"TargetingId": self.auth_context.get_user_name() or ""},
        )
        return ITEM_ADDED_MESSAGE


class GetCartContentsTool(MCPTool):
    """Get the user's basket."""

    def __init__(
        self,
        basket_state: BasketState,
        auth_context: AuthenticationContext,
        telemetry: TelemetryClient,
    ):
        super().__init__(
            name="get_cart_contents",
            description="Gets information about the contents of the user's shopping cart (basket)",
        )
        self.basket_state = basket_state
        self.auth_context = auth_context
        self.telemetry = telemetry

    async def execute(self) -> str:
        try:
            basket_items = await self.basket_state.get_basket_items()
        except Exception as e:
            logger.error(f"{CART_CONTENTS_FAILED_MESSAGE} {e}", exc_info=True)
            return CART_CONTENTS_FAILED_MESSAGE

        self.telemetry.track_event(
            "aiFunc_GetCartContents",
            properties={"TargetingId": self.auth_context.get_user_name() or ""},
        )
        return json.dumps([item.to_wire() for item in basket_items])

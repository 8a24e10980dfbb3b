"""Basket state for one storefront session.

``BasketState`` keeps a cached, catalog-joined view of the remote basket,
applies quantity changes on top of it, writes every change through to the
basket service and tells subscribers about it. Every mutating operation
invalidates the cache before writing through, so the next read always goes
back to the remote basket.

Callers are expected to run one mutation at a time per session; nothing here
serializes concurrent mutations.
"""

import asyncio
import inspect
import uuid
from typing import Awaitable, Callable, List, Optional, Union
from uuid import UUID

from storefront.analytics.logger import logger
from storefront.analytics.telemetry import TelemetryClient, telemetry_client
from storefront.basket.cache import BasketCache
from storefront.services.basket_service import BasketService
from storefront.services.catalog_service import CatalogService
from storefront.services.errors import CatalogLookupError, CheckoutStateError
from storefront.services.identity import AuthenticationContext
from storefront.services.ordering_service import OrderingService
from storefront.services.schemas import (
    AI_INFLUENCE_DIRECT,
    BasketCheckoutInfo,
    BasketItem,
    BasketQuantity,
    CatalogItem,
    CreateOrderRequest,
)

ChangeCallback = Callable[[], Union[None, Awaitable[None]]]


class BasketSubscription:
    """Handle returned by ``BasketState.notify_on_change``."""

    def __init__(self, owner: "BasketState", callback: ChangeCallback):
        self._owner = owner
        self.callback = callback

    async def notify(self) -> None:
        result = self.callback()
        if inspect.isawaitable(result):
            await result

    def dispose(self) -> None:
        self._owner._remove_subscription(self)

    def __enter__(self) -> "BasketSubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


class BasketState:
    """Cached basket view with write-through mutations and change notifications."""

    def __init__(
        self,
        basket_service: BasketService,
        catalog_service: CatalogService,
        ordering_service: OrderingService,
        auth_context: AuthenticationContext,
        telemetry: Optional[TelemetryClient] = None,
        cache: Optional[BasketCache] = None,
    ):
        self.basket_service = basket_service
        self.catalog_service = catalog_service
        self.ordering_service = ordering_service
        self.auth_context = auth_context
        self.telemetry = telemetry or telemetry_client
        self.cache = cache or BasketCache()
        self._subscriptions: List[BasketSubscription] = []

    async def get_basket_items(self) -> List[BasketItem]:
        """Joined basket view; empty for anonymous users without a remote call."""
        if not self.auth_context.is_authenticated:
            return []
        return await self._fetch_basket_items()

    def notify_on_change(self, callback: ChangeCallback) -> BasketSubscription:
        subscription = BasketSubscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    async def add(self, item: CatalogItem, ai_influenced: str) -> None:
        """Add one unit of ``item``. The matching line takes the supplied influence tag."""
        items: List[BasketQuantity] = []
        found = False
        for existing in await self._fetch_basket_items():
            if existing.product_id == item.id and not found:
                items.append(
                    BasketQuantity(
                        product_id=existing.product_id,
                        quantity=existing.quantity + 1,
                        ai_influenced=ai_influenced,
                    )
                )
                found = True
            else:
                items.append(existing.to_quantity())

        if not found:
            items.append(BasketQuantity(product_id=item.id, quantity=1, ai_influenced=ai_influenced))

        self.cache.invalidate()
        await self.basket_service.update_basket(items)
        logger.info(f"Added product {item.id} to basket (influence: {ai_influenced})")
        await self._notify_change_subscribers()

    async def set_quantity(self, product_id: int, quantity: int) -> None:
        """Set a line's quantity; ``quantity <= 0`` removes it. Unknown ids are ignored."""
        existing_items = await self._fetch_basket_items()
        if not any(row.product_id == product_id for row in existing_items):
            logger.debug(f"set_quantity ignored, product {product_id} not in basket")
            return

        items: List[BasketQuantity] = []
        for row in existing_items:
            if row.product_id != product_id:
                items.append(row.to_quantity())
            elif quantity > 0:
                items.append(
                    BasketQuantity(
                        product_id=row.product_id,
                        quantity=quantity,
                        ai_influenced=row.ai_influenced,
                    )
                )

        self.cache.invalidate()
        await self.basket_service.update_basket(items)
        logger.info(f"Set quantity of product {product_id} to {max(quantity, 0)}")
        await self._notify_change_subscribers()

    async def delete_basket(self) -> None:
        self.cache.invalidate()
        await self.basket_service.delete_basket()
        await self._notify_change_subscribers()

    async def checkout(self, checkout_info: BasketCheckoutInfo) -> UUID:
        """Place an order for the current basket, then delete the basket.

        Returns the request id the order was submitted under. Order creation and
        basket deletion run one after the other; if deletion fails the order
        stands and the basket is left in place.
        """
        # The nil UUID counts as absent; it would collide as an idempotency key
        if checkout_info.request_id is None or checkout_info.request_id.int == 0:
            checkout_info.request_id = uuid.uuid4()

        buyer_id = self.auth_context.get_buyer_id()
        if buyer_id is None:
            raise CheckoutStateError("User does not have a buyer ID")
        user_name = self.auth_context.get_user_name()
        if user_name is None:
            raise CheckoutStateError("User does not have a user name")

        order_items = await self._fetch_basket_items()

        request = CreateOrderRequest(
            user_id=buyer_id,
            user_name=user_name,
            city=checkout_info.city,
            street=checkout_info.street,
            state=checkout_info.state,
            country=checkout_info.country,
            zip_code=checkout_info.zip_code,
            card_number=checkout_info.card_number,
            card_holder_name=checkout_info.card_holder_name,
            card_expiration=checkout_info.card_expiration,
            card_security_number=checkout_info.card_security_number,
            card_type_id=checkout_info.card_type_id,
            buyer=buyer_id,
            items=order_items,
        )
        await self.ordering_service.create_order(request, checkout_info.request_id)
        logger.info(f"Order submitted with request id {checkout_info.request_id}")
        await self.delete_basket()

        self._track_checkout(user_name, order_items)
        return checkout_info.request_id

    def _track_checkout(self, user_name: str, order_items: List[BasketItem]) -> None:
        total = 0.0
        quantity = 0
        direct_ai_influenced_quantity = 0
        for item in order_items:
            total += item.unit_price * item.quantity
            quantity += item.quantity
            if item.ai_influenced == AI_INFLUENCE_DIRECT:
                direct_ai_influenced_quantity += item.quantity

        self.telemetry.track_event(
            "checkout",
            properties={"TargetingId": user_name},
            metrics={
                "quantity": float(quantity),
                "total": round(total, 2),
                "directAiInfluence": float(direct_ai_influenced_quantity),
            },
        )

    async def _notify_change_subscribers(self) -> List[BaseException]:
        """Notify every subscriber concurrently and collect all failures."""
        subscriptions = list(self._subscriptions)
        if not subscriptions:
            return []

        results = await asyncio.gather(
            *(subscription.notify() for subscription in subscriptions),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        for failure in failures:
            logger.error(f"Basket change subscriber failed: {failure!r}")
        return failures

    def _remove_subscription(self, subscription: BasketSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def _fetch_basket_items(self) -> List[BasketItem]:
        cached = self.cache.get()
        if cached is not None:
            return cached

        quantities = await self.basket_service.get_basket()
        if not quantities:
            self.cache.set([])
            return []

        catalog_items = {
            catalog_item.id: catalog_item
            for catalog_item in await self.catalog_service.get_items_by_ids(
                [row.product_id for row in quantities]
            )
        }

        basket_items = []
        for row in quantities:
            catalog_item = catalog_items.get(row.product_id)
            if catalog_item is None:
                raise CatalogLookupError(row.product_id)
            basket_items.append(
                BasketItem(
                    id=str(uuid.uuid4()),
                    product_id=catalog_item.id,
                    product_name=catalog_item.name,
                    unit_price=catalog_item.price,
                    quantity=row.quantity,
                    ai_influenced=row.ai_influenced,
                )
            )

        self.cache.set(basket_items)
        return basket_items

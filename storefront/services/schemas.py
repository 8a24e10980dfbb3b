"""Pydantic schemas for storefront service payloads.

Wire payloads use camelCase; attributes are snake_case and models accept either.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Influence tags
AI_INFLUENCE_DIRECT = "direct"
AI_INFLUENCE_NONE = "none"


class ServiceModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# Catalog Schemas
class CatalogItem(ServiceModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    picture_url: Optional[str] = None
    catalog_type_id: Optional[int] = None
    catalog_brand_id: Optional[int] = None
    available_stock: Optional[int] = None


class CatalogPage(ServiceModel):
    page_index: int = 0
    page_size: int = 0
    count: int = 0
    data: List[CatalogItem] = []


# Basket Schemas
class BasketQuantity(ServiceModel):
    """One line of the remote basket. Replaced wholesale, never mutated."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: int
    quantity: int
    ai_influenced: str = AI_INFLUENCE_NONE


class BasketItem(ServiceModel):
    """Basket line joined with catalog details."""

    id: str
    product_id: int
    product_name: str
    unit_price: float
    quantity: int
    ai_influenced: str = AI_INFLUENCE_NONE

    def to_quantity(self) -> BasketQuantity:
        return BasketQuantity(
            product_id=self.product_id,
            quantity=self.quantity,
            ai_influenced=self.ai_influenced,
        )


# Ordering Schemas
class BasketCheckoutInfo(ServiceModel):
    email: Optional[str] = None
    street: str
    city: str
    state: str
    country: str
    zip_code: str
    card_number: str
    card_holder_name: str
    card_expiration: datetime
    card_security_number: str
    card_type_id: int = 1
    request_id: Optional[UUID] = None


class CreateOrderRequest(ServiceModel):
    user_id: str
    user_name: str
    city: str
    street: str
    state: str
    country: str
    zip_code: str
    card_number: str
    card_holder_name: str
    card_expiration: datetime
    card_security_number: str
    card_type_id: int
    buyer: str
    items: List[BasketItem]

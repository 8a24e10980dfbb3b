"""API request/response schemas."""
from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from storefront.services.schemas import AI_INFLUENCE_NONE


class ChatMessage(BaseModel):
    message: str


class ChatResponse(BaseModel):
    session_id: str
    response: Optional[str] = None
    messages: List[Dict[str, str]]


class BasketItemCreate(BaseModel):
    product_id: int
    ai_influenced: str = AI_INFLUENCE_NONE


class BasketQuantityUpdate(BaseModel):
    quantity: int


class BasketResponse(BaseModel):
    session_id: str
    items: List[Dict[str, Any]]
    items_count: int
    total: float


class CheckoutResponse(BaseModel):
    session_id: str
    request_id: str

"""Shopping basket API routes."""
from fastapi import APIRouter, HTTPException, Depends

from storefront.api.dependencies import get_storefront_session, to_http_exception
from storefront.api.schemas import (
    BasketItemCreate,
    BasketQuantityUpdate,
    BasketResponse,
    CheckoutResponse,
)
from storefront.memory.session_manager import StorefrontSession
from storefront.services.schemas import BasketCheckoutInfo

router = APIRouter(prefix="/api/basket", tags=["basket"])


async def _basket_response(session: StorefrontSession) -> BasketResponse:
    items = await session.basket_state.get_basket_items()
    total = sum(item.unit_price * item.quantity for item in items)
    return BasketResponse(
        session_id=session.session_id,
        items=[item.to_wire() for item in items],
        items_count=sum(item.quantity for item in items),
        total=round(total, 2),
    )


@router.get("/", response_model=BasketResponse)
async def get_basket(session: StorefrontSession = Depends(get_storefront_session)):
    """Get the basket."""
    try:
        return await _basket_response(session)
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "getting basket", "basket_error")


@router.post("/items", response_model=BasketResponse)
async def add_item(
    item: BasketItemCreate,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """Add one unit of a product to the basket."""
    try:
        if not session.auth_context.is_authenticated:
            raise HTTPException(status_code=401, detail="Authentication required")

        catalog_item = await session.catalog_service.get_item(item.product_id)
        if catalog_item is None:
            raise HTTPException(status_code=404, detail=f"Product {item.product_id} not found")

        await session.basket_state.add(catalog_item, item.ai_influenced)
        return await _basket_response(session)
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "adding to basket", "basket_error")


@router.put("/items/{product_id}", response_model=BasketResponse)
async def set_quantity(
    product_id: int,
    update: BasketQuantityUpdate,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """Set the quantity of a basket line; zero or less removes it."""
    try:
        if not session.auth_context.is_authenticated:
            raise HTTPException(status_code=401, detail="Authentication required")
        await session.basket_state.set_quantity(product_id, update.quantity)
        return await _basket_response(session)
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "updating basket", "basket_error")


@router.delete("/", status_code=204)
async def delete_basket(session: StorefrontSession = Depends(get_storefront_session)):
    """Delete the basket."""
    try:
        if not session.auth_context.is_authenticated:
            raise HTTPException(status_code=401, detail="Authentication required")
        await session.basket_state.delete_basket()
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "deleting basket", "basket_error")


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    checkout_info: BasketCheckoutInfo,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """Place an order for the basket contents."""
    try:
        request_id = await session.basket_state.checkout(checkout_info)
        return CheckoutResponse(session_id=session.session_id, request_id=str(request_id))
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "checking out", "checkout_error")

"""Exceptions raised by the storefront service clients and basket state."""
from typing import Optional


class ServiceError(Exception):
    """A remote storefront service returned an error response."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class UnauthenticatedError(ServiceError):
    """The remote service rejected the call because the user is not signed in."""

    def __init__(self, service: str, message: str = "Authentication required"):
        super().__init__(service, message, status_code=401)


class CatalogLookupError(ServiceError):
    """A basket line references a product the catalog did not return."""

    def __init__(self, product_id: int):
        super().__init__("catalog", f"Product {product_id} not found in catalog")
        self.product_id = product_id


class CheckoutStateError(RuntimeError):
    """Checkout cannot proceed with the current authentication state."""

"""Request-scoped dependencies: forwarded identity and the user's session."""

from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request

from storefront.analytics.error_tracker import error_tracker
from storefront.analytics.logger import logger
from storefront.memory.session_manager import StorefrontSession, session_manager
from storefront.services.errors import CheckoutStateError, ServiceError, UnauthenticatedError
from storefront.services.identity import AuthenticationContext

CLAIM_HEADER_PREFIX = "x-claim-"
SESSION_HEADER = "x-session-id"


def get_auth_context(request: Request) -> AuthenticationContext:
    """Identity as forwarded by the gateway.

    ``X-Claim-Address-Street: Main St`` becomes claim ``address_street``.
    """
    claims = {}
    for header, value in request.headers.items():
        if header.startswith(CLAIM_HEADER_PREFIX) and value:
            claims[header[len(CLAIM_HEADER_PREFIX):].replace("-", "_")] = value

    access_token = None
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        access_token = authorization[7:].strip() or None

    return AuthenticationContext(claims=claims, access_token=access_token)


def get_storefront_session(
    request: Request,
    auth_context: AuthenticationContext = Depends(get_auth_context),
) -> StorefrontSession:
    return session_manager.get_or_create_session(request.headers.get(SESSION_HEADER), auth_context)


def to_http_exception(e: Exception, action: str, error_type: Optional[str] = None) -> HTTPException:
    """Map storefront errors to HTTP errors.

    Failures other than a missing login are recorded under ``error_type``
    when one is given.
    """
    if isinstance(e, UnauthenticatedError):
        return HTTPException(status_code=401, detail="Authentication required")
    if error_type:
        error_tracker.record_error(error_type, str(e), {"action": action, "exception": type(e).__name__})
    if isinstance(e, CheckoutStateError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (ServiceError, httpx.HTTPError)):
        logger.error(f"Upstream error while {action}: {e}")
        return HTTPException(status_code=502, detail=f"Upstream service error while {action}.")
    logger.error(f"Error while {action}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail="Internal server error. Please try again later.")

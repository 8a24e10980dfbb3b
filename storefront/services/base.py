"""Shared HTTP plumbing for the remote storefront services."""

from typing import Any, Optional

import httpx

from storefront.analytics.logger import logger
from storefront.services.errors import ServiceError, UnauthenticatedError
from storefront.utils.config import settings


class StorefrontServiceClient:
    """Base client for a storefront JSON API.

    A new ``httpx.AsyncClient`` is opened per call. The caller's bearer token,
    when present, is forwarded on every request. No retries are performed.
    """

    service_name = "service"

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout if timeout is not None else settings.service_timeout_seconds

    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        headers: Optional[dict] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(method, url, headers=self._headers(headers), **kwargs)

        if response.status_code == 401:
            logger.warning(f"{self.service_name} rejected unauthenticated call: {method} {path}")
            raise UnauthenticatedError(self.service_name)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.service_name} error {response.status_code} for {method} {path}")
            raise ServiceError(
                self.service_name,
                f"{method} {path} failed with status {response.status_code}",
                status_code=response.status_code,
            ) from e
        return response

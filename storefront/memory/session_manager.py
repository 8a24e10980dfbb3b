"""Session management for storefront users.

Sessions live in memory only. Each one carries its own transcript, basket
cache and service clients, so idle sessions are evicted after
``session_ttl_seconds`` and the least recently used ones are dropped once
``max_sessions`` is exceeded.
"""

import time
import uuid
from typing import Any, Callable, Dict, Optional

from storefront.agent.chat_session import ChatSession
from storefront.agent.completion import CompletionProvider, LangChainCompletionProvider
from storefront.analytics.logger import logger
from storefront.analytics.telemetry import TelemetryClient, telemetry_client
from storefront.basket.state import BasketState
from storefront.mcp.tools import create_tool_registry
from storefront.services.basket_service import BasketService
from storefront.services.catalog_service import CatalogService, ProductImageUrlProvider
from storefront.services.identity import AuthenticationContext
from storefront.services.ordering_service import OrderingService
from storefront.services.variants import TargetingContextAccessor, VariantSource
from storefront.utils.config import settings


class StorefrontSession:
    """Basket state and chat session for one user session."""

    def __init__(
        self,
        session_id: str,
        auth_context: AuthenticationContext,
        completion_provider: CompletionProvider,
        telemetry: TelemetryClient,
    ):
        self.session_id = session_id
        self.auth_context = auth_context
        self.last_accessed = 0.0
        token = auth_context.access_token
        self.catalog_service = CatalogService(access_token=token)
        self.basket_state = BasketState(
            basket_service=BasketService(access_token=token),
            catalog_service=self.catalog_service,
            ordering_service=OrderingService(access_token=token),
            auth_context=auth_context,
            telemetry=telemetry,
        )
        tools = create_tool_registry(
            catalog_service=self.catalog_service,
            basket_state=self.basket_state,
            auth_context=auth_context,
            image_urls=ProductImageUrlProvider(),
            telemetry=telemetry,
        )
        self.chat = ChatSession(
            completion_provider=completion_provider,
            variant_source=VariantSource(TargetingContextAccessor(auth_context)),
            tools=tools,
        )

    def refresh_identity(self, auth_context: AuthenticationContext) -> None:
        """Adopt the latest forwarded claims and token for the same buyer."""
        self.auth_context.refresh(auth_context)
        for client in (
            self.catalog_service,
            self.basket_state.basket_service,
            self.basket_state.ordering_service,
        ):
            client.access_token = auth_context.access_token


class SessionManager:
    """Manage in-memory user sessions."""

    def __init__(
        self,
        completion_provider: Optional[CompletionProvider] = None,
        telemetry: Optional[TelemetryClient] = None,
        ttl_seconds: Optional[int] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._completion_provider = completion_provider
        self.telemetry = telemetry or telemetry_client
        self.ttl_seconds = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.max_sessions = settings.max_sessions if max_sessions is None else max_sessions
        self._clock = clock
        self.sessions: Dict[str, StorefrontSession] = {}
        self._stats = {"created": 0, "expired": 0, "evicted": 0, "ended": 0}

    @property
    def completion_provider(self) -> CompletionProvider:
        if self._completion_provider is None:
            self._completion_provider = LangChainCompletionProvider()
        return self._completion_provider

    def get_session(self, session_id: str) -> Optional[StorefrontSession]:
        """Get session by ID."""
        return self.sessions.get(session_id)

    def get_or_create_session(
        self,
        session_id: Optional[str],
        auth_context: AuthenticationContext,
    ) -> StorefrontSession:
        """Get existing session or create new one.

        A session is bound to the buyer it was created for; a different buyer
        presenting the same session id gets a fresh session.
        """
        now = self._clock()
        self.cleanup_expired_sessions(now)

        if session_id:
            session = self.sessions.get(session_id)
            if session and session.auth_context.get_buyer_id() == auth_context.get_buyer_id():
                session.refresh_identity(auth_context)
                session.last_accessed = now
                return session
            if session:
                logger.info(f"Session {session_id} presented by a different buyer, replacing it")
        else:
            session_id = str(uuid.uuid4())

        session = StorefrontSession(
            session_id=session_id,
            auth_context=auth_context,
            completion_provider=self.completion_provider,
            telemetry=self.telemetry,
        )
        session.last_accessed = now
        self.sessions[session_id] = session
        self._stats["created"] += 1
        logger.info(f"Created new session: {session_id}")

        self._enforce_capacity()
        return session

    def end_session(self, session_id: str) -> bool:
        """Drop a session. Returns False if it did not exist."""
        if self.sessions.pop(session_id, None) is None:
            return False
        self._stats["ended"] += 1
        logger.info(f"Ended session: {session_id}")
        return True

    def cleanup_expired_sessions(self, now: Optional[float] = None) -> int:
        """Remove sessions idle for longer than the TTL."""
        if self.ttl_seconds <= 0:
            return 0
        cutoff = (self._clock() if now is None else now) - self.ttl_seconds
        expired = [sid for sid, s in self.sessions.items() if s.last_accessed < cutoff]
        for sid in expired:
            del self.sessions[sid]
        if expired:
            self._stats["expired"] += len(expired)
            logger.info(f"Expired {len(expired)} idle session(s)")
        return len(expired)

    def _enforce_capacity(self) -> None:
        while self.max_sessions > 0 and len(self.sessions) > self.max_sessions:
            oldest = min(self.sessions.values(), key=lambda s: s.last_accessed)
            del self.sessions[oldest.session_id]
            self._stats["evicted"] += 1
            logger.debug(f"Evicted least recently used session: {oldest.session_id}")

    def get_stats(self) -> Dict[str, Any]:
        """Session counts and the summed basket cache statistics."""
        cache_totals: Dict[str, int] = {}
        for session in self.sessions.values():
            for key, value in session.basket_state.cache.get_cache_stats().items():
                cache_totals[key] = cache_totals.get(key, 0) + value
        return {"active": len(self.sessions), **self._stats, "basket_cache": cache_totals}


# Global session manager
session_manager = SessionManager()

"""Fire-and-forget telemetry events backed by Langfuse."""

from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from langfuse import Langfuse

from storefront.analytics.logger import logger
from storefront.utils.config import settings


class TelemetryClient:
    """Emit named events with string properties and numeric metrics.

    Events are forwarded to Langfuse when keys are configured and always kept
    in a bounded in-memory buffer. Emission never raises.
    """

    def __init__(self, enabled: Optional[bool] = None, max_events: int = 500):
        self.enabled = settings.langfuse_enabled if enabled is None else enabled
        self.client: Optional[Langfuse] = None
        self.events: Deque[Dict[str, Any]] = deque(maxlen=max_events)

        if self.enabled:
            try:
                if settings.langfuse_public_key and settings.langfuse_secret_key:
                    self.client = Langfuse(
                        public_key=settings.langfuse_public_key,
                        secret_key=settings.langfuse_secret_key,
                        host=settings.langfuse_host,
                    )
                    logger.info(
                        f"Telemetry client initialized for project: {settings.langfuse_project_name}"
                    )
                else:
                    logger.warning("Langfuse keys not configured, telemetry kept in memory only")
                    self.enabled = False
            except Exception as e:
                logger.error(f"Failed to initialize Langfuse client: {e}")
                self.enabled = False
        else:
            logger.info("Langfuse telemetry is disabled in configuration")

    def track_event(
        self,
        name: str,
        properties: Optional[Dict[str, str]] = None,
        metrics: Optional[Dict[str, float]] = None,
    ) -> None:
        """Record an event. Failures are logged, never propagated."""
        event = {
            "timestamp": datetime.now().isoformat(),
            "name": name,
            "properties": dict(properties or {}),
            "metrics": dict(metrics or {}),
        }
        self.events.append(event)
        logger.debug(f"Telemetry event: {name} {event['properties']} {event['metrics']}")

        if not self.enabled or not self.client:
            return

        try:
            metadata = {**event["properties"], **event["metrics"]}
            # SDK compatibility: v3 exposes create_event, v2 exposes event
            if hasattr(self.client, "create_event"):
                self.client.create_event(name=name, metadata=metadata)
            else:
                self.client.event(name=name, metadata=metadata)
        except Exception as e:
            logger.warning(f"Failed to send telemetry event {name}: {e}")

    def get_recent_events(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Get the most recent events."""
        return list(self.events)[-limit:]

    def flush(self) -> None:
        if self.client:
            try:
                self.client.flush()
            except Exception as e:
                logger.warning(f"Failed to flush telemetry: {e}")


# Global telemetry client
telemetry_client = TelemetryClient()

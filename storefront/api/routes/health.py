"""Health check endpoint."""
from fastapi import APIRouter
from typing import Dict, Any
import time

from storefront.analytics.telemetry import telemetry_client
from storefront.memory.session_manager import session_manager
from storefront.utils.config import settings

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Report configuration-level health; remote services are not probed."""
    checks: Dict[str, Any] = {}
    status = "healthy"

    provider = settings.llm_provider.lower()
    has_key = bool(
        settings.anthropic_api_key if provider == "anthropic" else settings.openai_api_key
    )
    checks["llm"] = {
        "status": "healthy" if has_key else "degraded",
        "provider": provider,
        "model": settings.llm_model,
    }
    if not has_key:
        status = "degraded"

    checks["telemetry"] = {
        "status": "healthy" if telemetry_client.enabled else "degraded",
        "message": "Langfuse connected" if telemetry_client.enabled else "In-memory only",
    }
    checks["sessions"] = {"status": "healthy", **session_manager.get_stats()}

    return {"status": status, "timestamp": time.time(), "checks": checks}

"""Configuration and environment validation."""
from storefront.utils.config import settings
from storefront.analytics.logger import logger


def validate_config() -> dict:
    """Validate application configuration."""
    issues = []
    warnings = []

    provider = settings.llm_provider.lower()
    if provider == "anthropic":
        if not settings.anthropic_api_key:
            issues.append("ANTHROPIC_API_KEY is not set - assistant will not function")
    elif provider == "openai":
        if not settings.openai_api_key:
            issues.append("OPENAI_API_KEY is not set - assistant will not function")
    else:
        issues.append(f"Invalid LLM provider: {provider}. Use 'anthropic' or 'openai'")

    for name in ("basket_api_url", "catalog_api_url", "ordering_api_url"):
        url = getattr(settings, name)
        if not url.startswith(("http://", "https://")):
            issues.append(f"{name.upper()} must be an http(s) URL, got {url!r}")
        elif settings.production_mode and url.startswith("http://localhost"):
            warnings.append(f"{name.upper()} points at localhost in production")

    if settings.langfuse_enabled and not (
        settings.langfuse_public_key and settings.langfuse_secret_key
    ):
        warnings.append("Langfuse enabled but keys not set - telemetry kept in memory only")

    if issues:
        for issue in issues:
            logger.error(f"Configuration issue: {issue}")

    if warnings:
        for warning in warnings:
            logger.warning(f"Configuration warning: {warning}")

    return {
        "valid": len(issues) == 0,
        "issues": issues,
        "warnings": warnings
    }

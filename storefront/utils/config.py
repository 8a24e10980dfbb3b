"""Configuration management for the application."""
from pydantic_settings import BaseSettings
from typing import Dict, Optional


class Settings(BaseSettings):
    """Application settings."""

    # Remote storefront services
    basket_api_url: str = "http://localhost:5221"
    catalog_api_url: str = "http://localhost:5222"
    ordering_api_url: str = "http://localhost:5224"
    service_timeout_seconds: float = 10.0

    # API Keys
    openai_api_key: str = ""  # Made optional with default for graceful degradation
    anthropic_api_key: Optional[str] = None  # For Claude models

    # LLM Configuration
    llm_provider: str = "openai"  # Options: "openai", "anthropic"
    llm_model: str = "gpt-35-turbo"  # Used when no "model" variant is configured
    llm_max_tokens: int = 1000
    llm_temperature: float = 1.0
    max_tool_rounds: int = 5  # Tool-call round trips allowed per completion

    # Catalog search exposed to the assistant
    catalog_search_page_size: int = 8

    # Variant overrides (JSON in env), e.g. {"model": "gpt-4o-mini"}
    variant_overrides: Dict[str, str] = {}
    # Per-user overrides keyed by lower-cased user name
    variant_user_overrides: Dict[str, Dict[str, str]] = {}

    # Session store
    session_ttl_seconds: int = 3600  # Idle sessions older than this are evicted
    max_sessions: int = 1000  # Least recently used sessions are evicted beyond this

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3565

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/app.log"

    # Langfuse Configuration
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_host: str = "https://cloud.langfuse.com"
    langfuse_project_name: str = "storefront-assistant"
    langfuse_enabled: bool = True

    # Environment Configuration
    environment: str = "development"  # development, staging, production

    # Production Settings
    production_mode: bool = False  # Auto-detected from environment

    # CORS Configuration (for production)
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Auto-detect production mode
        self.production_mode = (
            self.environment.lower() == "production" or
            self.environment.lower() == "prod"
        )

        # More restrictive logging in production
        if self.production_mode and self.log_level == "INFO":
            self.log_level = "WARNING"


settings = Settings()

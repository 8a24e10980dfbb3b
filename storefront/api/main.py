"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from storefront.api.routes import basket, chat, health, errors
from storefront.api.middleware import LoggingMiddleware
from storefront.analytics.logger import logger
from storefront.analytics.telemetry import telemetry_client
from storefront.utils.config import settings
from storefront.utils.validation import validate_config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting application...")

    config_status = validate_config()
    if not config_status["valid"]:
        logger.error("Configuration validation failed - some features may not work")

    logger.info(f"Using {settings.llm_provider} provider with default model: {settings.llm_model}")
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    telemetry_client.flush()


app = FastAPI(
    title="Storefront Assistant API",
    description="Basket state and chat assistant for the Northern Mountains storefront",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
cors_origins = settings.cors_origins.split(",") if settings.cors_origins else ["*"]
if settings.production_mode and "*" in cors_origins:
    logger.warning("CORS is set to allow all origins in production. Consider restricting this.")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Logging middleware
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(basket.router)
app.include_router(chat.router)
app.include_router(health.router)
app.include_router(errors.router)


@app.get("/")
async def root():
    """API info."""
    return {"message": "Storefront Assistant API", "version": "1.0.0", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.api.main:app", host=settings.api_host, port=settings.api_port, reload=True)

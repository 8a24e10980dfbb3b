"""Start the FastAPI server."""
import os
import uvicorn

if __name__ == "__main__":
    from storefront.utils.config import settings

    host = os.getenv("API_HOST", settings.api_host)
    port = int(os.getenv("API_PORT", settings.api_port))
    reload = not settings.production_mode
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    print("=" * 60)
    print("Starting Storefront Assistant Server")
    print("=" * 60)
    print(f"Server will be available at: http://{host}:{port}")
    print(f"Environment: {settings.environment}")
    print(f"Basket API: {settings.basket_api_url}")
    print(f"Catalog API: {settings.catalog_api_url}")
    print(f"Ordering API: {settings.ordering_api_url}")
    print(f"Reload enabled: {reload}")
    print("=" * 60)

    uvicorn.run(
        "storefront.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level
    )

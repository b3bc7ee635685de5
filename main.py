"""Main application entry point."""

import uvicorn

from events_service.config.settings import IS_PRODUCTION_ENVIRONMENT, Settings

if __name__ == "__main__":
    settings = Settings()
    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - reload on code changes
        uvicorn.run(
            "events_service.asgi:app",
            host="0.0.0.0",
            port=settings.port,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - string reference required for multiple workers
        uvicorn.run(
            "events_service.asgi:app",
            host="0.0.0.0",
            port=settings.port,
            reload=False,
            workers=4,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )

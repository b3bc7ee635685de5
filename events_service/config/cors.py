"""CORS configuration for the FastAPI application."""

from typing import Any, Dict

from .settings import Settings

# CORS Methods configuration
ALLOWED_METHODS = [
    "GET",      # Reading events
    "POST",     # Creating events
    "PUT",      # Updating events
    "DELETE",   # Deleting events
    "OPTIONS"   # Required for CORS preflight
]

# CORS Headers configuration
ALLOWED_HEADERS = [
    "Content-Type",   # For multipart and JSON bodies
    "Accept",        # For content negotiation
]

def get_cors_config(settings: Settings) -> Dict[str, Any]:
    """Build CORSMiddleware keyword arguments for the given settings."""
    if settings.is_production:
        origins = settings.cors_origins
    else:
        origins = ["*"]  # Development - allow all

    return {
        "allow_origins": origins,
        "allow_credentials": settings.is_production,
        "allow_methods": ALLOWED_METHODS,
        "allow_headers": ALLOWED_HEADERS,
        "expose_headers": [],
        "max_age": 3600,
    }

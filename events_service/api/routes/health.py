"""Health check routes for the FastAPI application."""

from fastapi import APIRouter

from ...utils.timezone import now_utc

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": now_utc().isoformat()
    }

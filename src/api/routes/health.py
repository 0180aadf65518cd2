"""
Health check endpoint.
"""
from fastapi import APIRouter
from datetime import datetime

from src.models.schemas import HealthResponse
from config.settings import settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        HealthResponse with system status
    """
    return HealthResponse(
        status="disabled" if settings.KILL_SWITCH_ENABLED else "healthy",
        version=settings.APP_VERSION,
        timestamp=datetime.now(),
        services={
            "translation": "disabled" if settings.KILL_SWITCH_ENABLED else "ready",
            "llm": "ready" if settings.OPENAI_API_KEY else "not_configured",
            "store": settings.STORE_BACKEND,
        }
    )

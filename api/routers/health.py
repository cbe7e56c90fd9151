"""
Health check endpoint.

Provides:
- /health: Basic health check for load balancers (fast, simple)
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app_settings import settings
from navigation import NavigationClient, get_navigation_client

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(nav: NavigationClient = Depends(get_navigation_client)) -> Dict[str, Any]:
    """Basic liveness check. Does not touch the store."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "store": nav.store_name,
    }

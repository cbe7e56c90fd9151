"""
Navigation API - resolved, grouped navigation per role.

This router handles:
- Resolving the sidebar for a role, optionally scoped to a tenant and filtered by search
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from navigation import NavigationClient, get_navigation_client
from utils.logging import get_logger

router = APIRouter(prefix="/api/navigation", tags=["navigation"])
logger = get_logger("api.navigation")


@router.get("/{role}")
async def resolve_navigation(
    role: str,
    tenant_id: Optional[str] = Query(default=None, description="Tenant (club) whose override applies"),
    search: Optional[str] = Query(default=None, max_length=100, description="Case-insensitive filter"),
    nav: NavigationClient = Depends(get_navigation_client),
) -> Dict[str, Any]:
    """
    Resolve what a role sees. Unknown roles get an empty view, not an error.

    Store failures fall back to defaults and are listed in "warnings".
    """
    view = await nav.resolve(role, tenant_id=tenant_id, search_term=search)
    if view.warnings:
        logger.warning(f"[NAVIGATION] Resolved {view.role} with fallbacks: {list(view.warnings)}")
    return view.to_dict()

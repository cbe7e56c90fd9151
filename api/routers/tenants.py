"""
Tenant Overrides API - per-club narrowing of a role's modules.

An override can only remove modules from what a role is allowed; ids
outside the allow-list are stored but never shown.
"""

from fastapi import APIRouter, Depends

from api.exceptions import NotFoundError, StoreUnavailableError
from api.schemas import TenantOverrideRequest, TenantOverrideResponse
from navigation import NavigationClient, get_navigation_client, normalize_role
from utils.logging import get_logger

router = APIRouter(prefix="/api/tenants", tags=["tenants"])
logger = get_logger("api.tenants")


@router.get("/{tenant_id}/overrides/{role}", response_model=TenantOverrideResponse)
async def get_tenant_override(
    tenant_id: str,
    role: str,
    nav: NavigationClient = Depends(get_navigation_client),
) -> TenantOverrideResponse:
    """modules is null when the tenant has no override for the role."""
    modules = await nav.fetch_tenant_override(tenant_id, role)
    return TenantOverrideResponse(tenant_id=tenant_id, role=normalize_role(role), modules=modules)


@router.put("/{tenant_id}/overrides/{role}", response_model=TenantOverrideResponse)
async def save_tenant_override(
    tenant_id: str,
    role: str,
    request: TenantOverrideRequest,
    nav: NavigationClient = Depends(get_navigation_client),
) -> TenantOverrideResponse:
    if not await nav.save_tenant_override(tenant_id, role, request.modules):
        raise StoreUnavailableError("Could not save tenant override", store=nav.store_name)
    logger.info(f"[TENANTS] Saved override for {tenant_id}/{normalize_role(role)} ({len(request.modules)} modules)")
    return TenantOverrideResponse(tenant_id=tenant_id, role=normalize_role(role), modules=request.modules)


@router.delete("/{tenant_id}/overrides/{role}", response_model=TenantOverrideResponse)
async def delete_tenant_override(
    tenant_id: str,
    role: str,
    nav: NavigationClient = Depends(get_navigation_client),
) -> TenantOverrideResponse:
    """404 when there is no override; store failures surface as 502."""
    if not await nav.delete_tenant_override(tenant_id, role):
        raise NotFoundError("No override for tenant and role", resource_type="tenant_override", resource_id=tenant_id)
    return TenantOverrideResponse(tenant_id=tenant_id, role=normalize_role(role), modules=None)

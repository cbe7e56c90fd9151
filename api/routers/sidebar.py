"""
Sidebar API - per-role sidebar group assignments.

This router handles:
- Listing every role's custom grouping
- Reading and saving one role's grouping
- Resetting one role, or all roles, to the default groups
"""

from fastapi import APIRouter, Depends

from api.exceptions import NotFoundError, StoreUnavailableError, ValidationFailedError
from api.schemas import GroupSchema, ResetResponse, SidebarListResponse, SidebarResponse, SidebarSaveRequest
from navigation import NavigationClient, default_groups, get_navigation_client, normalize_role
from navigation.catalog import is_known_role
from utils.logging import get_logger

router = APIRouter(prefix="/api/sidebar", tags=["sidebar"])
logger = get_logger("api.sidebar")


def _require_known_role(role: str) -> str:
    if not is_known_role(role):
        raise ValidationFailedError(f"Unknown role: {role}", field="role")
    return normalize_role(role)


@router.get("/config/all", response_model=SidebarListResponse)
async def list_sidebar_configs(nav: NavigationClient = Depends(get_navigation_client)) -> SidebarListResponse:
    assignments = await nav.list_group_assignments()
    return SidebarListResponse(
        data={role: [GroupSchema.from_group(g) for g in groups] for role, groups in assignments.items()}
    )


@router.get("/{role}", response_model=SidebarResponse)
async def get_sidebar_config(role: str, nav: NavigationClient = Depends(get_navigation_client)) -> SidebarResponse:
    """A role's custom grouping. 404 when the role uses the defaults."""
    role = normalize_role(role)
    groups = await nav.fetch_group_assignment(role)
    if groups is None:
        raise NotFoundError("No custom sidebar for role", resource_type="sidebar", resource_id=role)
    return SidebarResponse(role=role, groups=[GroupSchema.from_group(g) for g in groups])


@router.get("/{role}/effective", response_model=SidebarResponse)
async def get_effective_sidebar_config(
    role: str,
    nav: NavigationClient = Depends(get_navigation_client),
) -> SidebarResponse:
    """The grouping the role renders with: custom if saved, else the defaults."""
    role = normalize_role(role)
    custom = await nav.fetch_group_assignment(role)
    groups = custom if custom is not None else default_groups()
    return SidebarResponse(
        role=role,
        groups=[GroupSchema.from_group(g) for g in groups],
        is_default=custom is None,
    )


@router.post("/{role}", response_model=SidebarResponse)
async def save_sidebar_config(
    role: str,
    request: SidebarSaveRequest,
    nav: NavigationClient = Depends(get_navigation_client),
) -> SidebarResponse:
    role = _require_known_role(role)
    ids = [g.id for g in request.groups]
    if len(ids) != len(set(ids)):
        raise ValidationFailedError("Group ids must be unique", field="groups")

    groups = [g.to_group() for g in request.groups]
    if not await nav.save_group_assignment(role, groups):
        raise StoreUnavailableError("Could not save sidebar", store=nav.store_name)
    return SidebarResponse(role=role, groups=[GroupSchema.from_group(g) for g in groups])


@router.post("/reset/global/all", response_model=ResetResponse)
async def reset_all_sidebar_configs(nav: NavigationClient = Depends(get_navigation_client)) -> ResetResponse:
    removed = await nav.reset_all_group_assignments()
    logger.info(f"[SIDEBAR] Reset all roles to default groups ({removed} removed)")
    return ResetResponse(removed=removed)


@router.post("/reset/{role}", response_model=ResetResponse)
async def reset_sidebar_config(role: str, nav: NavigationClient = Depends(get_navigation_client)) -> ResetResponse:
    role = normalize_role(role)
    removed = await nav.reset_group_assignment(role)
    return ResetResponse(removed=1 if removed else 0)

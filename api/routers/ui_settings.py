"""
UI Settings API - per-role allow-lists and presentation settings.
"""

from fastapi import APIRouter, Depends

from api.exceptions import NotFoundError, StoreUnavailableError, ValidationFailedError
from api.schemas import UISettingsPatch, UISettingsResponse
from navigation import NavigationClient, get_navigation_client, normalize_role
from navigation.catalog import is_known_role
from utils.logging import get_logger

router = APIRouter(prefix="/api/ui-settings", tags=["ui-settings"])
logger = get_logger("api.ui_settings")


@router.get("/{role}", response_model=UISettingsResponse)
async def get_ui_settings(role: str, nav: NavigationClient = Depends(get_navigation_client)) -> UISettingsResponse:
    settings = await nav.fetch_role_ui_settings(role)
    if settings is None:
        raise NotFoundError("Unknown role", resource_type="role", resource_id=normalize_role(role))
    return UISettingsResponse.from_settings(settings)


@router.patch("/{role}", response_model=UISettingsResponse)
async def update_ui_settings(
    role: str,
    patch: UISettingsPatch,
    nav: NavigationClient = Depends(get_navigation_client),
) -> UISettingsResponse:
    """
    Patch a role's settings.

    Module ids are stored as given; ids the role may not see are dropped at
    resolution time.
    """
    if not is_known_role(role):
        raise ValidationFailedError(f"Unknown role: {role}", field="role")

    unknown = [m for m in patch.sidebar_modules or [] if m not in nav.catalog]
    if unknown:
        raise ValidationFailedError("Unknown modules in sidebar_modules", field="sidebar_modules", errors=unknown)

    updated = await nav.save_role_ui_settings(role, patch.model_dump(exclude_none=True))
    if updated is None:
        raise StoreUnavailableError("Could not save UI settings", store=nav.store_name)
    return UISettingsResponse.from_settings(updated)


@router.post("/reset/{role}", response_model=UISettingsResponse)
async def reset_ui_settings(role: str, nav: NavigationClient = Depends(get_navigation_client)) -> UISettingsResponse:
    settings = await nav.reset_role_ui_settings(role)
    if settings is None:
        raise NotFoundError("Unknown role", resource_type="role", resource_id=normalize_role(role))
    logger.info(f"[UI SETTINGS] Reset {settings.role} to defaults")
    return UISettingsResponse.from_settings(settings)

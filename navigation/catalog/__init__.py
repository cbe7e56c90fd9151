"""
Build-time catalogs: modules, roles, default groups, default permissions
and default role UI settings.
"""

from navigation.catalog.groups import SIDEBAR_ROLE_GROUPS, default_groups
from navigation.catalog.modules import DEFAULT_CATALOG, MODULE_LIST, ModuleCatalog
from navigation.catalog.permissions import (
    DEFAULT_PERMISSION_MATRIX,
    DEFAULT_RULES,
    ModulePermission,
    PermissionMatrix,
    build_default_permission_matrix,
)
from navigation.catalog.roles import ROLE_LIST, UserRole, is_known_role, normalize_role, role_label
from navigation.catalog.ui_settings import DEFAULT_UI_SETTINGS, default_ui_settings

__all__ = [
    # Modules
    "MODULE_LIST",
    "ModuleCatalog",
    "DEFAULT_CATALOG",
    # Roles
    "UserRole",
    "ROLE_LIST",
    "normalize_role",
    "is_known_role",
    "role_label",
    # Groups
    "SIDEBAR_ROLE_GROUPS",
    "default_groups",
    # Permissions
    "ModulePermission",
    "PermissionMatrix",
    "DEFAULT_RULES",
    "DEFAULT_PERMISSION_MATRIX",
    "build_default_permission_matrix",
    # UI settings
    "DEFAULT_UI_SETTINGS",
    "default_ui_settings",
]

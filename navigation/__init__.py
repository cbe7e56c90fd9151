"""
Role-aware navigation and feature visibility.

Decides which modules a role sees, in what order, under which groups and
with which nested sub-items, and keeps user-edited layouts valid as the
catalog evolves.

Supported Stores:
- Memory (MemoryNavigationStore): In-process (default, development/testing)
- Redis (RedisNavigationStore): Shared across API instances

Usage:
    from navigation import get_navigation_client, reconcile, LayoutRecord

    nav = get_navigation_client()

    # Resolve the sidebar for a club's coaches
    view = await nav.resolve("COACH", tenant_id="club-42")
    for group in view.groups:
        print(group.label, [item.id for item in group.items])

    # Repair a saved tab layout against today's tabs
    record = reconcile(LayoutRecord(order=("c", "b", "x"), hidden=("b",)), ["a", "b", "c"])
    # LayoutRecord(order=('c', 'b', 'a'), hidden=('b',))

Configuration:
    Set NAVIGATION_STORE environment variable:
    - "memory" (default): In-process storage
    - "redis": Redis storage (REDIS_URL, REDIS_KEY_PREFIX)
"""

from navigation.base import (
    Capability,
    Group,
    LayoutRecord,
    Module,
    NavigationStore,
    NavigationStoreError,
    RoleUISettings,
    TenantOverride,
)
from navigation.broadcaster import (
    ChangeBroadcaster,
    Subscription,
    get_broadcaster,
    layout_key,
    reset_broadcaster,
    sidebar_key,
    tenant_override_key,
    ui_settings_key,
)
from navigation.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_PERMISSION_MATRIX,
    DEFAULT_UI_SETTINGS,
    MODULE_LIST,
    ROLE_LIST,
    SIDEBAR_ROLE_GROUPS,
    ModuleCatalog,
    ModulePermission,
    PermissionMatrix,
    UserRole,
    default_groups,
    default_ui_settings,
    normalize_role,
)
from navigation.client import (
    NavigationClient,
    RequestSequencer,
    get_navigation_client,
    reset_navigation_client,
    resolve,
    set_navigation_client,
)
from navigation.reconciler import apply_layout, reconcile, reconcile_groups
from navigation.reorder import (
    AVAILABLE_POOL,
    GroupLayout,
    ReorderSession,
    move_between_groups,
    move_item,
    reorder_groups,
    reorder_in_group,
    reorder_layout,
    toggle_hidden,
)
from navigation.resolver import (
    GroupedView,
    ResolvedGroup,
    ResolvedItem,
    effective_modules,
    resolve_navigation,
)

__all__ = [
    # Core types
    "Capability",
    "Module",
    "Group",
    "RoleUISettings",
    "TenantOverride",
    "LayoutRecord",
    "NavigationStore",
    "NavigationStoreError",
    # Catalogs
    "MODULE_LIST",
    "ModuleCatalog",
    "DEFAULT_CATALOG",
    "UserRole",
    "ROLE_LIST",
    "normalize_role",
    "SIDEBAR_ROLE_GROUPS",
    "default_groups",
    "ModulePermission",
    "PermissionMatrix",
    "DEFAULT_PERMISSION_MATRIX",
    "DEFAULT_UI_SETTINGS",
    "default_ui_settings",
    # Resolution
    "GroupedView",
    "ResolvedGroup",
    "ResolvedItem",
    "effective_modules",
    "resolve_navigation",
    # Reconciliation
    "reconcile",
    "reconcile_groups",
    "apply_layout",
    # Reordering
    "AVAILABLE_POOL",
    "GroupLayout",
    "ReorderSession",
    "move_item",
    "reorder_layout",
    "toggle_hidden",
    "reorder_in_group",
    "move_between_groups",
    "reorder_groups",
    # Broadcasting
    "ChangeBroadcaster",
    "Subscription",
    "get_broadcaster",
    "reset_broadcaster",
    "layout_key",
    "sidebar_key",
    "ui_settings_key",
    "tenant_override_key",
    # Client
    "NavigationClient",
    "RequestSequencer",
    "get_navigation_client",
    "set_navigation_client",
    "reset_navigation_client",
    "resolve",
]

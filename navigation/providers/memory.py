"""
In-memory navigation store.

Implements NavigationStore with plain dicts guarded by an asyncio lock.
Useful for development and testing without a Redis dependency. All data
is lost on restart.
"""

import asyncio
import copy
import logging
from typing import Any

from navigation.base import NavigationStore, RoleUISettings, TenantOverride

logger = logging.getLogger("navigation")


class MemoryNavigationStore(NavigationStore):
    """
    Navigation store backed by process memory.

    Usage:
        store = MemoryNavigationStore()
        await store.save_layout_record("athlete_tabs", {"order": ["a"], "hidden": []})
        await store.get_layout_record("athlete_tabs")
    """

    def __init__(self):
        """Initialize empty in-memory stores."""
        self._ui_settings: dict[str, RoleUISettings] = {}
        self._tenant_overrides: dict[tuple[str, str], TenantOverride] = {}  # (tenant_id, role) -> override
        self._layouts: dict[str, Any] = {}
        self._group_assignments: dict[str, list[dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

        logger.info("[NAV:MEMORY] Store initialized")

    @property
    def name(self) -> str:
        return "memory"

    # =========================================================================
    # ROLE UI SETTINGS
    # =========================================================================

    async def get_role_ui_settings(self, role: str) -> RoleUISettings | None:
        async with self._lock:
            return self._ui_settings.get(role)

    async def save_role_ui_settings(self, settings: RoleUISettings) -> bool:
        async with self._lock:
            self._ui_settings[settings.role] = settings
        logger.info(f"[NAV:MEMORY] Saved UI settings for {settings.role}")
        return True

    async def delete_role_ui_settings(self, role: str) -> bool:
        async with self._lock:
            return self._ui_settings.pop(role, None) is not None

    # =========================================================================
    # TENANT OVERRIDES
    # =========================================================================

    async def get_tenant_override(self, tenant_id: str, role: str) -> TenantOverride | None:
        async with self._lock:
            return self._tenant_overrides.get((tenant_id, role))

    async def save_tenant_override(self, override: TenantOverride) -> bool:
        async with self._lock:
            self._tenant_overrides[(override.tenant_id, override.role)] = override
        logger.info(f"[NAV:MEMORY] Saved override for tenant {override.tenant_id} / {override.role}")
        return True

    async def delete_tenant_override(self, tenant_id: str, role: str) -> bool:
        async with self._lock:
            return self._tenant_overrides.pop((tenant_id, role), None) is not None

    # =========================================================================
    # LAYOUT RECORDS
    # =========================================================================

    async def get_layout_record(self, feature_key: str) -> Any | None:
        async with self._lock:
            return copy.deepcopy(self._layouts.get(feature_key))

    async def save_layout_record(self, feature_key: str, payload: dict[str, list[str]]) -> bool:
        async with self._lock:
            self._layouts[feature_key] = copy.deepcopy(payload)
        logger.info(f"[NAV:MEMORY] Saved layout '{feature_key}'")
        return True

    async def list_layout_records(self) -> dict[str, Any]:
        async with self._lock:
            return copy.deepcopy(self._layouts)

    # =========================================================================
    # GROUP ASSIGNMENTS
    # =========================================================================

    async def get_group_assignment(self, role: str) -> list[dict[str, Any]] | None:
        async with self._lock:
            return copy.deepcopy(self._group_assignments.get(role))

    async def save_group_assignment(self, role: str, groups: list[dict[str, Any]]) -> bool:
        async with self._lock:
            self._group_assignments[role] = copy.deepcopy(groups)
        logger.info(f"[NAV:MEMORY] Saved sidebar groups for {role} ({len(groups)} groups)")
        return True

    async def delete_group_assignment(self, role: str) -> bool:
        async with self._lock:
            return self._group_assignments.pop(role, None) is not None

    async def delete_all_group_assignments(self) -> int:
        async with self._lock:
            removed = len(self._group_assignments)
            self._group_assignments.clear()
        logger.info(f"[NAV:MEMORY] Reset sidebar groups for all roles ({removed} removed)")
        return removed

    async def list_group_assignments(self) -> dict[str, list[dict[str, Any]]]:
        async with self._lock:
            return copy.deepcopy(self._group_assignments)

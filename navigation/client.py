"""
Unified Navigation Client.

Provides a single interface over any navigation store, plus the
behaviour every caller needs on top of raw storage:
- Fallback to defaults when the store is unreachable
- Discarding replies that arrive after a newer request for the same key
- Publishing saved changes through the change broadcaster
- resolve(): the one entry point every navigation surface renders from
"""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any, Optional, TypeVar

from navigation.base import (
    Group,
    LayoutRecord,
    NavigationStore,
    NavigationStoreError,
    RoleUISettings,
    TenantOverride,
)
from navigation.broadcaster import (
    ChangeBroadcaster,
    get_broadcaster,
    layout_key,
    sidebar_key,
    tenant_override_key,
    ui_settings_key,
)
from navigation.catalog.groups import default_groups
from navigation.catalog.modules import DEFAULT_CATALOG, ModuleCatalog
from navigation.catalog.permissions import DEFAULT_PERMISSION_MATRIX, PermissionMatrix
from navigation.catalog.roles import normalize_role
from navigation.catalog.ui_settings import default_ui_settings
from navigation.reconciler import reconcile, reconcile_groups
from navigation.resolver import GroupedView, resolve_navigation

logger = logging.getLogger("navigation")

T = TypeVar("T")

# Global navigation client instance
_navigation_client: Optional["NavigationClient"] = None


class RequestSequencer:
    """
    Per-key request tickets.

    A reply may be applied only if no newer request for the same key has
    already been applied.
    """

    def __init__(self):
        self._issued: dict[str, int] = {}
        self._applied: dict[str, int] = {}

    def begin(self, key: str) -> int:
        ticket = self._issued.get(key, 0) + 1
        self._issued[key] = ticket
        return ticket

    def try_apply(self, key: str, ticket: int) -> bool:
        if ticket <= self._applied.get(key, 0):
            return False
        self._applied[key] = ticket
        return True


class NavigationClient:
    """
    Unified navigation client that abstracts store-specific implementations.

    Usage:
        from navigation import get_navigation_client

        nav = get_navigation_client()

        # Everything a sidebar needs
        view = await nav.resolve("club", tenant_id="club-42", search_term="sched")

        # Tab strip layouts
        record = await nav.get_layout("athlete_tabs", ["overview", "scores", "history"])
        await nav.save_layout_record("athlete_tabs", record)
    """

    def __init__(
        self,
        store: NavigationStore,
        broadcaster: ChangeBroadcaster | None = None,
        catalog: ModuleCatalog = DEFAULT_CATALOG,
        permissions: PermissionMatrix = DEFAULT_PERMISSION_MATRIX,
    ):
        """
        Initialize the navigation client with a store.

        Args:
            store: The store implementation to use
            broadcaster: Change broadcaster (defaults to the process-wide one)
            catalog: Module catalog used for resolution and drift repair
            permissions: Permission matrix used for resolution
        """
        self._store = store
        self._broadcaster = broadcaster
        self._catalog = catalog
        self._permissions = permissions
        self._sequencer = RequestSequencer()
        self._applied: dict[str, Any] = {}
        logger.info(f"[NAV:CLIENT] Client initialized with store: {store.name}")

    @classmethod
    def from_config(cls, provider_name: Optional[str] = None) -> "NavigationClient":
        """
        Create a NavigationClient using application settings.

        Args:
            provider_name: Which store to use ("memory" or "redis").
                           If None, uses NAVIGATION_STORE (default "memory").

        Returns:
            Configured NavigationClient instance
        """
        from app_settings import settings

        provider_name = provider_name or settings.navigation_store

        if provider_name == "redis":
            from navigation.providers.redis import RedisNavigationStore
            store = RedisNavigationStore(
                redis_url=settings.redis_url,
                key_prefix=settings.redis_key_prefix,
            )
        else:
            from navigation.providers.memory import MemoryNavigationStore
            store = MemoryNavigationStore()

        return cls(store)

    @property
    def store(self) -> NavigationStore:
        """Access the underlying store."""
        return self._store

    @property
    def store_name(self) -> str:
        return self._store.name

    @property
    def broadcaster(self) -> ChangeBroadcaster:
        return self._broadcaster or get_broadcaster()

    @property
    def catalog(self) -> ModuleCatalog:
        return self._catalog

    @property
    def permissions(self) -> PermissionMatrix:
        return self._permissions

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _warn(self, operation: str, error: Exception, warnings: list[str] | None) -> None:
        logger.warning(f"[NAV:CLIENT] {operation} failed, using fallback: {error}")
        if warnings is not None:
            warnings.append(f"Could not load {operation}; showing defaults.")

    async def _guarded(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        fallback: T,
        warnings: list[str] | None = None,
    ) -> T:
        try:
            return await call()
        except NavigationStoreError as e:
            self._warn(operation, e, warnings)
            return fallback

    async def _fetch_latest(
        self,
        key: str,
        operation: str,
        load: Callable[[], Awaitable[Any]],
        warnings: list[str] | None = None,
    ) -> Any:
        """Load a value, applying it only if no newer request for key got there first."""
        ticket = self._sequencer.begin(key)
        try:
            value = await load()
        except NavigationStoreError as e:
            self._warn(operation, e, warnings)
            return self._applied.get(key)

        if self._sequencer.try_apply(key, ticket):
            self._applied[key] = value
            return value

        logger.debug(f"[NAV:CLIENT] Discarded stale reply for '{key}'")
        return self._applied.get(key)

    async def _save_latest(
        self,
        key: str,
        operation: str,
        save: Callable[[], Awaitable[bool]],
        value: Any,
    ) -> bool:
        ticket = self._sequencer.begin(key)
        try:
            saved = await save()
        except NavigationStoreError as e:
            self._warn(operation, e, None)
            return False
        if not saved:
            return False
        if self._sequencer.try_apply(key, ticket):
            self._applied[key] = value
            self.broadcaster.publish(key, value)
        else:
            logger.debug(f"[NAV:CLIENT] Save for '{key}' superseded by a newer request; not published")
        return True

    async def _delete_latest(
        self,
        key: str,
        operation: str,
        delete: Callable[[], Awaitable[bool]],
        value: Any = None,
    ) -> bool:
        """
        Delete a record and publish value (the state that now applies).

        Store failures propagate so callers can tell them apart from
        "nothing to delete"; nothing is published in that case.
        """
        ticket = self._sequencer.begin(key)
        try:
            deleted = await delete()
        except NavigationStoreError as e:
            logger.warning(f"[NAV:CLIENT] {operation} failed: {e}")
            raise
        if deleted and self._sequencer.try_apply(key, ticket):
            self._applied.pop(key, None)
            self.broadcaster.publish(key, value)
        return bool(deleted)

    # =========================================================================
    # ROLE UI SETTINGS
    # =========================================================================

    async def _load_ui_settings(self, role: str, warnings: list[str] | None = None) -> RoleUISettings | None:
        stored = await self._fetch_latest(
            ui_settings_key(role),
            "role UI settings",
            lambda: self._store.get_role_ui_settings(role),
            warnings,
        )
        return stored or default_ui_settings(role)

    async def fetch_role_ui_settings(self, role: str) -> RoleUISettings | None:
        """
        Get a role's UI settings: the saved record, else the role's default.

        Returns None only for unknown roles with nothing saved.
        """
        return await self._load_ui_settings(normalize_role(role))

    async def save_role_ui_settings(self, role: str, patch: Mapping[str, Any]) -> RoleUISettings | None:
        """
        Apply a patch to a role's UI settings and persist the result.

        Returns:
            The saved settings, or None if the store rejected the write
        """
        role = normalize_role(role)
        current = await self._load_ui_settings(role) or RoleUISettings(role=role)
        updated = current.merged(patch)
        saved = await self._save_latest(
            ui_settings_key(role),
            "save role UI settings",
            lambda: self._store.save_role_ui_settings(updated),
            updated,
        )
        if not saved:
            return None
        logger.info(f"[NAV:CLIENT] Updated UI settings for {role}")
        return updated

    async def reset_role_ui_settings(self, role: str) -> RoleUISettings | None:
        """
        Drop a role's saved settings so the default applies again.

        Raises:
            NavigationStoreError: If the store could not delete the record
        """
        role = normalize_role(role)
        default = default_ui_settings(role)
        await self._delete_latest(
            ui_settings_key(role),
            "reset role UI settings",
            lambda: self._store.delete_role_ui_settings(role),
            default,
        )
        return default

    # =========================================================================
    # TENANT OVERRIDES
    # =========================================================================

    async def fetch_tenant_override(
        self,
        tenant_id: str,
        role: str,
        warnings: list[str] | None = None,
    ) -> list[str] | None:
        """The tenant's module list for a role, or None when none is saved (or on failure)."""
        role = normalize_role(role)

        async def load() -> list[str] | None:
            override = await self._store.get_tenant_override(tenant_id, role)
            return list(override.modules) if override is not None else None

        return await self._fetch_latest(tenant_override_key(tenant_id, role), "tenant override", load, warnings)

    async def save_tenant_override(self, tenant_id: str, role: str, modules: Sequence[str]) -> bool:
        """
        Persist a tenant override as given.

        Ids outside the role's allow-list are kept in storage and ignored at
        resolution time.
        """
        role = normalize_role(role)
        override = TenantOverride(tenant_id=tenant_id, role=role, modules=tuple(modules))
        return await self._save_latest(
            tenant_override_key(tenant_id, role),
            "save tenant override",
            lambda: self._store.save_tenant_override(override),
            list(override.modules),
        )

    async def delete_tenant_override(self, tenant_id: str, role: str) -> bool:
        """
        Remove a tenant override. False when there was none.

        Raises:
            NavigationStoreError: If the store could not delete the record
        """
        role = normalize_role(role)
        return await self._delete_latest(
            tenant_override_key(tenant_id, role),
            "delete tenant override",
            lambda: self._store.delete_tenant_override(tenant_id, role),
        )

    # =========================================================================
    # LAYOUT RECORDS
    # =========================================================================

    async def fetch_layout_record(self, feature_key: str) -> LayoutRecord | None:
        """The saved layout for a feature key. Malformed payloads count as absent."""
        async def load() -> LayoutRecord | None:
            return LayoutRecord.from_payload(await self._store.get_layout_record(feature_key))

        return await self._fetch_latest(layout_key(feature_key), "layout record", load)

    async def get_layout(self, feature_key: str, canonical: Sequence[str]) -> LayoutRecord:
        """The saved layout reconciled against the current canonical items."""
        return reconcile(await self.fetch_layout_record(feature_key), canonical)

    async def save_layout_record(self, feature_key: str, record: LayoutRecord) -> bool:
        """Replace the whole layout record for a feature key and notify subscribers."""
        return await self._save_latest(
            layout_key(feature_key),
            "save layout record",
            lambda: self._store.save_layout_record(feature_key, record.to_payload()),
            record,
        )

    async def list_layout_records(self) -> dict[str, LayoutRecord]:
        payloads = await self._guarded("layout records", self._store.list_layout_records, {})
        records = {}
        for feature_key, payload in payloads.items():
            record = LayoutRecord.from_payload(payload)
            if record is not None:
                records[feature_key] = record
        return records

    # =========================================================================
    # GROUP ASSIGNMENTS
    # =========================================================================

    def _parse_groups(self, payload: Any) -> list[Group] | None:
        if not isinstance(payload, list):
            return None
        groups = []
        for item in payload:
            if isinstance(item, Mapping) and item.get("id"):
                groups.append(Group.from_dict(item))
        return reconcile_groups(groups, self._catalog)

    async def fetch_group_assignment(
        self,
        role: str,
        warnings: list[str] | None = None,
    ) -> list[Group] | None:
        """A role's saved sidebar groups (repaired against the catalog), or None."""
        role = normalize_role(role)

        async def load() -> list[Group] | None:
            return self._parse_groups(await self._store.get_group_assignment(role))

        return await self._fetch_latest(sidebar_key(role), "sidebar groups", load, warnings)

    async def get_sidebar_groups(self, role: str, warnings: list[str] | None = None) -> list[Group]:
        """The role's saved groups, else the default groups."""
        groups = await self.fetch_group_assignment(role, warnings)
        return groups if groups is not None else default_groups()

    async def save_group_assignment(self, role: str, groups: Sequence[Group]) -> bool:
        role = normalize_role(role)
        groups = list(groups)
        saved = await self._save_latest(
            sidebar_key(role),
            "save sidebar groups",
            lambda: self._store.save_group_assignment(role, [g.to_dict() for g in groups]),
            groups,
        )
        if saved:
            logger.info(f"[NAV:CLIENT] Saved {len(groups)} sidebar groups for {role}")
        return saved

    async def reset_group_assignment(self, role: str) -> bool:
        """
        Revert one role to the default groups. False when nothing was saved.

        Raises:
            NavigationStoreError: If the store could not delete the record
        """
        role = normalize_role(role)
        return await self._delete_latest(
            sidebar_key(role),
            "reset sidebar groups",
            lambda: self._store.delete_group_assignment(role),
        )

    async def reset_all_group_assignments(self) -> int:
        """
        Revert every role to the default groups.

        Raises:
            NavigationStoreError: If the store could not list or delete records
        """
        try:
            roles = list(await self._store.list_group_assignments())
            removed = await self._store.delete_all_group_assignments()
        except NavigationStoreError as e:
            logger.warning(f"[NAV:CLIENT] reset all sidebar groups failed: {e}")
            raise

        if removed:
            for role in roles:
                key = sidebar_key(role)
                if self._sequencer.try_apply(key, self._sequencer.begin(key)):
                    self._applied.pop(key, None)
                    self.broadcaster.publish(key, None)
        logger.info(f"[NAV:CLIENT] Reset sidebar groups for all roles ({removed} removed)")
        return removed

    async def list_group_assignments(self) -> dict[str, list[Group]]:
        payloads = await self._guarded("sidebar groups", self._store.list_group_assignments, {})
        assignments = {}
        for role, payload in payloads.items():
            groups = self._parse_groups(payload)
            if groups is not None:
                assignments[role] = groups
        return assignments

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    async def resolve(
        self,
        role: str,
        tenant_id: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> GroupedView:
        """
        Resolve the grouped navigation for a role, optionally scoped to a tenant.

        Store failures fall back to defaults and are reported in
        GroupedView.warnings. Unknown roles resolve to an empty view.
        """
        role = normalize_role(role)
        warnings: list[str] = []

        ui_settings = await self._load_ui_settings(role, warnings)
        override = None
        if tenant_id:
            override = await self.fetch_tenant_override(tenant_id, role, warnings)
        groups = await self.get_sidebar_groups(role, warnings)

        view = resolve_navigation(
            role,
            ui_settings=ui_settings,
            groups=groups,
            tenant_override=override,
            search_term=search_term,
            tenant_id=tenant_id,
            catalog=self._catalog,
            permissions=self._permissions,
        )
        if warnings:
            return replace(view, warnings=tuple(warnings))
        return view


# =============================================================================
# MODULE-LEVEL FUNCTIONS
# =============================================================================


def get_navigation_client() -> NavigationClient:
    """
    Get the global navigation client instance.

    Creates one if it doesn't exist.
    """
    global _navigation_client
    if _navigation_client is None:
        _navigation_client = NavigationClient.from_config()
    return _navigation_client


def set_navigation_client(client: NavigationClient) -> None:
    """
    Set the global navigation client instance.

    Args:
        client: NavigationClient to use globally
    """
    global _navigation_client
    _navigation_client = client
    logger.info(f"[NAV:CLIENT] Global client set to: {client.store_name}")


def reset_navigation_client() -> None:
    """Reset the global navigation client (mainly for testing)."""
    global _navigation_client
    _navigation_client = None


async def resolve(
    role: str,
    tenant_id: Optional[str] = None,
    search_term: Optional[str] = None,
) -> GroupedView:
    """Convenience function to resolve navigation using the global client."""
    return await get_navigation_client().resolve(role, tenant_id, search_term)

"""
Core types and the abstract storage interface for role-aware navigation.

Navigation is resolved from layered configuration:
- Catalogs: modules, groups, default permissions (fixed at build time)
- Role UI Settings: the ordered allow-list per role (administrator-editable)
- Tenant Overrides: per-club narrowing of a role's allow-list
- Layout Records: per-feature {order, hidden} for editable tab strips
- Group Assignments: per-role custom sidebar grouping

Each store implements its own storage-specific syntax.
Follows the same pattern as the provider bases elsewhere in the platform.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class NavigationStoreError(Exception):
    """Raised by a store when the underlying transport fails."""

    def __init__(self, message: str, operation: str | None = None):
        self.operation = operation
        super().__init__(message)


class Capability(str, Enum):
    """Actions a role may hold on a module."""
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


# =============================================================================
# CATALOG ENTRIES
# =============================================================================

@dataclass(frozen=True)
class Module:
    """
    A navigable functional area.

    If restricted_to is set, a role absent from it never sees the module,
    whatever any allow-list or override says.
    """
    id: str
    label: str
    icon: str
    category: str
    default_roles: tuple[str, ...] = ()
    restricted_to: tuple[str, ...] | None = None

    def allows_role(self, role: str) -> bool:
        """Check the hard restriction for a (normalized) role."""
        return self.restricted_to is None or role in self.restricted_to

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on label or id. term must be lowercase."""
        return term in self.label.lower() or term in self.id.lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "category": self.category,
            "default_roles": list(self.default_roles),
            "restricted_to": list(self.restricted_to) if self.restricted_to is not None else None,
        }


@dataclass(frozen=True)
class Group:
    """
    A labelled sidebar container.

    nested_modules maps a parent member to child module ids that render
    only under that parent.
    """
    id: str
    label: str
    icon: str = "Folder"
    color: str = "primary"
    modules: tuple[str, ...] = ()
    nested_modules: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def nested_children(self) -> set[str]:
        """Child ids nested under a member of this group."""
        children: set[str] = set()
        for parent, kids in self.nested_modules.items():
            if parent in self.modules:
                children.update(kids)
        return children

    def with_modules(self, modules: Sequence[str]) -> "Group":
        return replace(self, modules=tuple(modules))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "color": self.color,
            "modules": list(self.modules),
        }
        if self.nested_modules:
            data["nestedModules"] = {k: list(v) for k, v in self.nested_modules.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Group":
        """Build a group from a stored payload (camelCase or snake_case nesting key)."""
        nested = data.get("nestedModules") or data.get("nested_modules") or {}
        return cls(
            id=str(data["id"]),
            label=str(data.get("label") or data["id"]),
            icon=data.get("icon") or "Folder",
            color=data.get("color") or "primary",
            modules=tuple(data.get("modules") or ()),
            nested_modules={str(k): tuple(v or ()) for k, v in nested.items()},
        )


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

@dataclass(frozen=True)
class RoleUISettings:
    """Per-role presentation settings and the ordered module allow-list."""
    role: str
    primary_color: str = "#3b82f6"
    accent_color: str = "#0ea5e9"
    sidebar_modules: tuple[str, ...] = ()
    dashboard_widgets: tuple[str, ...] = ()

    def merged(self, patch: Mapping[str, Any]) -> "RoleUISettings":
        """Return a copy with the non-None fields of patch applied."""
        changes: dict[str, Any] = {}
        for key in ("primary_color", "accent_color"):
            if patch.get(key) is not None:
                changes[key] = patch[key]
        for key in ("sidebar_modules", "dashboard_widgets"):
            if patch.get(key) is not None:
                changes[key] = tuple(patch[key])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "primary_color": self.primary_color,
            "accent_color": self.accent_color,
            "sidebar_modules": list(self.sidebar_modules),
            "dashboard_widgets": list(self.dashboard_widgets),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoleUISettings":
        defaults = cls(role=str(data["role"]))
        return defaults.merged(data)


@dataclass(frozen=True)
class TenantOverride:
    """A tenant's ordered module list for one role. Can only narrow."""
    tenant_id: str
    role: str
    modules: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"tenant_id": self.tenant_id, "role": self.role, "modules": list(self.modules)}


@dataclass(frozen=True)
class LayoutRecord:
    """
    Saved {order, hidden} for one feature key.

    order need not cover every canonical item; hidden is independent of order.
    """
    order: tuple[str, ...] = ()
    hidden: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "LayoutRecord | None":
        """Parse the wire shape. Anything lacking a list order or hidden is absent."""
        if not isinstance(payload, Mapping):
            return None
        order = payload.get("order")
        hidden = payload.get("hidden")
        if not isinstance(order, list) or not isinstance(hidden, list):
            return None
        return cls(
            order=tuple(str(item) for item in order),
            hidden=tuple(str(item) for item in hidden),
        )

    def to_payload(self) -> dict[str, list[str]]:
        return {"order": list(self.order), "hidden": list(self.hidden)}


# =============================================================================
# STORAGE INTERFACE
# =============================================================================

class NavigationStore(ABC):
    """
    Abstract base class for navigation configuration stores.

    Every method may raise NavigationStoreError on transport failure.
    Absent records are reported as None, never as an error.
    Roles passed in are already normalized (uppercase).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Store name (e.g., 'memory', 'redis')."""
        pass

    # =========================================================================
    # ROLE UI SETTINGS
    # =========================================================================

    @abstractmethod
    async def get_role_ui_settings(self, role: str) -> RoleUISettings | None:
        pass

    @abstractmethod
    async def save_role_ui_settings(self, settings: RoleUISettings) -> bool:
        pass

    @abstractmethod
    async def delete_role_ui_settings(self, role: str) -> bool:
        pass

    # =========================================================================
    # TENANT OVERRIDES
    # =========================================================================

    @abstractmethod
    async def get_tenant_override(self, tenant_id: str, role: str) -> TenantOverride | None:
        pass

    @abstractmethod
    async def save_tenant_override(self, override: TenantOverride) -> bool:
        pass

    @abstractmethod
    async def delete_tenant_override(self, tenant_id: str, role: str) -> bool:
        pass

    # =========================================================================
    # LAYOUT RECORDS
    # =========================================================================

    @abstractmethod
    async def get_layout_record(self, feature_key: str) -> Any | None:
        """Return the raw stored payload; the caller validates its shape."""
        pass

    @abstractmethod
    async def save_layout_record(self, feature_key: str, payload: dict[str, list[str]]) -> bool:
        pass

    async def list_layout_records(self) -> dict[str, Any]:
        """All stored layout payloads keyed by feature key. Override in stores."""
        return {}

    # =========================================================================
    # GROUP ASSIGNMENTS
    # =========================================================================

    @abstractmethod
    async def get_group_assignment(self, role: str) -> list[dict[str, Any]] | None:
        pass

    @abstractmethod
    async def save_group_assignment(self, role: str, groups: list[dict[str, Any]]) -> bool:
        pass

    @abstractmethod
    async def delete_group_assignment(self, role: str) -> bool:
        pass

    async def delete_all_group_assignments(self) -> int:
        """Remove every role's custom grouping. Returns how many were removed."""
        removed = 0
        for role in list(await self.list_group_assignments()):
            if await self.delete_group_assignment(role):
                removed += 1
        return removed

    async def list_group_assignments(self) -> dict[str, list[dict[str, Any]]]:
        """All stored group assignments keyed by role. Override in stores."""
        return {}

"""
Visibility resolution.

Every navigation surface (sidebar, tab strips, shortcut pickers) projects
from the output of resolve_navigation(). The layers, narrowest last:

1. Role allow-list (RoleUISettings.sidebar_modules), in its order
2. Permission matrix VIEW set for the role
3. Module restriction (Module.restricted_to)
4. Tenant override (narrows only, never widens)
5. Grouping with nested children
6. Search filter

The resolver is pure: same inputs, same output. Unknown roles resolve to
an empty view.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from navigation.base import Group, RoleUISettings
from navigation.catalog.modules import DEFAULT_CATALOG, ModuleCatalog
from navigation.catalog.permissions import DEFAULT_PERMISSION_MATRIX, PermissionMatrix
from navigation.catalog.roles import normalize_role


@dataclass(frozen=True)
class ResolvedItem:
    """A visible module, with the children that render under it."""
    id: str
    label: str
    icon: str
    category: str
    children: tuple["ResolvedItem", ...] = ()
    matched: bool = True  # False when kept only because a child matched the search

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "category": self.category,
            "matched": self.matched,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class ResolvedGroup:
    id: str
    label: str
    icon: str
    color: str
    items: tuple[ResolvedItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "color": self.color,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class GroupedView:
    """The resolved, grouped navigation for one role (and optionally one tenant)."""
    role: str
    groups: tuple[ResolvedGroup, ...] = ()
    tenant_id: str | None = None
    search_term: str | None = None
    warnings: tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def module_ids(self) -> set[str]:
        """Every module id the view renders, top-level or nested."""
        ids: set[str] = set()
        for group in self.groups:
            for item in group.items:
                ids.add(item.id)
                ids.update(child.id for child in item.children)
        return ids

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "tenant_id": self.tenant_id,
            "search_term": self.search_term,
            "groups": [group.to_dict() for group in self.groups],
            "warnings": list(self.warnings),
        }


def effective_modules(
    role: str,
    *,
    ui_settings: RoleUISettings | None,
    tenant_override: Sequence[str] | None = None,
    catalog: ModuleCatalog = DEFAULT_CATALOG,
    permissions: PermissionMatrix = DEFAULT_PERMISSION_MATRIX,
) -> list[str]:
    """
    The ordered module ids a role may see, before grouping and search.

    Ordering follows the allow-list. An override can only remove ids.
    """
    if ui_settings is None:
        return []

    role = normalize_role(role)
    viewable = permissions.viewable_modules(role)
    allowed: list[str] = []
    seen: set[str] = set()
    for module_id in ui_settings.sidebar_modules:
        if module_id in seen:
            continue
        seen.add(module_id)
        if module_id in viewable and catalog.is_visible_to(module_id, role):
            allowed.append(module_id)

    if tenant_override is not None:
        narrowed = set(tenant_override)
        allowed = [module_id for module_id in allowed if module_id in narrowed]

    return allowed


def _resolve_item(module_id: str, catalog: ModuleCatalog, children: tuple[ResolvedItem, ...] = (),
                  matched: bool = True) -> ResolvedItem | None:
    module = catalog.get(module_id)
    if module is None:
        return None
    return ResolvedItem(
        id=module.id,
        label=module.label,
        icon=module.icon,
        category=module.category,
        children=children,
        matched=matched,
    )


def _resolve_group(
    group: Group,
    effective: set[str],
    term: str,
    catalog: ModuleCatalog,
) -> ResolvedGroup | None:
    nested_children = group.nested_children()
    items: list[ResolvedItem] = []

    for module_id in group.modules:
        if module_id not in effective or module_id in nested_children:
            continue
        module = catalog.get(module_id)
        if module is None:
            continue

        child_ids = [c for c in group.nested_modules.get(module_id, ()) if c in effective and c != module_id]
        child_modules = [catalog.get(c) for c in dict.fromkeys(child_ids)]
        child_modules = [c for c in child_modules if c is not None]

        matched = True
        if term:
            matched = module.matches(term)
            child_modules = [c for c in child_modules if c.matches(term)]
            if not matched and not child_modules:
                continue

        children = tuple(
            item for item in (_resolve_item(c.id, catalog) for c in child_modules) if item is not None
        )
        item = _resolve_item(module_id, catalog, children=children, matched=matched)
        if item is not None:
            items.append(item)

    if not items:
        return None
    return ResolvedGroup(
        id=group.id,
        label=group.label,
        icon=group.icon,
        color=group.color,
        items=tuple(items),
    )


def resolve_navigation(
    role: str,
    *,
    ui_settings: RoleUISettings | None,
    groups: Sequence[Group],
    tenant_override: Sequence[str] | None = None,
    search_term: str | None = None,
    tenant_id: str | None = None,
    catalog: ModuleCatalog = DEFAULT_CATALOG,
    permissions: PermissionMatrix = DEFAULT_PERMISSION_MATRIX,
) -> GroupedView:
    """
    Resolve the grouped navigation a role sees.

    Args:
        role: Role name (normalized internally)
        ui_settings: The role's settings; None resolves to an empty view
        groups: Sidebar groups in display order
        tenant_override: The tenant's module list for this role, if any
        search_term: Case-insensitive substring filter on label or id
        tenant_id: Carried into the view for the caller's reference
        catalog: Module catalog
        permissions: Permission matrix

    Returns:
        GroupedView with empty groups dropped and input order preserved
    """
    role = normalize_role(role)
    effective = set(effective_modules(
        role,
        ui_settings=ui_settings,
        tenant_override=tenant_override,
        catalog=catalog,
        permissions=permissions,
    ))
    term = (search_term or "").strip().lower()

    resolved = []
    if effective:
        for group in groups:
            resolved_group = _resolve_group(group, effective, term, catalog)
            if resolved_group is not None:
                resolved.append(resolved_group)

    return GroupedView(
        role=role,
        groups=tuple(resolved),
        tenant_id=tenant_id,
        search_term=term or None,
    )

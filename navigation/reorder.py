"""
Reorder and move operations behind the drag-and-drop editors.

Two editors share these rules:
- Tab strip editor: reorders a flat LayoutRecord and toggles hidden items
- Sidebar builder: moves modules between groups (and the virtual
  "available" pool), reorders modules inside a group, reorders groups

All functions are pure and return new state. Drag events routinely
reference stale or unknown ids; such moves return state equal to the
input instead of raising.

Usage:
    from navigation.reorder import GroupLayout, ReorderSession, move_item

    move_item(["a", "b", "c"], "c", "a")          # ['c', 'a', 'b']

    session = ReorderSession("SUPPLIER", groups)
    session.drag_over("labs", "jersey_orders")    # pool -> Supplier group
    session.drag_end("labs", "jersey_dashboard")  # reorder inside the group
    groups = session.to_groups()
"""

import logging
import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace

from navigation.base import Group, LayoutRecord
from navigation.catalog.modules import DEFAULT_CATALOG, Module, ModuleCatalog
from navigation.catalog.roles import normalize_role

logger = logging.getLogger("navigation")

# Virtual container holding catalog modules that are in no group.
AVAILABLE_POOL = "available"


def array_move(items: Sequence[str], old_index: int, new_index: int) -> list[str]:
    """Remove the item at old_index and insert it at new_index."""
    result = list(items)
    result.insert(new_index, result.pop(old_index))
    return result


def move_item(items: Sequence[str], source: str, destination: str) -> list[str]:
    """
    Move source to destination's position within one list.

    No-op when source equals destination or either is absent.
    """
    if source == destination or source not in items or destination not in items:
        return list(items)
    return array_move(items, list(items).index(source), list(items).index(destination))


# =============================================================================
# TAB STRIP LAYOUTS
# =============================================================================

def reorder_layout(record: LayoutRecord, source: str, destination: str) -> LayoutRecord:
    """Reorder a layout record's order; hidden is untouched."""
    order = move_item(record.order, source, destination)
    if order == list(record.order):
        return record
    return replace(record, order=tuple(order))


def toggle_hidden(record: LayoutRecord, item_id: str) -> LayoutRecord:
    """Hide a visible item or show a hidden one. Unknown ids are a no-op."""
    if item_id not in record.order and item_id not in record.hidden:
        return record
    if item_id in record.hidden:
        return replace(record, hidden=tuple(h for h in record.hidden if h != item_id))
    return replace(record, hidden=record.hidden + (item_id,))


# =============================================================================
# SIDEBAR GROUP LAYOUTS
# =============================================================================

@dataclass(frozen=True)
class GroupLayout:
    """
    Sidebar groups as a flat map keyed by group id plus the display order.

    Membership edits only touch the entries they change.
    """
    group_order: tuple[str, ...]
    groups: Mapping[str, Group]

    @classmethod
    def from_groups(cls, groups: Iterable[Group]) -> "GroupLayout":
        by_id: dict[str, Group] = {}
        for group in groups:
            by_id.setdefault(group.id, group)
        return cls(group_order=tuple(by_id), groups=by_id)

    def to_groups(self) -> list[Group]:
        return [self.groups[group_id] for group_id in self.group_order]

    def container_of(self, item_id: str) -> str | None:
        """The group id holding a module (first in display order), the group itself, or None."""
        if item_id in self.groups:
            return item_id
        for group_id in self.group_order:
            if item_id in self.groups[group_id].modules:
                return group_id
        return None

    def assigned_ids(self) -> set[str]:
        assigned: set[str] = set()
        for group in self.groups.values():
            assigned.update(group.modules)
        return assigned

    def _with_group(self, group: Group) -> "GroupLayout":
        groups = dict(self.groups)
        groups[group.id] = group
        return replace(self, groups=groups)


def _locate(layout: GroupLayout, item_id: str, pool: Sequence[str]) -> str | None:
    if item_id == AVAILABLE_POOL:
        return AVAILABLE_POOL
    container = layout.container_of(item_id)
    if container is not None:
        return container
    if item_id in pool:
        return AVAILABLE_POOL
    return None


def reorder_in_group(layout: GroupLayout, source: str, destination: str) -> GroupLayout:
    """
    Reorder a module within its own group.

    Dropping onto the group's own id moves the module to the end. Moves
    across groups are not handled here.
    """
    group_id = layout.container_of(source)
    if group_id is None or group_id == source:
        return layout
    group = layout.groups[group_id]
    modules = list(group.modules)

    if destination == group_id:
        new_index = len(modules) - 1
    elif destination in modules:
        new_index = modules.index(destination)
    else:
        return layout

    old_index = modules.index(source)
    if old_index == new_index:
        return layout
    return layout._with_group(group.with_modules(array_move(modules, old_index, new_index)))


def move_between_groups(
    layout: GroupLayout,
    source: str,
    destination: str,
    pool: Sequence[str] = (),
) -> GroupLayout:
    """
    Move a module to another group or to/from the available pool.

    The module lands at the destination module's index, or at the end when
    the destination is the group id itself. Moving into a group that
    already holds the module only removes it from its origin.
    """
    origin = _locate(layout, source, pool)
    target = _locate(layout, destination, pool)
    if origin is None or target is None or origin == target or source == origin:
        logger.debug(f"[NAV:REORDER] Ignored move of '{source}' over '{destination}'")
        return layout

    result = layout
    if origin != AVAILABLE_POOL:
        group = result.groups[origin]
        result = result._with_group(group.with_modules([m for m in group.modules if m != source]))

    if target != AVAILABLE_POOL:
        group = result.groups[target]
        modules = list(group.modules)
        if source not in modules:
            index = modules.index(destination) if destination in modules else len(modules)
            modules.insert(index, source)
            result = result._with_group(group.with_modules(modules))

    return result


def reorder_groups(layout: GroupLayout, source: str, destination: str) -> GroupLayout:
    """
    Move group source to the position of destination.

    destination may be a group id or a module held by a group.
    """
    target = layout.container_of(destination)
    if source not in layout.groups or target is None:
        return layout
    order = move_item(layout.group_order, source, target)
    if tuple(order) == layout.group_order:
        return layout
    return replace(layout, group_order=tuple(order))


# =============================================================================
# EDITOR SESSION
# =============================================================================

class ReorderSession:
    """
    Working state of the sidebar builder for one role.

    Holds the current GroupLayout and applies drag events to it. Nothing is
    persisted here; callers save to_groups() through the client.
    """

    def __init__(
        self,
        role: str,
        groups: Iterable[Group],
        catalog: ModuleCatalog = DEFAULT_CATALOG,
    ):
        self.role = normalize_role(role)
        self._catalog = catalog
        self._initial = GroupLayout.from_groups(groups)
        self._layout = self._initial

    @property
    def layout(self) -> GroupLayout:
        return self._layout

    @property
    def dirty(self) -> bool:
        return self._layout != self._initial

    def to_groups(self) -> list[Group]:
        return self._layout.to_groups()

    def available_modules(self, search_term: str | None = None) -> list[Module]:
        """Catalog modules in no group that the role may hold, optionally filtered."""
        assigned = self._layout.assigned_ids()
        term = (search_term or "").strip().lower()
        return [
            module for module in self._catalog.for_role(self.role)
            if module.id not in assigned and (not term or module.matches(term))
        ]

    def _pool(self) -> list[str]:
        assigned = self._layout.assigned_ids()
        return [module_id for module_id in self._catalog.ids() if module_id not in assigned]

    def drag_over(self, active_id: str, over_id: str | None, is_group: bool = False) -> GroupLayout:
        """Live drag feedback: group reorder, or a module changing container."""
        if over_id is None:
            return self._layout
        if is_group:
            if over_id != AVAILABLE_POOL and active_id != over_id:
                self._layout = reorder_groups(self._layout, active_id, over_id)
            return self._layout
        self._layout = move_between_groups(self._layout, active_id, over_id, self._pool())
        return self._layout

    def drag_end(self, active_id: str, over_id: str | None, is_group: bool = False) -> GroupLayout:
        """Drop: settles a module's position inside its group."""
        if over_id is None or is_group:
            return self._layout
        self._layout = reorder_in_group(self._layout, active_id, over_id)
        return self._layout

    def add_group(self, label: str = "New Group", group_id: str | None = None) -> Group:
        group_id = group_id or f"group_{uuid.uuid4().hex[:8]}"
        if group_id in self._layout.groups:
            return self._layout.groups[group_id]
        group = Group(id=group_id, label=label, icon="Folder", color="blue")
        self._layout = replace(
            self._layout._with_group(group),
            group_order=self._layout.group_order + (group_id,),
        )
        return group

    def remove_group(self, group_id: str) -> bool:
        """Remove a group; its modules return to the available pool."""
        if group_id not in self._layout.groups:
            return False
        groups = dict(self._layout.groups)
        del groups[group_id]
        self._layout = GroupLayout(
            group_order=tuple(g for g in self._layout.group_order if g != group_id),
            groups=groups,
        )
        return True

    def rename_group(self, group_id: str, label: str) -> bool:
        group = self._layout.groups.get(group_id)
        if group is None:
            return False
        self._layout = self._layout._with_group(replace(group, label=label))
        return True

    def reset(self, groups: Iterable[Group]) -> None:
        """Replace the working state, e.g. after a reset to defaults."""
        self._initial = GroupLayout.from_groups(groups)
        self._layout = self._initial

"""
Order/hidden reconciliation.

Saved layouts outlive the item lists they were saved against: items get
added, renamed and removed between releases. reconcile() repairs a saved
record against the current canonical list so that the result always
covers exactly the canonical items, keeps the user's relative order for
items that still exist, and appends new items in canonical order.

Usage:
    from navigation.reconciler import reconcile, apply_layout

    record = reconcile(LayoutRecord.from_payload(stored), ["a", "b", "c"])
    tabs = apply_layout(all_tabs, record, key=lambda tab: tab["id"])
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from navigation.base import Group, LayoutRecord
from navigation.catalog.modules import DEFAULT_CATALOG, ModuleCatalog

logger = logging.getLogger("navigation")

T = TypeVar("T")

# Position assigned to items missing from a saved order when projecting.
_UNORDERED = 999


def _dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def reconcile(persisted: LayoutRecord | None, canonical: Sequence[str]) -> LayoutRecord:
    """
    Repair a saved layout against the current canonical item list.

    Args:
        persisted: The saved record, or None if nothing was saved
        canonical: Current item ids in their default order

    Returns:
        A record whose order is a permutation of the de-duplicated canonical
        ids and whose hidden list only names canonical ids.
    """
    canonical_ids = _dedupe(canonical)
    if persisted is None:
        return LayoutRecord(order=tuple(canonical_ids), hidden=())

    known = set(canonical_ids)
    order = _dedupe(item for item in persisted.order if item in known)
    placed = set(order)
    order.extend(item for item in canonical_ids if item not in placed)

    hidden = _dedupe(item for item in persisted.hidden if item in known)

    dropped = len(set(persisted.order) - known)
    if dropped:
        logger.debug(f"[NAV:RECONCILE] Dropped {dropped} stale ids from saved order")

    return LayoutRecord(order=tuple(order), hidden=tuple(hidden))


def apply_layout(
    items: Sequence[T],
    record: LayoutRecord | None,
    key: Callable[[T], str] = str,
) -> list[T]:
    """
    Project items through a layout: drop hidden items, then sort by saved position.

    Items absent from the saved order keep their relative order after the
    ordered ones.
    """
    if record is None:
        return list(items)

    hidden = set(record.hidden)
    position = {item_id: index for index, item_id in enumerate(record.order)}
    visible = [item for item in items if key(item) not in hidden]
    return sorted(visible, key=lambda item: position.get(key(item), _UNORDERED))


def reconcile_groups(groups: Iterable[Group], catalog: ModuleCatalog = DEFAULT_CATALOG) -> list[Group]:
    """
    Drop module ids the catalog no longer knows from saved groups.

    Members are de-duplicated within each group; nested maps lose unknown
    parents and children.
    """
    repaired = []
    for group in groups:
        modules = _dedupe(m for m in group.modules if m in catalog)
        nested = {
            parent: tuple(_dedupe(child for child in children if child in catalog))
            for parent, children in group.nested_modules.items()
            if parent in catalog
        }
        if list(group.modules) != modules or dict(group.nested_modules) != nested:
            logger.debug(f"[NAV:RECONCILE] Repaired stale ids in group '{group.id}'")
        repaired.append(Group(
            id=group.id,
            label=group.label,
            icon=group.icon,
            color=group.color,
            modules=tuple(modules),
            nested_modules=nested,
        ))
    return repaired

"""
Default permission matrix.

Each role has a rule per capability deciding, for every catalog module,
whether the capability is granted. VIEW=False removes the module from
every navigation surface for that role.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from navigation.base import Capability
from navigation.catalog.modules import DEFAULT_CATALOG, ModuleCatalog
from navigation.catalog.roles import UserRole, normalize_role

Rule = Callable[[str], bool]


@dataclass(frozen=True)
class ModulePermission:
    """Capabilities one role holds on one module."""
    module: str
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False

    def allows(self, capability: Capability) -> bool:
        return getattr(self, f"can_{capability.value}")

    def to_dict(self) -> dict[str, object]:
        return {
            "module": self.module,
            "can_view": self.can_view,
            "can_create": self.can_create,
            "can_edit": self.can_edit,
            "can_delete": self.can_delete,
        }


def _always(_module: str) -> bool:
    return True


def _never(_module: str) -> bool:
    return False


def _only(*names: str) -> Rule:
    allowed = frozenset(names)
    return lambda module: module in allowed


def _except(*names: str) -> Rule:
    denied = frozenset(names)
    return lambda module: module not in denied


# role -> (view, create, edit, delete)
DEFAULT_RULES: dict[str, tuple[Rule, Rule, Rule, Rule]] = {
    UserRole.SUPER_ADMIN.value: (_always, _always, _always, _always),
    UserRole.PERPANI.value: (_always, _except("admin"), _except("admin"), _only("athletes", "schedules")),
    UserRole.CLUB.value: (_except("admin"), _except("admin"), _except("admin"), _except("admin")),
    UserRole.SCHOOL.value: (
        _except("admin", "finance"),
        _only("athletes", "schedules", "attendance"),
        _only("athletes", "schedules", "profile"),
        _never,
    ),
    UserRole.ATHLETE.value: (
        _only("dashboard", "scoring", "bleep_test", "schedules", "attendance", "analytics", "profile",
              "digitalcard", "archerconfig", "athlete_training_schedule", "athlete_archery_guidance",
              "achievements", "progress", "events"),
        _only("scoring"),
        _only("profile", "archerconfig"),
        _never,
    ),
    UserRole.PARENT.value: (
        _only("dashboard", "schedules", "analytics", "profile", "digitalcard", "finance", "events"),
        _never,
        _only("profile"),
        _never,
    ),
    UserRole.COACH.value: (
        _except("finance", "admin"),
        _only("scoring", "bleep_test", "schedules", "attendance"),
        _only("athletes", "scoring", "schedules", "profile", "coach_analytics"),
        _never,
    ),
    UserRole.JUDGE.value: (
        _only("dashboard", "scoring", "schedules", "athletes", "profile", "digitalcard"),
        _only("scoring"),
        _only("scoring", "profile"),
        _never,
    ),
    UserRole.EO.value: (
        _only("dashboard", "schedules", "athletes", "attendance", "reports", "profile", "digitalcard",
              "events", "event_creation", "event_registration", "event_results"),
        _only("schedules", "event_creation"),
        _only("schedules", "profile", "event_creation", "event_registration", "event_results"),
        _never,
    ),
    UserRole.SUPPLIER.value: (
        _only("dashboard", "inventory", "profile", "digitalcard"),
        _only("inventory"),
        _only("inventory", "profile"),
        _never,
    ),
    UserRole.MANPOWER.value: (
        _only("dashboard", "profile", "inventory", "schedules", "finance"),
        _never,
        _only("profile"),
        _never,
    ),
    UserRole.LEGAL.value: (
        _only("dashboard", "profile", "digitalcard", "admin", "audit_logs", "notifications"),
        _never,
        _only("profile"),
        _never,
    ),
}


class PermissionMatrix:
    """
    Immutable (role, module, capability) -> bool table.

    Lookups for unknown roles or modules answer False.
    """

    def __init__(self, entries: Mapping[str, Mapping[str, ModulePermission]]):
        self._entries: dict[str, dict[str, ModulePermission]] = {
            normalize_role(role): dict(perms) for role, perms in entries.items()
        }

    @classmethod
    def from_rules(
        cls,
        rules: Mapping[str, tuple[Rule, Rule, Rule, Rule]],
        catalog: ModuleCatalog = DEFAULT_CATALOG,
    ) -> "PermissionMatrix":
        """Expand per-role rules over every catalog module."""
        entries: dict[str, dict[str, ModulePermission]] = {}
        for role, (view, create, edit, delete) in rules.items():
            entries[role] = {
                module_id: ModulePermission(
                    module=module_id,
                    can_view=view(module_id),
                    can_create=create(module_id),
                    can_edit=edit(module_id),
                    can_delete=delete(module_id),
                )
                for module_id in catalog.ids()
            }
        return cls(entries)

    def roles(self) -> list[str]:
        return list(self._entries)

    def get(self, role: str, module: str) -> ModulePermission | None:
        return self._entries.get(normalize_role(role), {}).get(module)

    def has_permission(self, role: str, module: str, capability: Capability = Capability.VIEW) -> bool:
        entry = self.get(role, module)
        return entry is not None and entry.allows(capability)

    def viewable_modules(self, role: str) -> frozenset[str]:
        """Modules the role may view. Empty for unknown roles."""
        perms = self._entries.get(normalize_role(role), {})
        return frozenset(module for module, entry in perms.items() if entry.can_view)

    def for_role(self, role: str) -> list[ModulePermission]:
        return list(self._entries.get(normalize_role(role), {}).values())

    def with_permission(
        self,
        role: str,
        module: str,
        capability: Capability,
        enabled: bool,
    ) -> "PermissionMatrix":
        """Return a new matrix with one capability toggled."""
        role = normalize_role(role)
        entries = {r: dict(perms) for r, perms in self._entries.items()}
        perms = entries.setdefault(role, {})
        current = perms.get(module) or ModulePermission(module=module)
        perms[module] = replace(current, **{f"can_{capability.value}": enabled})
        return PermissionMatrix(entries)


def build_default_permission_matrix(catalog: ModuleCatalog = DEFAULT_CATALOG) -> PermissionMatrix:
    return PermissionMatrix.from_rules(DEFAULT_RULES, catalog)


DEFAULT_PERMISSION_MATRIX = build_default_permission_matrix()

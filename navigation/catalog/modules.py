"""
Module catalog.

The catalog is fixed at build time. Order here is the canonical module
order, used wherever no other ordering applies (e.g. the super admin
allow-list and the available pool in the sidebar editor).
"""

from collections.abc import Iterable, Iterator

from navigation.base import Module

_JERSEY_ROLES = ("SUPPLIER", "SUPER_ADMIN", "MANPOWER")
_FEDERATION_ROLES = ("PERPANI", "SUPER_ADMIN")
_MEMBER_ROLES = ("ATHLETE", "COACH", "CLUB", "SCHOOL", "PARENT", "EO", "JUDGE", "SUPPLIER", "MANPOWER")


MODULE_LIST: tuple[Module, ...] = (
    # General
    Module("dashboard", "Dashboard", "LayoutDashboard", "general", _MEMBER_ROLES),
    Module("profile", "Profile", "User", "general", _MEMBER_ROLES),
    Module("digitalcard", "Digital ID Card", "CreditCard", "general", _MEMBER_ROLES[:-1]),
    Module("notifications", "Notifications", "Bell", "general", ("ATHLETE", "COACH", "CLUB", "SCHOOL", "PARENT")),
    Module("labs", "Csystem Labs", "FlaskConical", "general", ("SUPER_ADMIN",)),

    # Athlete
    Module("scoring", "Scoring", "Target", "role_specific", ("ATHLETE", "COACH", "CLUB")),
    Module("achievements", "Achievements", "Trophy", "role_specific", ("ATHLETE",)),
    Module("progress", "Progress Charts", "TrendingUp", "role_specific", ("ATHLETE",)),
    Module("athlete_training_schedule", "Training Schedule", "Calendar", "role_specific", ("ATHLETE",)),
    Module("athlete_archery_guidance", "Archery Guidance", "Shield", "role_specific", ("ATHLETE",)),
    Module("bleep_test", "Bleep Test", "Timer", "role_specific", ("ATHLETE", "COACH")),
    Module("archerconfig", "Archer Config", "Target", "role_specific", ("ATHLETE", "COACH")),
    Module("attendance_history", "Attendance History", "Calendar", "role_specific", ("ATHLETE",)),

    # Coach
    Module("coach_analytics", "Team Analytics", "BarChart3", "role_specific", ("COACH",)),
    Module("score_validation", "Score Validation", "Target", "role_specific", ("COACH", "JUDGE")),

    # Club
    Module("athletes", "Athletes", "Users", "role_specific", ("CLUB", "COACH", "SCHOOL", "EO")),
    Module("schedules", "Schedules", "Calendar", "role_specific", ("CLUB", "COACH", "SCHOOL", "EO", "JUDGE")),
    Module("attendance", "Attendance", "CheckSquare", "role_specific", ("CLUB", "COACH", "SCHOOL", "EO")),
    Module("finance", "Finance", "DollarSign", "role_specific", ("CLUB", "PARENT")),
    Module("inventory", "Inventory", "Package", "role_specific", ("CLUB", "SUPPLIER", "MANPOWER")),
    Module("organization", "Organization", "Building2", "role_specific", ("CLUB",)),
    Module("member_approval", "Member Approval", "UserCheck", "role_specific", ("CLUB",)),
    Module("invoicing", "Invoicing", "Receipt", "role_specific", ("CLUB",)),
    Module("club_permissions", "Club Panel", "Shield", "role_specific", ("CLUB",)),
    Module("units", "Units", "MapPin", "role_specific", ("CLUB",)),
    Module("club_approval", "Club Approval", "Building2", "role_specific", ("PERPANI",)),

    # School
    Module("schools", "Schools", "GraduationCap", "role_specific", ("SCHOOL",)),
    Module("o2sn_registration", "O2SN Registration", "Trophy", "role_specific", ("SCHOOL",)),

    # Parent
    Module("payments", "Payments", "CreditCard", "role_specific", ("PARENT",)),

    # Event organizer
    Module("events", "Event Management", "Calendar", "role_specific", ("EO", "JUDGE", "COACH")),
    Module("event_creation", "Create Event", "Plus", "role_specific", ("EO",)),
    Module("event_registration", "Registrations", "Users", "role_specific", ("EO",)),
    Module("event_results", "Results", "Trophy", "role_specific", ("EO",)),

    # Supplier / manpower
    Module("jersey", "Jersey System", "Shirt", "role_specific", ("SUPPLIER",), _JERSEY_ROLES),
    Module("shipping", "Jersey Logistics", "Truck", "role_specific", ("SUPPLIER", "MANPOWER"), _JERSEY_ROLES),
    Module("manpower", "Manpower Management", "Users", "role_specific", ("SUPPLIER", "MANPOWER")),
    Module("quality_control", "QC Station", "CheckCircle", "role_specific", ("MANPOWER", "SUPPLIER"), _JERSEY_ROLES),

    # Federation
    Module("perpani_management", "Perpani Management", "Building2", "role_specific", ("PERPANI",), _FEDERATION_ROLES),
    Module("licensing", "Licensing", "Award", "role_specific", ("PERPANI",), _FEDERATION_ROLES),

    # Shared
    Module("analytics", "Analytics", "BarChart3", "role_specific", ("CLUB", "SCHOOL", "COACH")),
    Module("reports", "Reports", "FileText", "role_specific", ("CLUB", "SCHOOL", "COACH", "EO")),
    Module("enhanced_reports", "Enhanced Reports", "FileBarChart", "role_specific", ("CLUB",)),
    Module("filemanager", "File Manager", "FolderOpen", "role_specific", ("CLUB", "SUPER_ADMIN")),
    Module("history", "History", "History", "role_specific", ("SUPER_ADMIN",)),

    # Admin only
    Module("admin", "Admin Panel", "Settings", "admin_only", ("SUPER_ADMIN",)),
    Module("audit_logs", "Audit Logs", "FileSearch", "admin_only", ("SUPER_ADMIN",)),

    # Commerce
    Module("my_orders", "Order History", "ShoppingBag", "general", _MEMBER_ROLES + ("PERPANI",)),
    Module("catalog", "Csystem Market", "Package", "general", _MEMBER_ROLES + ("PERPANI",)),

    # Jersey system
    Module("jersey_dashboard", "Jersey Dashboard", "LayoutDashboard", "role_specific", ("SUPPLIER", "SUPER_ADMIN"), _JERSEY_ROLES),
    Module("jersey_orders", "Purchase Orders (PO)", "ClipboardList", "role_specific", ("SUPPLIER", "SUPER_ADMIN"), _JERSEY_ROLES),
    Module("jersey_timeline", "Timeline Monitor", "Timer", "role_specific", ("SUPPLIER", "SUPER_ADMIN"), _JERSEY_ROLES),
    Module("jersey_products", "Products", "Shirt", "role_specific", ("SUPPLIER", "SUPER_ADMIN"), _JERSEY_ROLES),
)


class ModuleCatalog:
    """
    Read-only lookup over a sequence of modules.

    Duplicate ids keep the first definition.
    """

    def __init__(self, modules: Iterable[Module] = MODULE_LIST):
        self._modules: dict[str, Module] = {}
        for module in modules:
            self._modules.setdefault(module.id, module)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)

    def get(self, module_id: str) -> Module | None:
        return self._modules.get(module_id)

    def ids(self) -> list[str]:
        """All module ids in canonical order."""
        return list(self._modules)

    def is_visible_to(self, module_id: str, role: str) -> bool:
        """True if the module exists and its restriction admits the role."""
        module = self._modules.get(module_id)
        return module is not None and module.allows_role(role)

    def for_role(self, role: str) -> list[Module]:
        """Modules whose restriction admits the role, in canonical order."""
        return [m for m in self._modules.values() if m.allows_role(role)]


DEFAULT_CATALOG = ModuleCatalog()

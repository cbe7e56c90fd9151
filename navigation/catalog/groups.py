"""
Default sidebar groups.

Used whenever a role has no saved group assignment. A module may appear in
more than one group (e.g. inventory under both Supplier and Manpower).
"""

from navigation.base import Group

_JERSEY_NESTING = {"jersey_dashboard": ("quality_control", "shipping")}


SIDEBAR_ROLE_GROUPS: tuple[Group, ...] = (
    Group("general", "General", "LayoutDashboard", "primary",
          ("dashboard", "profile", "digitalcard", "notifications", "catalog")),
    Group("athlete", "Athlete", "Target", "blue",
          ("scoring", "achievements", "progress", "athlete_training_schedule",
           "athlete_archery_guidance", "bleep_test", "archerconfig", "attendance_history")),
    Group("coach", "Coach", "Users", "green",
          ("coach_analytics", "score_validation", "athletes", "schedules", "attendance")),
    Group("club", "Club", "Building2", "orange",
          ("organization", "finance", "inventory", "member_approval", "invoicing",
           "enhanced_reports", "filemanager", "club_permissions", "analytics", "reports")),
    Group("school", "School", "GraduationCap", "emerald", ("schools", "o2sn_registration")),
    Group("parent", "Parent", "Heart", "purple", ("payments",)),
    Group("eo", "Event Organizer", "Calendar", "teal",
          ("events", "event_creation", "event_registration", "event_results")),
    Group("judge", "Judge", "Scale", "indigo", ("score_validation",)),
    Group("supplier", "Supplier", "Package", "rose",
          ("jersey_dashboard", "jersey_orders", "jersey_timeline", "jersey_products", "manpower", "inventory"),
          _JERSEY_NESTING),
    Group("manpower", "Manpower", "Wrench", "violet",
          ("manpower", "inventory", "jersey_dashboard"),
          _JERSEY_NESTING),
    Group("perpani", "Federation", "Award", "red", ("perpani_management", "licensing", "club_approval")),
    Group("legal", "Legal & Compliance", "Scale", "cyan",
          ("dashboard", "profile", "digitalcard", "admin", "audit_logs")),
)


def default_groups() -> list[Group]:
    """A fresh list of the default groups (the groups themselves are immutable)."""
    return list(SIDEBAR_ROLE_GROUPS)


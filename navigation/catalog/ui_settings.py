"""
Default role UI settings.

Most roles start with a deliberately small sidebar; administrators widen
it per role through the UI settings editor. The super admin sees the
whole catalog.
"""

from navigation.base import RoleUISettings
from navigation.catalog.modules import DEFAULT_CATALOG
from navigation.catalog.roles import normalize_role

_BASE_SIDEBAR = ("dashboard", "profile", "digitalcard", "notifications")
_FULL_WIDGETS = ("stats", "topPerformers", "quickActions", "charts")


DEFAULT_UI_SETTINGS: dict[str, RoleUISettings] = {
    s.role: s
    for s in (
        RoleUISettings("SUPER_ADMIN", "#ef4444", "#f97316", tuple(DEFAULT_CATALOG.ids()), _FULL_WIDGETS),
        RoleUISettings("PERPANI", "#dc2626", "#ea580c", _BASE_SIDEBAR + ("club_approval",), _FULL_WIDGETS),
        RoleUISettings("CLUB", "#f97316", "#eab308", _BASE_SIDEBAR + ("member_approval",), _FULL_WIDGETS + ("finance",)),
        RoleUISettings("SCHOOL", "#10b981", "#14b8a6", _BASE_SIDEBAR, _FULL_WIDGETS),
        RoleUISettings("ATHLETE", "#3b82f6", "#0ea5e9", _BASE_SIDEBAR, ("stats", "quickActions", "charts")),
        RoleUISettings("PARENT", "#a855f7", "#d946ef", _BASE_SIDEBAR, ("stats", "charts")),
        RoleUISettings("COACH", "#22c55e", "#10b981", _BASE_SIDEBAR, _FULL_WIDGETS),
        RoleUISettings("JUDGE", "#6366f1", "#8b5cf6", _BASE_SIDEBAR, ("stats", "quickActions")),
        RoleUISettings("EO", "#14b8a6", "#06b6d4", _BASE_SIDEBAR, ("stats", "quickActions", "charts")),
        RoleUISettings("SUPPLIER", "#f43f5e", "#fb7185", _BASE_SIDEBAR, ("stats", "quickActions")),
        RoleUISettings("MANPOWER", "#8b5cf6", "#a78bfa", _BASE_SIDEBAR, ("stats", "quickActions")),
        RoleUISettings("LEGAL", "#06b6d4", "#22d3ee", _BASE_SIDEBAR + ("admin", "audit_logs"), ("stats", "quickActions")),
    )
}


def default_ui_settings(role: str) -> RoleUISettings | None:
    """Default settings for a role, or None if the role is unknown."""
    return DEFAULT_UI_SETTINGS.get(normalize_role(role))

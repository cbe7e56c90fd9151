"""
Platform roles.

Roles are compared in uppercase everywhere; use normalize_role() at every
boundary where a role name enters the system.
"""

from enum import Enum


class UserRole(str, Enum):
    """The twelve platform roles, in code order."""
    SUPER_ADMIN = "SUPER_ADMIN"
    PERPANI = "PERPANI"
    CLUB = "CLUB"
    SCHOOL = "SCHOOL"
    ATHLETE = "ATHLETE"
    PARENT = "PARENT"
    COACH = "COACH"
    JUDGE = "JUDGE"
    EO = "EO"
    SUPPLIER = "SUPPLIER"
    MANPOWER = "MANPOWER"
    LEGAL = "LEGAL"


# (role, code, label)
ROLE_LIST: list[tuple[UserRole, str, str]] = [
    (UserRole.SUPER_ADMIN, "00", "Super Admin"),
    (UserRole.PERPANI, "01", "Perpani"),
    (UserRole.CLUB, "02", "Club"),
    (UserRole.SCHOOL, "03", "School"),
    (UserRole.ATHLETE, "04", "Athlete"),
    (UserRole.PARENT, "05", "Parent"),
    (UserRole.COACH, "06", "Coach"),
    (UserRole.JUDGE, "07", "Judge"),
    (UserRole.EO, "08", "Event Organizer"),
    (UserRole.SUPPLIER, "09", "Supplier"),
    (UserRole.MANPOWER, "10", "Manpower"),
    (UserRole.LEGAL, "11", "Legal & Compliance"),
]


def normalize_role(role: "str | UserRole") -> str:
    """Uppercase and trim a role name. Unknown names pass through normalized."""
    if isinstance(role, UserRole):
        return role.value
    return str(role).strip().upper()


def is_known_role(role: str) -> bool:
    return normalize_role(role) in UserRole.__members__


def role_label(role: str) -> str | None:
    """Display label for a role, or None if unknown."""
    normalized = normalize_role(role)
    for member, _code, label in ROLE_LIST:
        if member.value == normalized:
            return label
    return None

"""
Tests for visibility resolution.

These tests verify:
- Allow-list, permission, restriction and tenant override layering
- Grouping with nested children and co-membership
- Search filtering that keeps parents of matching children
- Unknown roles resolve to an empty view
"""

import pytest

from navigation import (
    DEFAULT_PERMISSION_MATRIX,
    Capability,
    Group,
    RoleUISettings,
    default_groups,
    default_ui_settings,
    effective_modules,
    resolve_navigation,
)


def _items(view, group_id):
    group = next(g for g in view.groups if g.id == group_id)
    return [item.id for item in group.items]


class TestEffectiveModules:
    """Test suite for the flat effective module list."""

    def test_tenant_override_intersects_allow_list(self):
        """An override only narrows: finance is not allowed, so only profile survives."""
        settings = RoleUISettings(role="CLUB", sidebar_modules=("dashboard", "profile"))

        result = effective_modules("CLUB", ui_settings=settings, tenant_override=["profile", "finance"])

        assert result == ["profile"]

    def test_allow_list_order_is_kept(self):
        settings = RoleUISettings(role="CLUB", sidebar_modules=("profile", "finance", "dashboard", "profile"))

        assert effective_modules("CLUB", ui_settings=settings) == ["profile", "finance", "dashboard"]

    def test_permission_matrix_removes_unviewable(self):
        """COACH may not view finance even if the allow-list names it."""
        settings = RoleUISettings(role="COACH", sidebar_modules=("dashboard", "finance", "schedules"))

        assert effective_modules("COACH", ui_settings=settings) == ["dashboard", "schedules"]

    def test_restricted_module_hidden_from_other_roles(self):
        """jersey is restricted; CLUB never sees it even with full permissions."""
        settings = RoleUISettings(role="CLUB", sidebar_modules=("dashboard", "jersey"))

        assert effective_modules("CLUB", ui_settings=settings) == ["dashboard"]

    def test_restricted_module_shown_to_admitted_role(self):
        settings = RoleUISettings(role="SUPPLIER", sidebar_modules=("dashboard", "jersey"))
        permissions = DEFAULT_PERMISSION_MATRIX.with_permission("SUPPLIER", "jersey", Capability.VIEW, True)

        result = effective_modules("SUPPLIER", ui_settings=settings, permissions=permissions)

        assert result == ["dashboard", "jersey"]

    def test_empty_override_hides_everything(self):
        settings = default_ui_settings("CLUB")

        assert effective_modules("CLUB", ui_settings=settings, tenant_override=[]) == []

    def test_missing_settings_yield_nothing(self):
        assert effective_modules("CLUB", ui_settings=None) == []

    def test_unknown_role_yields_nothing(self):
        settings = RoleUISettings(role="GHOST", sidebar_modules=("dashboard", "profile"))

        assert effective_modules("GHOST", ui_settings=settings) == []

    def test_role_is_case_insensitive(self):
        settings = default_ui_settings("CLUB")

        assert effective_modules(" club ", ui_settings=settings) == effective_modules("CLUB", ui_settings=settings)


class TestResolveNavigation:
    """Test suite for grouped resolution."""

    def test_default_club_view(self):
        view = resolve_navigation("CLUB", ui_settings=default_ui_settings("CLUB"), groups=default_groups())

        assert [g.id for g in view.groups] == ["general", "club", "legal"]
        assert _items(view, "general") == ["dashboard", "profile", "digitalcard", "notifications"]
        assert _items(view, "club") == ["member_approval"]
        assert _items(view, "legal") == ["dashboard", "profile", "digitalcard"]
        assert view.role == "CLUB"
        assert view.search_term is None

    def test_groups_without_visible_modules_are_dropped(self, club_settings, finance_groups):
        groups = finance_groups + [Group(id="empty", label="Empty", modules=("labs",))]

        view = resolve_navigation("CLUB", ui_settings=club_settings, groups=groups)

        assert "empty" not in [g.id for g in view.groups]

    def test_nested_children_render_under_parent_only(self, club_settings, finance_groups):
        view = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups)

        assert _items(view, "club") == ["finance", "inventory"]
        finance = view.groups[1].items[0]
        assert [child.id for child in finance.children] == ["schedules"]

    def test_nested_child_needs_to_be_visible(self, finance_groups):
        settings = RoleUISettings(role="CLUB", sidebar_modules=("finance", "inventory"))

        view = resolve_navigation("CLUB", ui_settings=settings, groups=finance_groups)

        finance = view.groups[0].items[0]
        assert finance.id == "finance"
        assert finance.children == ()

    def test_module_may_appear_in_several_groups(self):
        settings = default_ui_settings("SUPER_ADMIN")

        view = resolve_navigation("SUPER_ADMIN", ui_settings=settings, groups=default_groups())

        assert "score_validation" in _items(view, "coach")
        assert "score_validation" in _items(view, "judge")

    def test_default_jersey_nesting_for_super_admin(self):
        view = resolve_navigation("SUPER_ADMIN", ui_settings=default_ui_settings("SUPER_ADMIN"), groups=default_groups())

        assert _items(view, "supplier") == [
            "jersey_dashboard", "jersey_orders", "jersey_timeline", "jersey_products", "manpower", "inventory",
        ]
        supplier = next(g for g in view.groups if g.id == "supplier")
        assert [c.id for c in supplier.items[0].children] == ["quality_control", "shipping"]

    def test_unknown_role_resolves_empty(self):
        settings = RoleUISettings(role="GHOST", sidebar_modules=("dashboard",))

        view = resolve_navigation("GHOST", ui_settings=settings, groups=default_groups())

        assert view.is_empty
        assert view.module_ids() == set()

    def test_tenant_override_narrows_view(self, club_settings, finance_groups):
        view = resolve_navigation(
            "CLUB",
            ui_settings=club_settings,
            groups=finance_groups,
            tenant_override=["profile", "finance", "payments"],
            tenant_id="club-42",
        )

        assert view.module_ids() == {"profile", "finance"}
        assert view.tenant_id == "club-42"


class TestSearch:
    """Test suite for search filtering."""

    def test_parent_kept_when_only_child_matches(self, club_settings, finance_groups):
        view = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="sched")

        assert [g.id for g in view.groups] == ["club"]
        (finance,) = view.groups[0].items
        assert finance.id == "finance"
        assert finance.matched is False
        assert [c.id for c in finance.children] == ["schedules"]

    def test_matching_parent_keeps_only_matching_children(self, club_settings, finance_groups):
        view = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="fin")

        (finance,) = view.groups[0].items
        assert finance.matched is True
        assert finance.children == ()

    def test_search_matches_labels_case_insensitively(self, club_settings, finance_groups):
        view = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="  DASH ")

        assert view.module_ids() == {"dashboard"}
        assert view.search_term == "dash"

    def test_no_matches_yields_empty_view(self, club_settings, finance_groups):
        view = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="zzz")

        assert view.is_empty

    def test_blank_search_is_ignored(self, club_settings, finance_groups):
        plain = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups)
        blank = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="   ")

        assert blank == plain


class TestResolutionProperties:
    """Properties that hold across roles and inputs."""

    @pytest.mark.parametrize("removed", ["dashboard", "finance", "schedules", "inventory", "jersey_dashboard"])
    def test_removing_from_allow_list_never_adds(self, removed):
        full = default_ui_settings("SUPER_ADMIN")
        narrowed = RoleUISettings(
            role="SUPER_ADMIN",
            sidebar_modules=tuple(m for m in full.sidebar_modules if m != removed),
        )

        before = resolve_navigation("SUPER_ADMIN", ui_settings=full, groups=default_groups()).module_ids()
        after = resolve_navigation("SUPER_ADMIN", ui_settings=narrowed, groups=default_groups()).module_ids()

        assert after <= before
        assert removed not in after

    @pytest.mark.parametrize("role", ["CLUB", "COACH", "SUPPLIER", "LEGAL", "SUPER_ADMIN"])
    def test_override_view_is_contained_in_role_view(self, role):
        settings = default_ui_settings(role)
        override = ["dashboard", "profile", "admin", "jersey", "finance"]

        base = resolve_navigation(role, ui_settings=settings, groups=default_groups()).module_ids()
        narrowed = resolve_navigation(
            role, ui_settings=settings, groups=default_groups(), tenant_override=override,
        ).module_ids()

        assert narrowed <= base
        assert narrowed <= set(override)

    def test_resolution_is_deterministic(self, club_settings, finance_groups):
        first = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="in")
        second = resolve_navigation("CLUB", ui_settings=club_settings, groups=finance_groups, search_term="in")

        assert first == second
        assert first.to_dict() == second.to_dict()

"""
Tests for the navigation client.

These tests verify:
- Fallback to defaults when the store fails
- Stale replies are discarded
- Saves publish through the broadcaster
- Drift repair and reconciliation on read
- Global client management
"""

import asyncio
from collections import defaultdict
from unittest.mock import AsyncMock

import pytest

from navigation import (
    ChangeBroadcaster,
    Group,
    LayoutRecord,
    NavigationClient,
    NavigationStoreError,
    RoleUISettings,
    TenantOverride,
    default_groups,
    default_ui_settings,
    get_navigation_client,
    layout_key,
    reset_navigation_client,
    set_navigation_client,
    sidebar_key,
    tenant_override_key,
    ui_settings_key,
)
from navigation.providers import MemoryNavigationStore


class GatedStore(MemoryNavigationStore):
    """Memory store whose reads (and layout writes) wait until the test answers them."""

    def __init__(self):
        super().__init__()
        self.replies: dict[str, list[asyncio.Future]] = defaultdict(list)

    async def _reply(self, operation):
        reply = asyncio.get_running_loop().create_future()
        self.replies[operation].append(reply)
        return await reply

    async def get_layout_record(self, feature_key):
        return await self._reply("get_layout_record")

    async def get_role_ui_settings(self, role):
        return await self._reply("get_role_ui_settings")

    async def get_tenant_override(self, tenant_id, role):
        return await self._reply("get_tenant_override")

    async def save_layout_record(self, feature_key, payload):
        await super().save_layout_record(feature_key, payload)
        return await self._reply("save_layout_record")


async def _wait_for(replies, count):
    while len(replies) < count:
        await asyncio.sleep(0)


class TestFallback:
    """Test suite for behaviour when the store is unreachable."""

    async def test_resolve_falls_back_to_defaults_with_warnings(self, failing_client):
        view = await failing_client.resolve("CLUB", tenant_id="club-42")

        assert view.module_ids() == {"dashboard", "profile", "digitalcard", "notifications", "member_approval"}
        assert "Could not load role UI settings; showing defaults." in view.warnings
        assert "Could not load tenant override; showing defaults." in view.warnings
        assert "Could not load sidebar groups; showing defaults." in view.warnings

    async def test_ui_settings_fall_back_to_default(self, failing_client):
        assert await failing_client.fetch_role_ui_settings("coach") == default_ui_settings("COACH")

    async def test_layout_falls_back_to_canonical(self, failing_client):
        record = await failing_client.get_layout("athlete_tabs", ["overview", "scores"])

        assert record == LayoutRecord(order=("overview", "scores"), hidden=())

    async def test_failed_saves_report_false(self, failing_client, broadcaster):
        received = []
        broadcaster.subscribe(layout_key("athlete_tabs"), received.append)

        assert await failing_client.save_layout_record("athlete_tabs", LayoutRecord(order=("a",))) is False
        assert await failing_client.save_group_assignment("CLUB", default_groups()) is False
        assert await failing_client.save_role_ui_settings("CLUB", {"primary_color": "#000000"}) is None
        assert await failing_client.save_tenant_override("club-42", "CLUB", ["profile"]) is False
        assert received == []

    async def test_failure_keeps_last_known_layout(self, nav_client, store):
        await store.save_layout_record("athlete_tabs", {"order": ["b", "a"], "hidden": []})
        first = await nav_client.fetch_layout_record("athlete_tabs")

        store.get_layout_record = AsyncMock(side_effect=NavigationStoreError("timeout", "get_layout_record"))
        second = await nav_client.fetch_layout_record("athlete_tabs")

        assert second == first == LayoutRecord(order=("b", "a"), hidden=())

    async def test_listing_failures_return_empty(self, failing_client):
        assert await failing_client.list_layout_records() == {}
        assert await failing_client.list_group_assignments() == {}

    async def test_failed_resets_raise_and_publish_nothing(self, failing_client, broadcaster):
        received = []
        for key in (ui_settings_key("CLUB"), sidebar_key("CLUB"), tenant_override_key("club-42", "CLUB")):
            broadcaster.subscribe(key, received.append)

        with pytest.raises(NavigationStoreError):
            await failing_client.reset_role_ui_settings("CLUB")
        with pytest.raises(NavigationStoreError):
            await failing_client.reset_group_assignment("CLUB")
        with pytest.raises(NavigationStoreError):
            await failing_client.reset_all_group_assignments()
        with pytest.raises(NavigationStoreError) as exc_info:
            await failing_client.delete_tenant_override("club-42", "CLUB")

        assert exc_info.value.operation == "delete_tenant_override"
        assert received == []


class TestStaleReplies:
    """Test suite for discarding out-of-order replies."""

    async def test_older_reply_does_not_overwrite_newer(self, broadcaster):
        store = GatedStore()
        nav = NavigationClient(store, broadcaster=broadcaster)
        replies = store.replies["get_layout_record"]

        older = asyncio.create_task(nav.fetch_layout_record("athlete_tabs"))
        newer = asyncio.create_task(nav.fetch_layout_record("athlete_tabs"))
        await _wait_for(replies, 2)

        replies[1].set_result({"order": ["scores", "overview"], "hidden": []})
        newer_result = await newer
        replies[0].set_result({"order": ["overview", "scores"], "hidden": []})
        older_result = await older

        expected = LayoutRecord(order=("scores", "overview"), hidden=())
        assert newer_result == expected
        assert older_result == expected

    async def test_in_order_replies_apply(self, broadcaster):
        store = GatedStore()
        nav = NavigationClient(store, broadcaster=broadcaster)
        replies = store.replies["get_layout_record"]

        first = asyncio.create_task(nav.fetch_layout_record("athlete_tabs"))
        await _wait_for(replies, 1)
        replies[0].set_result({"order": ["a"], "hidden": []})

        assert await first == LayoutRecord(order=("a",), hidden=())

    async def test_older_ui_settings_reply_is_discarded(self, broadcaster):
        store = GatedStore()
        nav = NavigationClient(store, broadcaster=broadcaster)
        replies = store.replies["get_role_ui_settings"]
        newer_settings = RoleUISettings(role="CLUB", sidebar_modules=("finance",))

        older = asyncio.create_task(nav.fetch_role_ui_settings("CLUB"))
        newer = asyncio.create_task(nav.fetch_role_ui_settings("CLUB"))
        await _wait_for(replies, 2)

        replies[1].set_result(newer_settings)
        assert await newer == newer_settings
        replies[0].set_result(RoleUISettings(role="CLUB", sidebar_modules=("dashboard",)))
        assert await older == newer_settings

    async def test_older_tenant_override_reply_is_discarded(self, broadcaster):
        store = GatedStore()
        nav = NavigationClient(store, broadcaster=broadcaster)
        replies = store.replies["get_tenant_override"]

        older = asyncio.create_task(nav.fetch_tenant_override("club-42", "CLUB"))
        newer = asyncio.create_task(nav.fetch_tenant_override("club-42", "CLUB"))
        await _wait_for(replies, 2)

        replies[1].set_result(TenantOverride("club-42", "CLUB", ("profile",)))
        assert await newer == ["profile"]
        replies[0].set_result(None)
        assert await older == ["profile"]

    async def test_superseded_save_is_not_published(self, broadcaster):
        store = GatedStore()
        nav = NavigationClient(store, broadcaster=broadcaster)
        replies = store.replies["save_layout_record"]
        received = []
        broadcaster.subscribe(layout_key("athlete_tabs"), received.append)
        first = LayoutRecord(order=("a", "b"), hidden=())
        second = LayoutRecord(order=("b", "a"), hidden=())

        older = asyncio.create_task(nav.save_layout_record("athlete_tabs", first))
        newer = asyncio.create_task(nav.save_layout_record("athlete_tabs", second))
        await _wait_for(replies, 2)

        replies[1].set_result(True)
        assert await newer
        replies[0].set_result(True)
        assert await older

        assert received == [second]


class TestLayouts:
    """Test suite for layout records."""

    async def test_absent_layout_is_canonical(self, nav_client):
        record = await nav_client.get_layout("athlete_tabs", ["overview", "scores"])

        assert record == LayoutRecord(order=("overview", "scores"), hidden=())
        assert await nav_client.fetch_layout_record("athlete_tabs") is None

    async def test_saved_layout_is_reconciled(self, nav_client):
        await nav_client.save_layout_record("athlete_tabs", LayoutRecord(order=("c", "b", "x"), hidden=("b",)))

        record = await nav_client.get_layout("athlete_tabs", ["a", "b", "c"])

        assert record == LayoutRecord(order=("c", "b", "a"), hidden=("b",))

    async def test_malformed_payload_is_treated_as_absent(self, nav_client, store):
        await store.save_layout_record("athlete_tabs", {"order": ["a"]})

        assert await nav_client.fetch_layout_record("athlete_tabs") is None
        assert await nav_client.list_layout_records() == {}

    async def test_save_publishes_record(self, nav_client, broadcaster):
        received = []
        broadcaster.subscribe(layout_key("athlete_tabs"), received.append)
        record = LayoutRecord(order=("b", "a"), hidden=("a",))

        assert await nav_client.save_layout_record("athlete_tabs", record)

        assert received == [record]


class TestUISettings:
    """Test suite for role UI settings."""

    async def test_patch_merges_and_resolves(self, nav_client, broadcaster):
        received = []
        broadcaster.subscribe(ui_settings_key("CLUB"), received.append)

        updated = await nav_client.save_role_ui_settings("club", {"sidebar_modules": ["dashboard", "finance"]})

        assert updated.sidebar_modules == ("dashboard", "finance")
        assert updated.primary_color == default_ui_settings("CLUB").primary_color
        assert received == [updated]

        view = await nav_client.resolve("CLUB")
        assert view.module_ids() == {"dashboard", "finance"}

    async def test_reset_restores_default(self, nav_client):
        await nav_client.save_role_ui_settings("CLUB", {"sidebar_modules": ["finance"]})

        default = await nav_client.reset_role_ui_settings("CLUB")

        assert default == default_ui_settings("CLUB")
        assert await nav_client.fetch_role_ui_settings("CLUB") == default

    async def test_reset_forgets_saved_settings(self, nav_client, store):
        await nav_client.save_role_ui_settings("CLUB", {"sidebar_modules": ["finance"]})
        await nav_client.reset_role_ui_settings("CLUB")

        store.get_role_ui_settings = AsyncMock(side_effect=NavigationStoreError("timeout", "get_role_ui_settings"))

        assert ui_settings_key("CLUB") not in nav_client._applied
        assert await nav_client.fetch_role_ui_settings("CLUB") == default_ui_settings("CLUB")

    async def test_unknown_role_has_no_settings(self, nav_client):
        assert await nav_client.fetch_role_ui_settings("GHOST") is None
        assert (await nav_client.resolve("ghost")).is_empty


class TestTenantOverrides:
    """Test suite for tenant overrides."""

    async def test_override_narrows_resolution(self, nav_client):
        await nav_client.save_tenant_override("club-42", "CLUB", ["profile", "finance"])

        scoped = await nav_client.resolve("CLUB", tenant_id="club-42")
        other = await nav_client.resolve("CLUB", tenant_id="club-7")

        assert scoped.module_ids() == {"profile"}
        assert "dashboard" in other.module_ids()

    async def test_delete_reverts(self, nav_client):
        await nav_client.save_tenant_override("club-42", "CLUB", ["profile"])

        assert await nav_client.delete_tenant_override("club-42", "club")
        assert await nav_client.fetch_tenant_override("club-42", "CLUB") is None
        assert not await nav_client.delete_tenant_override("club-42", "CLUB")

    async def test_delete_forgets_last_known_override(self, nav_client, store, broadcaster):
        received = []
        broadcaster.subscribe(tenant_override_key("club-42", "CLUB"), received.append)
        await nav_client.save_tenant_override("club-42", "CLUB", ["profile"])
        assert await nav_client.fetch_tenant_override("club-42", "CLUB") == ["profile"]

        await nav_client.delete_tenant_override("club-42", "CLUB")
        store.get_tenant_override = AsyncMock(side_effect=NavigationStoreError("timeout", "get_tenant_override"))

        assert received == [["profile"], None]
        assert await nav_client.fetch_tenant_override("club-42", "CLUB") is None


class TestGroupAssignments:
    """Test suite for sidebar group assignments."""

    async def test_defaults_until_saved(self, nav_client):
        assert await nav_client.fetch_group_assignment("CLUB") is None
        assert await nav_client.get_sidebar_groups("CLUB") == default_groups()

    async def test_save_publishes_and_resolves(self, nav_client, broadcaster, finance_groups):
        received = []
        broadcaster.subscribe(sidebar_key("CLUB"), received.append)
        await nav_client.save_role_ui_settings("CLUB", {"sidebar_modules": ["dashboard", "finance", "schedules"]})

        assert await nav_client.save_group_assignment("club", finance_groups)

        assert received == [finance_groups]
        view = await nav_client.resolve("CLUB")
        assert [g.id for g in view.groups] == ["general", "club"]

    async def test_saved_groups_are_repaired_on_read(self, nav_client, store):
        await store.save_group_assignment("CLUB", [
            {"id": "club", "label": "Club", "modules": ["finance", "retired"], "nestedModules": {"retired": ["x"]}},
            {"label": "No id"},
        ])

        groups = await nav_client.fetch_group_assignment("CLUB")

        assert groups == [Group(id="club", label="Club", modules=("finance",))]

    async def test_reset_one_role(self, nav_client, broadcaster, finance_groups):
        await nav_client.save_group_assignment("CLUB", finance_groups)
        received = []
        broadcaster.subscribe(sidebar_key("CLUB"), received.append)

        assert await nav_client.reset_group_assignment("CLUB")

        assert received == [None]
        assert await nav_client.fetch_group_assignment("CLUB") is None

    async def test_reset_forgets_last_known_groups(self, nav_client, store, finance_groups):
        await nav_client.save_group_assignment("CLUB", finance_groups)
        assert await nav_client.fetch_group_assignment("CLUB") is not None

        await nav_client.reset_group_assignment("CLUB")
        store.get_group_assignment = AsyncMock(side_effect=NavigationStoreError("timeout", "get_group_assignment"))

        assert sidebar_key("CLUB") not in nav_client._applied
        assert await nav_client.get_sidebar_groups("CLUB") == default_groups()

    async def test_reset_with_nothing_saved_publishes_nothing(self, nav_client, broadcaster):
        received = []
        broadcaster.subscribe(sidebar_key("CLUB"), received.append)

        assert not await nav_client.reset_group_assignment("CLUB")
        assert await nav_client.reset_all_group_assignments() == 0
        assert received == []

    async def test_reset_all_roles(self, nav_client, broadcaster, finance_groups):
        await nav_client.save_group_assignment("CLUB", finance_groups)
        await nav_client.save_group_assignment("COACH", finance_groups)
        received = []
        broadcaster.subscribe(sidebar_key("COACH"), received.append)

        removed = await nav_client.reset_all_group_assignments()

        assert removed == 2
        assert received == [None]
        assert await nav_client.list_group_assignments() == {}


class TestGlobalClient:
    """Test suite for global client management."""

    def test_from_config_defaults_to_memory(self):
        reset_navigation_client()

        nav = get_navigation_client()

        assert nav.store_name == "memory"
        assert get_navigation_client() is nav

    def test_from_config_redis(self):
        nav = NavigationClient.from_config("redis")

        assert nav.store_name == "redis"

    def test_set_navigation_client(self):
        custom = NavigationClient(MemoryNavigationStore(), broadcaster=ChangeBroadcaster())

        set_navigation_client(custom)

        assert get_navigation_client() is custom


@pytest.mark.parametrize("role", ["SUPER_ADMIN", "CLUB", "LEGAL"])
async def test_global_resolve_matches_client(role):
    from navigation import resolve

    nav = NavigationClient(MemoryNavigationStore(), broadcaster=ChangeBroadcaster())
    set_navigation_client(nav)

    assert await resolve(role) == await nav.resolve(role)

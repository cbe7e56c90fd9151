"""
Pytest configuration and fixtures for testing.

This module provides:
- Test client for FastAPI
- Fresh in-memory navigation stores and clients
- A store whose every call fails, for fallback tests
- Common navigation fixtures (groups, UI settings)
"""

import os
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["NAVIGATION_STORE"] = "memory"

from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from api.server import app
from navigation import (
    ChangeBroadcaster,
    Group,
    NavigationClient,
    NavigationStore,
    NavigationStoreError,
    RoleUISettings,
    reset_broadcaster,
    reset_navigation_client,
    set_navigation_client,
)
from navigation.providers import MemoryNavigationStore

STORE_METHODS = (
    "get_role_ui_settings",
    "save_role_ui_settings",
    "delete_role_ui_settings",
    "get_tenant_override",
    "save_tenant_override",
    "delete_tenant_override",
    "get_layout_record",
    "save_layout_record",
    "list_layout_records",
    "get_group_assignment",
    "save_group_assignment",
    "delete_group_assignment",
    "delete_all_group_assignments",
    "list_group_assignments",
)


# =============================================================================
# NAVIGATION FIXTURES
# =============================================================================


@pytest.fixture
def store() -> MemoryNavigationStore:
    """A fresh in-memory store."""
    return MemoryNavigationStore()


@pytest.fixture
def broadcaster() -> ChangeBroadcaster:
    """A broadcaster private to the test."""
    return ChangeBroadcaster()


@pytest.fixture
def nav_client(store: MemoryNavigationStore, broadcaster: ChangeBroadcaster) -> NavigationClient:
    """A navigation client over the in-memory store."""
    return NavigationClient(store, broadcaster=broadcaster)


@pytest.fixture
def failing_store() -> MagicMock:
    """A store whose every operation raises NavigationStoreError."""
    mock = MagicMock(spec=NavigationStore)
    mock.name = "failing"
    for method in STORE_METHODS:
        setattr(mock, method, AsyncMock(side_effect=NavigationStoreError("connection refused", method)))
    return mock


@pytest.fixture
def failing_client(failing_store: MagicMock, broadcaster: ChangeBroadcaster) -> NavigationClient:
    return NavigationClient(failing_store, broadcaster=broadcaster)


@pytest.fixture
def club_settings() -> RoleUISettings:
    """CLUB settings with a wider allow-list than the default."""
    return RoleUISettings(
        role="CLUB",
        sidebar_modules=("dashboard", "profile", "finance", "schedules", "jersey", "inventory"),
    )


@pytest.fixture
def finance_groups() -> list[Group]:
    """A grouping that nests schedules under finance."""
    return [
        Group(id="general", label="General", modules=("dashboard", "profile")),
        Group(
            id="club",
            label="Club",
            color="orange",
            modules=("finance", "inventory", "schedules"),
            nested_modules={"finance": ("schedules",)},
        ),
    ]


# =============================================================================
# TEST CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def client(nav_client: NavigationClient) -> Generator[TestClient, None, None]:
    """Create a synchronous test client backed by a fresh navigation client."""
    set_navigation_client(nav_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def async_client(nav_client: NavigationClient) -> AsyncClient:
    """Create an async test client for the FastAPI app."""
    set_navigation_client(nav_client)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# CLEANUP FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset process-wide singletons after each test."""
    yield
    reset_navigation_client()
    reset_broadcaster()
    app.dependency_overrides.clear()

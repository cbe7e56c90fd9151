"""
Redis-backed navigation store.

Features:
- Shared configuration across API instances
- JSON values under a configurable key prefix
- Connection pooling per event loop (handles sync-to-async bridges)

Key layout (after the prefix):
    ui_settings:<ROLE>
    tenant_override:<tenant_id>:<ROLE>
    layout:<feature_key>
    sidebar:<ROLE>

Requires:
    pip install redis

Environment:
    REDIS_URL: Redis connection URL
    REDIS_KEY_PREFIX: Prefix for all navigation keys (default: "nav:")
"""

import asyncio
import json
import logging
import os
from typing import Any

import redis.asyncio as redis_async

from navigation.base import NavigationStore, NavigationStoreError, RoleUISettings, TenantOverride

logger = logging.getLogger("navigation")


class RedisNavigationStore(NavigationStore):
    """Navigation store backed by Redis with connection pooling."""

    def __init__(
        self,
        redis_url: str | None = None,
        key_prefix: str | None = None,
        client: "redis_async.Redis | None" = None,
        max_connections: int = 10,
        socket_timeout: float = 5.0,
        socket_connect_timeout: float = 5.0,
    ):
        self._redis_url = redis_url or os.getenv("REDIS_URL", "redis://localhost:6379")
        self._key_prefix = key_prefix if key_prefix is not None else os.getenv("REDIS_KEY_PREFIX", "nav:")
        self._client = client
        self._max_connections = max_connections
        self._socket_timeout = socket_timeout
        self._socket_connect_timeout = socket_connect_timeout
        # event loop id -> client
        self._loop_clients: dict[int, redis_async.Redis] = {}

    @property
    def name(self) -> str:
        return "redis"

    async def _get_redis(self) -> redis_async.Redis:
        """Get or create the Redis client for the current event loop."""
        if self._client is not None:
            return self._client

        loop_id = id(asyncio.get_running_loop())
        if loop_id in self._loop_clients:
            return self._loop_clients[loop_id]

        pool = redis_async.ConnectionPool.from_url(
            self._redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=self._max_connections,
            socket_timeout=self._socket_timeout,
            socket_connect_timeout=self._socket_connect_timeout,
        )
        client = redis_async.Redis(connection_pool=pool)
        self._loop_clients[loop_id] = client
        logger.info("[NAV:REDIS] Connected to Redis with connection pool")
        return client

    def _make_key(self, *parts: str) -> str:
        return self._key_prefix + ":".join(parts)

    async def _get_json(self, key: str, operation: str) -> Any | None:
        try:
            client = await self._get_redis()
            raw = await client.get(key)
        except Exception as e:
            logger.error(f"[NAV:REDIS] {operation} failed: {e}")
            raise NavigationStoreError(f"Redis {operation} failed: {e}", operation) from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"[NAV:REDIS] Ignoring unreadable value at {key}")
            return None

    async def _set_json(self, key: str, value: Any, operation: str) -> bool:
        try:
            client = await self._get_redis()
            await client.set(key, json.dumps(value))
            return True
        except Exception as e:
            logger.error(f"[NAV:REDIS] {operation} failed: {e}")
            raise NavigationStoreError(f"Redis {operation} failed: {e}", operation) from e

    async def _delete(self, key: str, operation: str) -> bool:
        try:
            client = await self._get_redis()
            return await client.delete(key) > 0
        except Exception as e:
            logger.error(f"[NAV:REDIS] {operation} failed: {e}")
            raise NavigationStoreError(f"Redis {operation} failed: {e}", operation) from e

    async def _scan(self, *parts: str) -> list[str]:
        """All keys under a namespace, using SCAN (safe for large keyspaces)."""
        pattern = self._make_key(*parts, "*")
        try:
            client = await self._get_redis()
            cursor = 0
            found: list[str] = []
            while True:
                cursor, keys = await client.scan(cursor=cursor, match=pattern, count=100)
                found.extend(keys)
                if cursor == 0:
                    break
            return found
        except Exception as e:
            logger.error(f"[NAV:REDIS] scan {pattern} failed: {e}")
            raise NavigationStoreError(f"Redis scan failed: {e}", "scan") from e

    def _strip(self, key: str, *parts: str) -> str:
        return key[len(self._make_key(*parts, "")):]

    # =========================================================================
    # ROLE UI SETTINGS
    # =========================================================================

    async def get_role_ui_settings(self, role: str) -> RoleUISettings | None:
        data = await self._get_json(self._make_key("ui_settings", role), "get_role_ui_settings")
        if not isinstance(data, dict):
            return None
        return RoleUISettings.from_dict({**data, "role": role})

    async def save_role_ui_settings(self, settings: RoleUISettings) -> bool:
        return await self._set_json(
            self._make_key("ui_settings", settings.role), settings.to_dict(), "save_role_ui_settings"
        )

    async def delete_role_ui_settings(self, role: str) -> bool:
        return await self._delete(self._make_key("ui_settings", role), "delete_role_ui_settings")

    # =========================================================================
    # TENANT OVERRIDES
    # =========================================================================

    async def get_tenant_override(self, tenant_id: str, role: str) -> TenantOverride | None:
        data = await self._get_json(self._make_key("tenant_override", tenant_id, role), "get_tenant_override")
        if not isinstance(data, list):
            return None
        return TenantOverride(tenant_id=tenant_id, role=role, modules=tuple(str(m) for m in data))

    async def save_tenant_override(self, override: TenantOverride) -> bool:
        return await self._set_json(
            self._make_key("tenant_override", override.tenant_id, override.role),
            list(override.modules),
            "save_tenant_override",
        )

    async def delete_tenant_override(self, tenant_id: str, role: str) -> bool:
        return await self._delete(self._make_key("tenant_override", tenant_id, role), "delete_tenant_override")

    # =========================================================================
    # LAYOUT RECORDS
    # =========================================================================

    async def get_layout_record(self, feature_key: str) -> Any | None:
        return await self._get_json(self._make_key("layout", feature_key), "get_layout_record")

    async def save_layout_record(self, feature_key: str, payload: dict[str, list[str]]) -> bool:
        return await self._set_json(self._make_key("layout", feature_key), payload, "save_layout_record")

    async def list_layout_records(self) -> dict[str, Any]:
        records = {}
        for key in await self._scan("layout"):
            value = await self._get_json(key, "list_layout_records")
            if value is not None:
                records[self._strip(key, "layout")] = value
        return records

    # =========================================================================
    # GROUP ASSIGNMENTS
    # =========================================================================

    async def get_group_assignment(self, role: str) -> list[dict[str, Any]] | None:
        data = await self._get_json(self._make_key("sidebar", role), "get_group_assignment")
        return data if isinstance(data, list) else None

    async def save_group_assignment(self, role: str, groups: list[dict[str, Any]]) -> bool:
        return await self._set_json(self._make_key("sidebar", role), groups, "save_group_assignment")

    async def delete_group_assignment(self, role: str) -> bool:
        return await self._delete(self._make_key("sidebar", role), "delete_group_assignment")

    async def delete_all_group_assignments(self) -> int:
        keys = await self._scan("sidebar")
        if not keys:
            return 0
        try:
            client = await self._get_redis()
            deleted = await client.delete(*keys)
        except Exception as e:
            logger.error(f"[NAV:REDIS] delete_all_group_assignments failed: {e}")
            raise NavigationStoreError(f"Redis delete failed: {e}", "delete_all_group_assignments") from e
        logger.info(f"[NAV:REDIS] Reset sidebar groups for all roles ({deleted} keys)")
        return deleted

    async def list_group_assignments(self) -> dict[str, list[dict[str, Any]]]:
        assignments = {}
        for key in await self._scan("sidebar"):
            value = await self._get_json(key, "list_group_assignments")
            if isinstance(value, list):
                assignments[self._strip(key, "sidebar")] = value
        return assignments

    async def close(self) -> None:
        """Close Redis clients this store created."""
        clients = list(self._loop_clients.values())
        self._loop_clients.clear()
        for client in clients:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(f"[NAV:REDIS] Error closing client: {e}")

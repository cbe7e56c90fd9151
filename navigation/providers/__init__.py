"""
Navigation store implementations.

Available providers:
- MemoryNavigationStore: In-process dicts (development/testing)
- RedisNavigationStore: Redis-backed (multi-instance deployments)

The Redis store is imported on demand by NavigationClient.from_config().
"""

from navigation.providers.memory import MemoryNavigationStore

__all__ = [
    "MemoryNavigationStore",
]

"""
Process-wide change notification keyed by configuration key.

Replaces polling: whoever saves configuration publishes on its key, and
every mounted consumer of that key re-reads. Delivery is synchronous, in
registration order, and unbuffered (publishing with no subscribers does
nothing and is not replayed to later subscribers).

Usage:
    from navigation.broadcaster import get_broadcaster, layout_key

    broadcaster = get_broadcaster()
    subscription = broadcaster.subscribe(layout_key("athlete_tabs"), on_change)
    ...
    subscription.cancel()
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, Optional

logger = logging.getLogger("navigation")

Handler = Callable[[Any], None]

# Global broadcaster instance
_broadcaster: Optional["ChangeBroadcaster"] = None


def layout_key(feature_key: str) -> str:
    """Layout records publish on the bare feature key."""
    return feature_key


def sidebar_key(role: str) -> str:
    return f"sidebar:{role}"


def ui_settings_key(role: str) -> str:
    return f"ui_settings:{role}"


def tenant_override_key(tenant_id: str, role: str) -> str:
    return f"tenant_override:{tenant_id}:{role}"


class Subscription:
    """Handle returned by subscribe(); cancel() is idempotent."""

    def __init__(self, broadcaster: "ChangeBroadcaster", key: str, handler: Handler):
        self._broadcaster = broadcaster
        self.key = key
        self.handler = handler

    def cancel(self) -> bool:
        return self._broadcaster.unsubscribe(self.key, self.handler)


class ChangeBroadcaster:
    """Keyed publish/subscribe with synchronous delivery."""

    def __init__(self):
        self._handlers: dict[str, list[Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, key: str, handler: Handler) -> Subscription:
        """Register a handler for a key. The same handler may be registered once per key."""
        with self._lock:
            handlers = self._handlers.setdefault(key, [])
            if handler not in handlers:
                handlers.append(handler)
        return Subscription(self, key, handler)

    def unsubscribe(self, key: str, handler: Handler) -> bool:
        """Remove a handler. Safe to call from inside a handler during delivery."""
        with self._lock:
            handlers = self._handlers.get(key)
            if not handlers or handler not in handlers:
                return False
            remaining = [h for h in handlers if h != handler]
            if remaining:
                self._handlers[key] = remaining
            else:
                del self._handlers[key]
            return True

    def publish(self, key: str, value: Any = None) -> int:
        """
        Deliver value to every handler registered for key.

        Handlers removed before their turn are skipped. A handler that
        raises is logged and does not stop delivery to the rest.

        Returns:
            Number of handlers that were invoked
        """
        with self._lock:
            snapshot = list(self._handlers.get(key, ()))
        if not snapshot:
            return 0

        delivered = 0
        for handler in snapshot:
            with self._lock:
                still_registered = handler in self._handlers.get(key, ())
            if not still_registered:
                continue
            try:
                handler(value)
            except Exception as e:
                logger.error(f"[NAV:BROADCAST] Handler for '{key}' failed: {e}", exc_info=True)
            delivered += 1
        return delivered

    def subscriber_count(self, key: str) -> int:
        with self._lock:
            return len(self._handlers.get(key, ()))

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()


def get_broadcaster() -> ChangeBroadcaster:
    """
    Get the global broadcaster instance.

    Creates one if it doesn't exist.
    """
    global _broadcaster
    if _broadcaster is None:
        _broadcaster = ChangeBroadcaster()
    return _broadcaster


def reset_broadcaster() -> None:
    """Reset the global broadcaster (mainly for testing)."""
    global _broadcaster
    _broadcaster = None

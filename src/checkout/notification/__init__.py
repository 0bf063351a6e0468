"""Notification dispatcher factory.

One registry per process by default. set_registry() swaps in another
implementation (a shared store, or a fresh registry in tests).
"""

from checkout.notification.registry import ConnectionRegistry, InMemoryConnectionRegistry

_registry: ConnectionRegistry | None = None


def get_registry() -> ConnectionRegistry:
    global _registry
    if _registry is None:
        _registry = InMemoryConnectionRegistry()
    return _registry


def set_registry(registry: ConnectionRegistry) -> None:
    global _registry
    _registry = registry


def reset_registry() -> None:
    global _registry
    _registry = None


def get_dispatcher():
    from checkout.notification.dispatcher import NotificationDispatcher

    return NotificationDispatcher(get_registry())

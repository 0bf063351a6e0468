"""Connection registry: which buyer is reachable over which live connection.

The real-time channel fills and clears the registry from its connect and
disconnect hooks. The in-memory implementation is per process; a shared store
can implement the same port when the API runs on several hosts.
"""

import threading
from abc import ABC, abstractmethod
from typing import Protocol


class Connection(Protocol):
    """A live real-time connection to one buyer session."""

    def send(self, message: dict) -> None: ...


class ConnectionRegistry(ABC):
    """Abstract buyer → connection registry."""

    @abstractmethod
    def register(self, buyer: str, connection: Connection) -> None:
        """Remember ``connection`` as the buyer's active session."""
        ...

    @abstractmethod
    def unregister(self, buyer: str, connection: Connection | None = None) -> None:
        """Forget the buyer's session.

        With ``connection`` given, only forget it if it is still the active one,
        so a late disconnect from an old tab does not drop a newer session.
        """
        ...

    @abstractmethod
    def connection_for(self, buyer: str) -> Connection | None: ...


class InMemoryConnectionRegistry(ConnectionRegistry):
    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._lock = threading.Lock()

    def register(self, buyer: str, connection: Connection) -> None:
        with self._lock:
            self._connections[buyer.lower()] = connection

    def unregister(self, buyer: str, connection: Connection | None = None) -> None:
        key = buyer.lower()
        with self._lock:
            if connection is None or self._connections.get(key) is connection:
                self._connections.pop(key, None)

    def connection_for(self, buyer: str) -> Connection | None:
        with self._lock:
            return self._connections.get(buyer.lower())

    def __len__(self) -> int:
        return len(self._connections)

    def clear(self) -> None:
        with self._lock:
            self._connections.clear()

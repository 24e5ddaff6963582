"""Shared in-process storage with browser-style change events."""

from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count

from mood_engine.services.store import StateStorage
from mood_engine.services.sync import StorageListener


@dataclass
class SharedMemoryStorage:
    """Key/value area shared by several execution contexts.

    Each context gets its own handle from ``context()``. A write made
    through one handle notifies listeners registered through the others,
    never the writer itself.
    """

    items: dict[str, str] = field(default_factory=dict)
    _listeners: dict[int, list[StorageListener]] = field(default_factory=dict)
    _ids: count = field(default_factory=count)

    def context(self) -> "MemoryStorageContext":
        """Return a storage handle for a new execution context."""
        context_id = next(self._ids)
        self._listeners[context_id] = []
        return MemoryStorageContext(area=self, context_id=context_id)

    def _notify(self, origin: int, key: str | None) -> None:
        for context_id, listeners in list(self._listeners.items()):
            if context_id == origin:
                continue
            for listener in list(listeners):
                listener(key)


@dataclass
class MemoryStorageContext(StateStorage):
    """One context's view of a shared memory storage area."""

    area: SharedMemoryStorage
    context_id: int

    def get_item(self, key: str) -> str | None:
        """Return the value for a key."""
        return self.area.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store a value and notify other contexts if it changed."""
        if self.area.items.get(key) == value:
            return
        self.area.items[key] = value
        self.area._notify(self.context_id, key)

    def remove_item(self, key: str) -> None:
        """Delete a key and notify other contexts if it existed."""
        if key not in self.area.items:
            return
        del self.area.items[key]
        self.area._notify(self.context_id, key)

    def clear(self) -> None:
        """Delete every key, as the account deletion flow does."""
        if not self.area.items:
            return
        self.area.items.clear()
        self.area._notify(self.context_id, None)

    def add_listener(self, listener: StorageListener) -> Callable[[], None]:
        """Register a listener for writes made by other contexts."""
        listeners = self.area._listeners.setdefault(self.context_id, [])
        listeners.append(listener)

        def remove() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return remove

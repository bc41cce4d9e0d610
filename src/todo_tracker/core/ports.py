# src/todo_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task manager depends on Protocols instead of concrete implementations.
This keeps storage backends and views swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Any, Protocol

ChangeListener = Callable[[], None]
# Zero-argument callback invoked after every successful mutation.


class KeyValueStore(Protocol):
    """
    Namespaced key-value persistence provider.

    Implementations are best-effort:
    - save/remove/clear log failures instead of raising
    - load returns `default` on a missing key or unreadable value
    """

    def save(self, key: str, value: Any) -> None: ...
    def load(self, key: str, default: Any = None) -> Any: ...
    def remove(self, key: str) -> None: ...
    def clear(self) -> None: ...

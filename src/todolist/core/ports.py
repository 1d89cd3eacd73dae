# src/todolist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The todo collection depends on a Protocol instead of a concrete store.
This keeps backends swappable and makes testing easier.
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """
    String key -> string value storage (localStorage-style).

    Implementations raise StorageError on backend failures.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...

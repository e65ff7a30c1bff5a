# src/pricescout/repositories/memory_store.py
from __future__ import annotations

from pricescout.repositories.base import AbstractKeyValueStore, Updater


class InMemoryKeyValueStore(AbstractKeyValueStore):
    """
    In-Memory Backend für Tests und kurzlebige Instanzen.
    Interface kann gegen das SQLite-Backend ausgetauscht werden.
    """

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value

    async def update(self, key: str, updater: Updater) -> str:
        # kein await zwischen Lesen und Schreiben
        value = updater(self._store.get(key))
        self._store[key] = value
        return value

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._store if k.startswith(prefix)]

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

Updater = Callable[[str | None], str]


class AbstractKeyValueStore(ABC):
    """
    Persistenz-Backend für Produktdatenbank, Preis-Cache, Suchverlauf und Analytics.
    Alle Werte sind JSON-Strings; jede Operation ist für sich atomar.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Returns the stored value or None if the key is absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Creates or replaces the value stored under key."""
        ...

    @abstractmethod
    async def update(self, key: str, updater: Updater) -> str:
        """
        Read-modify-write als eine Operation: updater bekommt den aktuellen Wert
        (oder None) und liefert den neuen. Kein anderer Schreibzugriff auf das
        Backend kann dazwischen laufen.

        Returns:
            Der geschriebene Wert.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Deletes a key. Returns True if it existed."""
        ...

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """Lists all keys starting with prefix."""
        ...

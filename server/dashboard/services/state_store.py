"""
Ephemeral cross-page store.

String-keyed, string-valued store that carries wizard state from one page to
the next. Values are JSON text; readers decide how to interpret them.
"""
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional


class WizardStateStore(ABC):
    """Key/value store shared by the pages of one wizard session."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the raw serialized value, or None when the key is absent."""

    @abstractmethod
    def _put(self, key: str, raw: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Removing an absent key is a no-op."""

    def set(self, key: str, value: Any) -> None:
        """Serialize value as JSON and store it, replacing any previous value."""
        self._put(key, json.dumps(value))

    def clear(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.remove(key)


class InMemoryStateStore(WizardStateStore):
    """Store backed by a plain dict (one per wizard session)."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values = values if values is not None else {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def _put(self, key: str, raw: str) -> None:
        self._values[key] = raw

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self):
        return list(self._values.keys())

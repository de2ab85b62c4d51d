"""
config/repository.py - Configuration store with dot-notation access

Holds nested configuration dictionaries. Keys are dotted paths, e.g.
'database.connections.default.driver'.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union
import copy
import logging

logger = logging.getLogger("config.repository")

MISSING = object()


class Repository:
    """
    Configuration repository.

    Usage:
        config = Repository()
        config.set("view.paths", ["templates"])
        config.set({"database.default": "main", "app.locale": "en"})
        config.get("view.paths")          # ['templates']
        config["app.locale"]             # 'en'
    """

    def __init__(self, items: Optional[Mapping[str, Any]] = None):
        self._items: Dict[str, Any] = copy.deepcopy(dict(items)) if items else {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: Union[str, Iterable[str]], default: Any = None) -> Any:
        """
        Get a value using a dot-notation path.

        Args:
            key: Dotted path, or a list of paths
            default: Value returned when the path is not found

        Returns:
            The value, or a dict of path -> value when key is a list
        """
        if not isinstance(key, str):
            return {k: self.get(k, default) for k in key}

        value = self._lookup(key)
        return default if value is MISSING else value

    def has(self, key: str) -> bool:
        """Check whether a dotted path exists."""
        return self._lookup(key) is not MISSING

    def all(self) -> Dict[str, Any]:
        """Get a copy of all configuration items."""
        return copy.deepcopy(self._items)

    def _lookup(self, key: str) -> Any:
        if key in self._items:
            return self._items[key]

        obj: Any = self._items
        for part in key.split("."):
            if isinstance(obj, Mapping) and part in obj:
                obj = obj[part]
            else:
                return MISSING
        return obj

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: Union[str, Mapping[str, Any]], value: Any = None) -> None:
        """
        Set one value, or many values from a mapping of path -> value.

        Intermediate dictionaries are created as needed.
        """
        if isinstance(key, Mapping):
            for path, item in key.items():
                self._assign(path, item)
        else:
            self._assign(key, value)

    def _assign(self, key: str, value: Any) -> None:
        parts = key.split(".")
        obj = self._items
        for part in parts[:-1]:
            if not isinstance(obj.get(part), dict):
                obj[part] = {}
            obj = obj[part]
        obj[parts[-1]] = value
        logger.debug(f"Config set: {key}")

    def push(self, key: str, value: Any) -> None:
        """Append a value onto a list option."""
        items = self._as_list(key)
        items.append(value)
        self._assign(key, items)

    def prepend(self, key: str, value: Any) -> None:
        """Prepend a value onto a list option."""
        items = self._as_list(key)
        items.insert(0, value)
        self._assign(key, items)

    def _as_list(self, key: str) -> List[Any]:
        current = self.get(key, [])
        if isinstance(current, list):
            return list(current)
        return [current]

    def forget(self, key: str) -> None:
        """Remove a dotted path if present."""
        parts = key.split(".")
        obj: Any = self._items
        for part in parts[:-1]:
            if not isinstance(obj, dict) or part not in obj:
                return
            obj = obj[part]
        if isinstance(obj, dict):
            obj.pop(parts[-1], None)

    # ------------------------------------------------------------------
    # Item access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        self.forget(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"Repository({sorted(self._items)!r})"

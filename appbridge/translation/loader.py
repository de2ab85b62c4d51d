"""
translation/loader.py - Loads translation groups from JSON files

Layout under the language path:

    {path}/{locale}/{group}.json     group translations ('messages.welcome')
    {path}/{locale}.json             flat JSON translations (group '*')
    {path}/vendor/{namespace}/{locale}/{group}.json   namespace overrides
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger("translation.loader")


class FileLoader:
    """Reads translation lines through the bridge filesystem."""

    def __init__(self, files, path: str):
        self._files = files
        self._path = Path(path)
        self._hints: Dict[str, Path] = {}

    @property
    def path(self) -> Path:
        return self._path

    def add_namespace(self, namespace: str, hint: str) -> None:
        self._hints[namespace] = Path(hint)

    def namespaces(self) -> Dict[str, Path]:
        return dict(self._hints)

    def load(self, locale: str, group: str, namespace: Optional[str] = None) -> Dict[str, Any]:
        """
        Load the lines of one group.

        Returns:
            Nested dict of lines; empty when the file does not exist
        """
        if group == "*" and namespace in (None, "*"):
            return self._load_json(self._path / f"{locale}.json")

        if namespace in (None, "*"):
            return self._load_json(self._path / locale / f"{group}.json")

        return self._load_namespaced(locale, group, namespace)

    def _load_namespaced(self, locale: str, group: str, namespace: str) -> Dict[str, Any]:
        if namespace not in self._hints:
            return {}
        lines = self._load_json(self._hints[namespace] / locale / f"{group}.json")
        overrides = self._load_json(self._path / "vendor" / namespace / locale / f"{group}.json")
        lines.update(overrides)
        return lines

    def _load_json(self, path: Path) -> Dict[str, Any]:
        if not self._files.exists(path):
            return {}
        data = self._files.require_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Translation file {path} must contain a JSON object")
        logger.debug(f"Loaded translations from {path}")
        return data

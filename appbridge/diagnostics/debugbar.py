"""
diagnostics/debugbar.py - Process-wide debug bar

DebugBar.instance(config) returns the same bar until DebugBar.reset().
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import threading

from .panels import PANELS, Panel

logger = logging.getLogger("diagnostics.debugbar")

DEFAULT_CONFIG: Dict[str, Any] = {
    "enabled": True,
    "panels": {"database": True},
}


class DebugBar:
    """
    Holds diagnostic panels.

    Config:
        enabled: Whether panels collect anything
        panels: Mapping of panel name -> enabled flag or panel config dict
    """

    _instance: Optional["DebugBar"] = None
    _lock = threading.Lock()

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        merged = dict(DEFAULT_CONFIG)
        merged.update(config or {})
        self.config = merged
        self.enabled = bool(merged.get("enabled", True))
        self._panels: Dict[str, Panel] = {}

        if self.enabled:
            for name, options in (merged.get("panels") or {}).items():
                if not options:
                    continue
                panel_class = PANELS.get(name)
                if panel_class is None:
                    logger.warning(f"Unknown diagnostics panel: {name}")
                    continue
                self._panels[name] = panel_class(options if isinstance(options, dict) else None)

        logger.info(f"DebugBar created with panels: {sorted(self._panels)}")

    @classmethod
    def instance(cls, config: Optional[Dict[str, Any]] = None) -> "DebugBar":
        """Get the process-wide bar, creating it with config on first call."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls(config)
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    def get_panel(self, name: str) -> Optional[Panel]:
        return self._panels.get(name)

    def add_panel(self, panel: Panel) -> None:
        self._panels[panel.name] = panel

    @property
    def panels(self) -> List[Panel]:
        return list(self._panels.values())

    def to_dict(self) -> Dict[str, Any]:
        return {name: panel.to_dict() for name, panel in self._panels.items()}

    def render(self) -> str:
        return "\n\n".join(f"== {name} ==\n{panel.render()}" for name, panel in self._panels.items())

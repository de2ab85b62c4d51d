"""
facades/aliases.py - Installs short global names for facades

Names are installed into a namespace (builtins by default). A name that
already exists is left alone, and uninstall() only removes names this
loader installed itself.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional
import builtins
import logging

logger = logging.getLogger("facades.aliases")


class AliasLoader:
    """Installs and removes facade aliases."""

    def __init__(self, aliases: Mapping[str, Any], namespace: Any = builtins):
        self.aliases: Dict[str, Any] = dict(aliases)
        self.namespace = namespace
        self._installed: List[str] = []

    @property
    def installed(self) -> List[str]:
        return list(self._installed)

    def install(self) -> List[str]:
        """
        Install every alias whose name is still free.

        Returns:
            Names installed by this call
        """
        added = []
        for alias, target in self.aliases.items():
            if hasattr(self.namespace, alias):
                logger.warning(f"Alias {alias} already defined, skipping")
                continue
            setattr(self.namespace, alias, target)
            self._installed.append(alias)
            added.append(alias)
        if added:
            logger.info(f"Installed aliases: {', '.join(added)}")
        return added

    def uninstall(self) -> None:
        for alias in self._installed:
            if getattr(self.namespace, alias, None) is self.aliases.get(alias):
                delattr(self.namespace, alias)
        self._installed.clear()

"""
bootstrap/locator.py - has/get service locator over a Container

Callers that only need to look services up depend on this narrow interface
instead of the container itself.
"""

from __future__ import annotations
from typing import Any, Protocol, runtime_checkable
import logging

from appbridge.errors import EntryNotFoundError

logger = logging.getLogger("bootstrap.locator")


@runtime_checkable
class LocatorProtocol(Protocol):
    """Identity lookup interface."""

    def has(self, id: str) -> bool:
        ...

    def get(self, id: str) -> Any:
        ...


class ServiceLocator:
    """
    Locator over a container.

    get() raises EntryNotFoundError only when the identifier is not bound
    after the lookup failed. A bound entry whose constructor raised
    propagates the original error.
    """

    def __init__(self, container):
        self._container = container

    @property
    def container(self):
        return self._container

    def has(self, id: str) -> bool:
        return self._container.bound(id)

    def get(self, id: str) -> Any:
        try:
            return self._container.resolve(id)
        except Exception as e:
            # Boundness is checked after the failure, not before.
            if self.has(id):
                raise
            logger.debug(f"Entry not found: {id}")
            raise EntryNotFoundError(id) from e

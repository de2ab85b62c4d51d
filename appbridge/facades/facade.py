"""
facades/facade.py - Static-style accessors for container services

    from appbridge.facades import View
    View.make("users.index", {"users": users})

Attribute access on a facade class is forwarded to the service bound under
its accessor key. Resolved services are memoized per key until
clear_resolved_instances().
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import logging

from appbridge.errors import FacadeError

logger = logging.getLogger("facades")


class FacadeMeta(type):
    """Forwards unknown class attributes to the facade root."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return getattr(cls.get_facade_root(), name)


class Facade(metaclass=FacadeMeta):
    """Base facade. Subclasses set accessor to a container key."""

    accessor: Optional[str] = None

    _app = None
    _resolved_instances: Dict[str, Any] = {}

    @classmethod
    def set_facade_application(cls, app) -> None:
        Facade._app = app

    @classmethod
    def get_facade_application(cls):
        return Facade._app

    @classmethod
    def get_facade_root(cls) -> Any:
        if cls.accessor is None:
            raise FacadeError(f"{cls.__name__} does not define an accessor")

        if cls.accessor in Facade._resolved_instances:
            return Facade._resolved_instances[cls.accessor]

        if Facade._app is None:
            raise FacadeError("A facade root has not been set.", facade=cls.__name__)

        instance = Facade._app.resolve(cls.accessor)
        Facade._resolved_instances[cls.accessor] = instance
        return instance

    @classmethod
    def swap(cls, instance: Any) -> None:
        """Replace the resolved service, e.g. with a test double."""
        Facade._resolved_instances[cls.accessor] = instance
        if Facade._app is not None:
            Facade._app.bind_instance(cls.accessor, instance)

    @classmethod
    def clear_resolved_instance(cls, accessor: str) -> None:
        Facade._resolved_instances.pop(accessor, None)

    @classmethod
    def clear_resolved_instances(cls) -> None:
        Facade._resolved_instances.clear()
        logger.debug("Cleared resolved facade instances")


class View(Facade):
    accessor = "view"


class Config(Facade):
    accessor = "config"


class DB(Facade):
    accessor = "db"


class Event(Facade):
    accessor = "events"


class Lang(Facade):
    accessor = "translator"

"""
bootstrap/container.py - Service container

Provides key-based dependency injection with three binding kinds:

- INSTANCE: an already constructed value
- SINGLETON: constructed once on first resolve, then memoized
- FACTORY: constructed fresh on every resolve

Constructors are called with the container as their only argument.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List
from enum import Enum
import logging
import threading

from appbridge.errors import UnboundServiceError

logger = logging.getLogger("bootstrap.container")

Constructor = Callable[["Container"], Any]


class Lifecycle(Enum):
    """Binding kinds."""
    INSTANCE = "instance"
    SINGLETON = "singleton"
    FACTORY = "factory"


@dataclass
class ServiceDescriptor:
    """Describes a registered binding."""

    key: str
    lifecycle: Lifecycle
    concrete: Any = None

    @property
    def is_shared(self) -> bool:
        return self.lifecycle is not Lifecycle.FACTORY


class Container:
    """
    Key-based service container.

    Features:
    - Instance, singleton and factory bindings
    - Last registration for a key wins
    - Item access: ``container[key]`` resolves, ``container[key] = v`` binds an instance
    - Thread-safe singleton memoization
    """

    def __init__(self):
        self._bindings: Dict[str, ServiceDescriptor] = {}
        self._resolved: Dict[str, Any] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def bind_instance(self, key: str, value: Any) -> "Container":
        """
        Register an existing value.

        Args:
            key: Service key
            value: The value to return on resolve

        Returns:
            Self for chaining
        """
        return self._bind(ServiceDescriptor(key, Lifecycle.INSTANCE, value))

    def bind_singleton(self, key: str, constructor: Constructor) -> "Container":
        """
        Register a lazily constructed, memoized service.

        Args:
            key: Service key
            constructor: Callable receiving the container

        Returns:
            Self for chaining
        """
        return self._bind(ServiceDescriptor(key, Lifecycle.SINGLETON, constructor))

    def bind_factory(self, key: str, constructor: Constructor) -> "Container":
        """
        Register a service constructed fresh on every resolve.

        Args:
            key: Service key
            constructor: Callable receiving the container

        Returns:
            Self for chaining
        """
        return self._bind(ServiceDescriptor(key, Lifecycle.FACTORY, constructor))

    def _bind(self, descriptor: ServiceDescriptor) -> "Container":
        with self._lock:
            self._bindings[descriptor.key] = descriptor
            self._resolved.pop(descriptor.key, None)
        logger.debug(f"Bound {descriptor.key} as {descriptor.lifecycle.value}")
        return self

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, key: str) -> Any:
        """
        Resolve a service.

        Args:
            key: Service key

        Returns:
            The bound value

        Raises:
            UnboundServiceError: If nothing is bound under key
        """
        with self._lock:
            descriptor = self._bindings.get(key)
            if descriptor is None:
                raise UnboundServiceError(key)

            if descriptor.lifecycle is Lifecycle.INSTANCE:
                return descriptor.concrete

            if descriptor.lifecycle is Lifecycle.SINGLETON:
                if key in self._resolved:
                    return self._resolved[key]
                instance = descriptor.concrete(self)
                # A constructor may have rebound the key; keep the newest binding.
                if self._bindings.get(key) is descriptor:
                    self._resolved[key] = instance
                logger.debug(f"Resolved singleton {key}")
                return instance

        return descriptor.concrete(self)

    def make(self, key: str) -> Any:
        """Alias of resolve()."""
        return self.resolve(key)

    def bound(self, key: str) -> bool:
        """Check whether key has any binding."""
        return key in self._bindings

    def resolved(self, key: str) -> bool:
        """Check whether key is an instance or an already materialized singleton."""
        descriptor = self._bindings.get(key)
        if descriptor is None:
            return False
        if descriptor.lifecycle is Lifecycle.INSTANCE:
            return True
        return key in self._resolved

    def get_descriptor(self, key: str) -> ServiceDescriptor:
        """Get the binding descriptor for key."""
        try:
            return self._bindings[key]
        except KeyError:
            raise UnboundServiceError(key) from None

    def keys(self) -> List[str]:
        """Get all bound keys in registration order."""
        return list(self._bindings.keys())

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def forget(self, key: str) -> None:
        """Remove a single binding and its memoized value."""
        with self._lock:
            self._bindings.pop(key, None)
            self._resolved.pop(key, None)

    def forget_resolved(self, key: str) -> None:
        """Drop the memoized value for key, keeping the binding."""
        with self._lock:
            self._resolved.pop(key, None)

    def flush(self) -> None:
        """Clear all bindings and memoized singletons."""
        with self._lock:
            self._bindings.clear()
            self._resolved.clear()
        logger.debug("Container flushed")

    # ------------------------------------------------------------------
    # Item access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self.resolve(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.bind_instance(key, value)

    def __delitem__(self, key: str) -> None:
        self.forget(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.bound(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._bindings)

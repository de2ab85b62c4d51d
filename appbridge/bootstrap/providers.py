"""
bootstrap/providers.py - Two-phase service provider lifecycle

A provider declares bindings in register() and, optionally, wires runtime
behaviour in boot(). Both phases receive the live container, so anything
bound in register() is visible to boot().
"""

from __future__ import annotations
from typing import TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from .container import Container

logger = logging.getLogger("bootstrap.providers")


class ServiceProvider:
    """
    Base class for subsystem providers.

    Subclasses override register() and may define boot(app). A provider is
    bound to the container it was created for.
    """

    def __init__(self, app: "Container"):
        self.app = app

    @property
    def name(self) -> str:
        return type(self).__name__

    def register(self, app: "Container") -> None:
        """Declare bindings. Must not resolve services."""

    def provides(self) -> list:
        """Keys this provider binds, for introspection."""
        return []


def boot_provider(app: "Container", provider: ServiceProvider) -> ServiceProvider:
    """
    Run a provider's lifecycle against app.

    register() is always called; boot() only when the provider defines it.

    Args:
        app: Container the provider registers into
        provider: Provider instance

    Returns:
        The provider
    """
    provider.register(app)
    logger.debug(f"Registered provider {provider.name}")

    boot = getattr(provider, "boot", None)
    if callable(boot):
        boot(app)
        logger.debug(f"Booted provider {provider.name}")

    return provider

"""
view/provider.py - Registers the Jinja2-backed view subsystem

Reads 'view.paths' and 'view.compiled' from the config store.
"""

from __future__ import annotations
import logging

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemBytecodeCache,
    FileSystemLoader,
    PrefixLoader,
    select_autoescape,
)

from appbridge.bootstrap.providers import ServiceProvider
from .factory import NAMESPACE_DELIMITER, ViewFactory

logger = logging.getLogger("view.provider")


class ViewServiceProvider(ServiceProvider):
    """Binds view.loader, view.cache, view.environment and view."""

    def register(self, app) -> None:
        app.bind_singleton("view.loader", self._create_loader)
        app.bind_singleton("view.cache", self._create_cache)
        app.bind_singleton("view.environment", self._create_environment)
        app.bind_singleton("view", self._create_factory)

    def boot(self, app) -> None:
        config = app["config"]
        environment = app["view.environment"]
        environment.globals["config"] = config.get

    def provides(self) -> list:
        return ["view.loader", "view.cache", "view.environment", "view"]

    @staticmethod
    def _create_loader(app):
        paths = app["config"].get("view.paths", [])
        return ChoiceLoader([
            FileSystemLoader([str(p) for p in paths]),
            PrefixLoader({}, delimiter=NAMESPACE_DELIMITER),
        ])

    @staticmethod
    def _create_cache(app):
        compiled = app["config"].get("view.compiled")
        if not compiled:
            return None
        app["files"].ensure_directory_exists(compiled)
        return FileSystemBytecodeCache(str(compiled))

    @staticmethod
    def _create_environment(app):
        environment = Environment(
            loader=app["view.loader"],
            bytecode_cache=app["view.cache"],
            autoescape=select_autoescape(["html", "htm", "xml", "jinja2", "j2"]),
        )
        environment.globals["app"] = app
        logger.info("View environment created")
        return environment

    @staticmethod
    def _create_factory(app):
        return ViewFactory(app["view.environment"], events=app["events"])

"""
database/provider.py - Registers the database subsystem
"""

from __future__ import annotations

from appbridge.bootstrap.providers import ServiceProvider
from .manager import ConnectionFactory, DatabaseManager


class DatabaseServiceProvider(ServiceProvider):
    """Binds db.factory, db and db.connection; attaches events on boot."""

    def register(self, app) -> None:
        app.bind_singleton("db.factory", lambda app: ConnectionFactory())
        app.bind_singleton("db", lambda app: DatabaseManager(app, app["db.factory"]))
        app.bind_factory("db.connection", lambda app: app["db"].connection())

    def boot(self, app) -> None:
        app["db"].set_event_dispatcher(app["events"])

    def provides(self) -> list:
        return ["db.factory", "db", "db.connection"]

"""
database/manager.py - Connection factory and manager

Connections are configured under 'database.connections' and created lazily
on first use. The default connection name lives in 'database.default'.
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional
import logging

from sqlalchemy import create_engine

from .config import ConnectionConfig, FetchMode, missing_connection, parse_connection
from .connection import Connection

logger = logging.getLogger("database.manager")


class ConnectionFactory:
    """Builds Connection objects from raw configuration."""

    def make(
        self,
        raw: Mapping[str, Any],
        name: str,
        fetch_mode: FetchMode = FetchMode.CLASS,
    ) -> Connection:
        config = parse_connection(name, raw)
        return self.make_from_config(config, name, fetch_mode)

    def make_from_config(
        self,
        config: ConnectionConfig,
        name: str,
        fetch_mode: FetchMode = FetchMode.CLASS,
    ) -> Connection:
        engine = create_engine(config.to_url(), echo=config.echo, **config.options)
        logger.info(f"Created engine for connection [{name}] ({config.driver_name})")
        return Connection(
            engine,
            name,
            fetch_mode=fetch_mode,
            table_prefix=config.prefix,
            driver_name=config.driver_name,
        )


class DatabaseManager:
    """
    Resolves and caches named connections.

    Usage:
        db = app["db"]
        db.connection().select("select 1 as one")
        db.connection("reporting").select(...)
    """

    def __init__(self, app, factory: ConnectionFactory):
        self._app = app
        self._factory = factory
        self._connections: Dict[str, Connection] = {}
        self._events = None

    @property
    def _config(self):
        return self._app["config"]

    def connection(self, name: Optional[str] = None) -> Connection:
        """
        Get a connection by name, creating it on first use.

        Raises:
            ConfigurationError: If the connection is not configured
        """
        name = name or self.get_default_connection()

        if name not in self._connections:
            self._connections[name] = self._make_connection(name)

        return self._connections[name]

    def _make_connection(self, name: str) -> Connection:
        connections = self._config.get("database.connections", {}) or {}
        if name not in connections:
            raise missing_connection(name)

        fetch_mode = FetchMode(self._config.get("database.fetch", FetchMode.CLASS))
        connection = self._factory.make(connections[name], name, fetch_mode)
        if self._events is not None:
            connection.set_event_dispatcher(self._events)
        return connection

    def get_default_connection(self) -> str:
        return self._config.get("database.default", "default")

    def set_default_connection(self, name: str) -> None:
        self._config.set("database.default", name)

    def get_connections(self) -> Dict[str, Connection]:
        """Get the connections created so far."""
        return dict(self._connections)

    def available_connections(self) -> List[str]:
        """Get the names of all configured connections."""
        return list((self._config.get("database.connections", {}) or {}).keys())

    def disconnect(self, name: Optional[str] = None) -> None:
        name = name or self.get_default_connection()
        if name in self._connections:
            self._connections[name].disconnect()

    def purge(self, name: Optional[str] = None) -> None:
        """Disconnect and forget a connection, disposing its engine."""
        name = name or self.get_default_connection()
        connection = self._connections.pop(name, None)
        if connection is not None:
            connection.disconnect()
            connection.get_engine().dispose()
            logger.info(f"Purged connection [{name}]")

    def reconnect(self, name: Optional[str] = None) -> Connection:
        name = name or self.get_default_connection()
        self.disconnect(name)
        if name not in self._connections:
            return self.connection(name)
        return self._connections[name]

    def set_event_dispatcher(self, events) -> None:
        """Attach an event dispatcher to current and future connections."""
        self._events = events
        for connection in self._connections.values():
            connection.set_event_dispatcher(events)

    def get_event_dispatcher(self):
        return self._events

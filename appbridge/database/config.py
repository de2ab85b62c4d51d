"""
database/config.py - Connection configuration models

Each entry of 'database.connections' is validated into a ConnectionConfig
and turned into an SQLAlchemy URL.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from sqlalchemy.engine import URL, make_url

from appbridge.errors import ConfigurationError, ErrorCode


class FetchMode(str, Enum):
    """Row shape returned by select queries."""
    CLASS = "class"   # attribute access rows
    ASSOC = "assoc"   # dicts
    NUM = "num"       # tuples


# Driver name -> SQLAlchemy dialect+driver
DRIVERS: Dict[str, str] = {
    "sqlite": "sqlite",
    "mysql": "mysql+pymysql",
    "pgsql": "postgresql+psycopg2",
    "sqlsrv": "mssql+pyodbc",
}


class ConnectionConfig(BaseModel):
    """A single named connection."""

    model_config = ConfigDict(extra="allow")

    driver: Optional[str] = None
    url: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    charset: Optional[str] = None
    prefix: str = ""
    options: Dict[str, Any] = {}
    echo: bool = False

    @model_validator(mode="after")
    def _check_target(self) -> "ConnectionConfig":
        if self.url is None:
            if self.driver is None:
                raise ValueError("either 'driver' or 'url' is required")
            if self.driver not in DRIVERS:
                raise ValueError(f"unsupported driver '{self.driver}'")
        return self

    @property
    def driver_name(self) -> str:
        if self.driver:
            return self.driver
        backend = make_url(self.url).get_backend_name()
        return {"postgresql": "pgsql", "mssql": "sqlsrv"}.get(backend, backend)

    def to_url(self) -> URL:
        """Build the SQLAlchemy URL for this connection."""
        if self.url is not None:
            return make_url(self.url)

        if self.driver == "sqlite":
            database = self.database or ":memory:"
            return URL.create("sqlite", database=database)

        query = {"charset": self.charset} if self.charset else {}
        return URL.create(
            DRIVERS[self.driver],
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query=query,
        )


def parse_connection(name: str, raw: Mapping[str, Any]) -> ConnectionConfig:
    """
    Validate a raw connection mapping.

    Raises:
        ConfigurationError: If the mapping is invalid
    """
    try:
        return ConnectionConfig.model_validate(dict(raw))
    except ValidationError as e:
        error = ConfigurationError(
            f"Invalid configuration for connection [{name}]: {e.errors()[0]['msg']}",
            connection=name,
        )
        raise error from e


def missing_connection(name: str) -> ConfigurationError:
    error = ConfigurationError(f"Database connection [{name}] not configured.", connection=name)
    error.code = ErrorCode.CFG_MISSING_CONNECTION
    return error

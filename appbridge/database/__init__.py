"""
database/ - Database access (SQLAlchemy)
"""

from .config import ConnectionConfig, FetchMode
from .connection import Connection
from .manager import ConnectionFactory, DatabaseManager
from .provider import DatabaseServiceProvider

__all__ = [
    "ConnectionConfig",
    "FetchMode",
    "Connection",
    "ConnectionFactory",
    "DatabaseManager",
    "DatabaseServiceProvider",
]

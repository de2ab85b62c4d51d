"""
appbridge - Embeddable application container

Hosts without a framework get a service container, lazily registered
subsystems (views, database, pagination, translation, diagnostics) and
facades over them.

    from appbridge import create_instance

    bridge = create_instance()
    bridge.setup_database({"default": {"driver": "sqlite", "database": "app.db"}})
    users = bridge.get("db").connection().select("select * from users")
"""

__version__ = "1.0.0"

from .errors import (
    ErrorCode,
    BridgeError,
    UnboundServiceError,
    EntryNotFoundError,
    UndefinedOperationError,
    InvalidProviderError,
    ConfigurationError,
    ViewNotFoundError,
    FacadeError,
)

from .bootstrap import (
    Bridge,
    Container,
    ServiceLocator,
    ServiceProvider,
    create_app,
    create_instance,
    get_instance,
    flash_instance,
)

from .database.config import FetchMode


__all__ = [
    "__version__",
    # Errors
    "ErrorCode",
    "BridgeError",
    "UnboundServiceError",
    "EntryNotFoundError",
    "UndefinedOperationError",
    "InvalidProviderError",
    "ConfigurationError",
    "ViewNotFoundError",
    "FacadeError",
    # Bridge
    "Bridge",
    "Container",
    "ServiceLocator",
    "ServiceProvider",
    "create_app",
    "create_instance",
    "get_instance",
    "flash_instance",
    "FetchMode",
]

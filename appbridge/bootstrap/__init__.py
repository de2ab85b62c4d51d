"""
bootstrap/ - Bootstrap Layer

Provides the service container, provider lifecycle, bridge orchestration,
configuration, and the command line entry point.
"""

from .config import (
    BridgeConfig,
    LoggingConfig,
    ViewConfig,
    DatabaseConfig,
    TranslationConfig,
    DiagnosticsConfig,
    load_config,
    get_config,
)

from .container import (
    Lifecycle,
    ServiceDescriptor,
    Container,
)

from .locator import (
    LocatorProtocol,
    ServiceLocator,
)

from .providers import (
    ServiceProvider,
    boot_provider,
)

from .app import (
    BridgeState,
    Bridge,
    create_app,
    create_instance,
    get_instance,
    flash_instance,
)

from .entrypoints import (
    cli_main,
    setup_logging,
)


__all__ = [
    # Config
    "BridgeConfig",
    "LoggingConfig",
    "ViewConfig",
    "DatabaseConfig",
    "TranslationConfig",
    "DiagnosticsConfig",
    "load_config",
    "get_config",
    # Container
    "Lifecycle",
    "ServiceDescriptor",
    "Container",
    # Locator
    "LocatorProtocol",
    "ServiceLocator",
    # Providers
    "ServiceProvider",
    "boot_provider",
    # App
    "BridgeState",
    "Bridge",
    "create_app",
    "create_instance",
    "get_instance",
    "flash_instance",
    # Entry Points
    "cli_main",
    "setup_logging",
]

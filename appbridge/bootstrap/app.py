"""
bootstrap/app.py - Bridge orchestrator and process-wide accessor

The Bridge owns one Container. bootstrap() binds the baseline services
(config, request, events, files), points facades at the container and
installs aliases. setup_*() calls then register subsystem providers and run
their register/boot lifecycle immediately.

    bridge = create_instance()
    bridge.setup_view("templates", "storage/views").setup_pagination()
    html = bridge["view"].render("users.index", {"users": users})
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
import builtins
import logging
import threading

from appbridge.config.repository import Repository
from appbridge.database.config import FetchMode
from appbridge.errors import InvalidProviderError, UndefinedOperationError
from appbridge.events.dispatcher import Dispatcher
from appbridge.events.events import QueryExecuted
from appbridge.facades.aliases import AliasLoader
from appbridge.facades.facade import Facade, View
from appbridge.filesystem import Filesystem
from appbridge.http.request import capture_request
from appbridge.pagination.paginator import AbstractPaginator

from .config import BridgeConfig, load_config
from .container import Container
from .locator import ServiceLocator
from .providers import ServiceProvider, boot_provider

logger = logging.getLogger("bootstrap.app")

ProviderFactory = Callable[[Container], ServiceProvider]

# Container operations reachable directly on the bridge.
DELEGATED_OPERATIONS = frozenset({
    "bind_instance",
    "bind_singleton",
    "bind_factory",
    "resolve",
    "make",
    "bound",
    "resolved",
    "forget",
    "keys",
})

DEFAULT_ALIASES: Dict[str, Any] = {
    "View": View,
}


class BridgeState(Enum):
    """Bootstrap states."""
    UNINITIALIZED = "uninitialized"
    BOOTSTRAPPED = "bootstrapped"


class Bridge:
    """
    Minimal framework application embedded in a host.

    Features:
    - Idempotent bootstrap and explicit flash for re-initialization
    - has/get identity lookup over the container
    - Provider-based subsystem setup (view, database, pagination, translation)
    - Diagnostics subscription to database query events
    """

    def __init__(
        self,
        aliases: Optional[Mapping[str, Any]] = None,
        alias_namespace: Any = builtins,
    ):
        self._app = Container()
        self._locator = ServiceLocator(self._app)
        self._state = BridgeState.UNINITIALIZED
        self._lock = threading.RLock()
        self._loaded_providers: List[ServiceProvider] = []
        self._query_listener: Optional[Callable[[QueryExecuted], None]] = None
        self.aliases: Dict[str, Any] = dict(DEFAULT_ALIASES if aliases is None else aliases)
        self._alias_loader = AliasLoader(self.aliases, alias_namespace)

    def __getattr__(self, name: str) -> Any:
        if name in DELEGATED_OPERATIONS:
            return getattr(self._app, name)
        raise UndefinedOperationError(name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def bootstrap(self) -> "Bridge":
        """Bind baseline services. Does nothing when already bootstrapped."""
        with self._lock:
            if self._state is BridgeState.BOOTSTRAPPED:
                return self

            app = self._app
            app.bind_instance("app", app)
            app.bind_instance("config", Repository())
            app.bind_singleton("request", lambda app: capture_request())
            app.bind_singleton("events", lambda app: Dispatcher())
            app.bind_singleton("files", lambda app: Filesystem())

            Facade.set_facade_application(app)

            self._alias_loader.aliases = dict(self.aliases)
            self._alias_loader.install()

            self._state = BridgeState.BOOTSTRAPPED
            logger.info("Bridge bootstrapped")

        return self

    def is_bootstrapped(self) -> bool:
        return self._state is BridgeState.BOOTSTRAPPED

    @property
    def state(self) -> BridgeState:
        return self._state

    def flash(self) -> "Bridge":
        """Tear down bootstrap state so bootstrap() can run again."""
        with self._lock:
            self._release_connections()
            self._app.flush()
            Facade.clear_resolved_instances()
            if Facade.get_facade_application() is self._app:
                Facade.set_facade_application(None)
            AbstractPaginator.reset_resolvers()
            self._alias_loader.uninstall()
            self._loaded_providers.clear()
            self._query_listener = None
            self._state = BridgeState.UNINITIALIZED
            logger.info("Bridge flashed")

        return self

    def _release_connections(self) -> None:
        if not self._app.resolved("db"):
            return
        manager = self._app.resolve("db")
        for name in list(manager.get_connections()):
            manager.purge(name)

    def _ensure_bootstrapped(self) -> None:
        if not self.is_bootstrapped():
            self.bootstrap()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has(self, id: str) -> bool:
        return self._locator.has(id)

    def get(self, id: str) -> Any:
        return self._locator.get(id)

    @property
    def locator(self) -> ServiceLocator:
        return self._locator

    @property
    def loaded_providers(self) -> List[ServiceProvider]:
        return list(self._loaded_providers)

    def get_app(self) -> Container:
        return self._app

    def get_request(self):
        return self._app.resolve("request")

    def get_events(self) -> Dispatcher:
        return self._app.resolve("events")

    def get_config(self) -> Repository:
        return self._app.resolve("config")

    def running_in_console(self) -> bool:
        if self._app.bound("runningInConsole"):
            return bool(self._app.resolve("runningInConsole"))
        return False

    def __getitem__(self, key: str) -> Any:
        return self._app[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._app[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._app

    # ------------------------------------------------------------------
    # Setup operations
    # ------------------------------------------------------------------

    def setup_running_in_console(self, is_: bool = True) -> "Bridge":
        self._ensure_bootstrapped()
        self._app["runningInConsole"] = is_
        return self

    def setup_view(self, paths: Union[str, Sequence[str]], compiled_path: str) -> "Bridge":
        """
        Activate view rendering.

        Args:
            paths: Template directory or directories
            compiled_path: Directory for compiled template cache
        """
        from appbridge.view.provider import ViewServiceProvider

        if isinstance(paths, str) or not isinstance(paths, Sequence):
            paths = [paths]

        def factory(app: Container) -> ServiceProvider:
            app["config"].set({
                "view.paths": [str(p) for p in paths],
                "view.compiled": str(compiled_path),
            })
            return ViewServiceProvider(app)

        return self.setup_callable_provider(factory)

    def setup_database(
        self,
        connections: Mapping[str, Mapping[str, Any]],
        default: str = "default",
        fetch: FetchMode = FetchMode.CLASS,
    ) -> "Bridge":
        """
        Activate database access.

        Args:
            connections: Connection name -> connection settings
            default: Default connection name
            fetch: Row shape for select queries
        """
        from appbridge.database.provider import DatabaseServiceProvider

        def factory(app: Container) -> ServiceProvider:
            app["config"].set({
                "database.connections": dict(connections),
                "database.default": default,
                "database.fetch": FetchMode(fetch),
            })
            return DatabaseServiceProvider(app)

        return self.setup_callable_provider(factory)

    def setup_pagination(self) -> "Bridge":
        from appbridge.pagination.provider import PaginationServiceProvider

        return self.setup_callable_provider(lambda app: PaginationServiceProvider(app))

    def setup_translator(self, lang_path: str) -> "Bridge":
        """Activate translation with lines under lang_path."""
        from appbridge.translation.provider import TranslationServiceProvider

        def factory(app: Container) -> ServiceProvider:
            app.bind_instance("path.lang", str(lang_path))
            return TranslationServiceProvider(app)

        return self.setup_callable_provider(factory)

    def setup_locale(self, locale: str) -> "Bridge":
        self._ensure_bootstrapped()
        # The live translator validates before the config store changes
        if self._app.resolved("translator"):
            self._app["translator"].set_locale(locale)
        self._app["config"]["app.locale"] = locale
        return self

    def setup_diagnostics(self, config: Optional[Dict[str, Any]] = None) -> "Bridge":
        """Activate the debug bar and feed it every executed query."""
        from appbridge.diagnostics.debugbar import DebugBar

        self._ensure_bootstrapped()

        bar = DebugBar.instance(config or {})
        self._app.bind_instance("debugbar", bar)

        if self._query_listener is not None:
            self.get_events().remove_listener(QueryExecuted, self._query_listener)
            self._query_listener = None

        panel = bar.get_panel("database")
        if panel is None:
            logger.info("Database panel disabled, query logging skipped")
            return self

        def log_query(event: QueryExecuted) -> None:
            handle = event.connection.get_raw_connection() if event.connection is not None else None
            panel.log_query(event.sql, event.bindings, event.time, event.connection_name, handle)

        self.get_events().listen(QueryExecuted, log_query)
        self._query_listener = log_query
        return self

    def setup_callable_provider(self, factory: ProviderFactory) -> "Bridge":
        """
        Register and boot the provider returned by factory(app).

        Raises:
            InvalidProviderError: If factory does not return a ServiceProvider
        """
        self._ensure_bootstrapped()

        provider = factory(self._app)
        if not isinstance(provider, ServiceProvider):
            raise InvalidProviderError(
                f"Provider factory returned {type(provider).__name__}, expected ServiceProvider"
            )

        self.boot_service_provider(provider)
        return self

    def boot_service_provider(self, provider: ServiceProvider) -> ServiceProvider:
        boot_provider(self._app, provider)
        self._loaded_providers.append(provider)
        logger.info(f"Provider {provider.name} loaded")
        return provider


# Process-wide bridge
_instance: Optional[Bridge] = None
_instance_lock = threading.Lock()


def create_instance() -> Bridge:
    """Get the process-wide bridge, creating and bootstrapping it if needed."""
    global _instance

    if _instance is None:
        with _instance_lock:
            # Double-checked: another thread may have created it
            if _instance is None:
                _instance = Bridge()

    if not _instance.is_bootstrapped():
        _instance.bootstrap()

    return _instance


get_instance = create_instance


def flash_instance() -> None:
    """Flash the process-wide bridge, keeping the object itself."""
    create_instance().flash()


def create_app(config: Union[BridgeConfig, str, None] = None, bridge: Optional[Bridge] = None) -> Bridge:
    """
    Build a bridge and apply every configured setup.

    Args:
        config: BridgeConfig, path to a JSON config file, or None for defaults
        bridge: Bridge to configure (a new one when omitted)

    Returns:
        Bootstrapped bridge
    """
    if not isinstance(config, BridgeConfig):
        config = load_config(config)

    bridge = bridge if bridge is not None else Bridge()
    bridge.bootstrap()

    repository = bridge.get_config()
    repository.set({
        "app.env": config.environment,
        "app.debug": config.debug,
        "app.locale": config.translation.locale,
        "app.fallback_locale": config.translation.fallback_locale,
    })
    if config.settings:
        repository.set(config.settings)

    bridge.setup_running_in_console(config.running_in_console)

    if config.view.enabled:
        bridge.setup_view(config.view.paths, config.view.compiled_path)

    if config.database.enabled:
        bridge.setup_database(config.database.connections, config.database.default, FetchMode(config.database.fetch))

    bridge.setup_pagination()

    if config.translation.lang_path:
        bridge.setup_translator(config.translation.lang_path)

    if config.diagnostics.enabled:
        bridge.setup_diagnostics(config.diagnostics.to_debugbar_config())

    logger.info(f"Bridge created: environment={config.environment}, providers={len(bridge.loaded_providers)}")
    return bridge

"""
Unit tests for the Bridge orchestrator.

Tests bootstrap/flash, lookup, delegation, and every setup operation.
"""

import builtins
import threading

import pytest
from unittest.mock import Mock
from werkzeug.wrappers import Request

import appbridge.bootstrap.app as bridge_module
from appbridge.bootstrap.app import Bridge, BridgeState, create_instance, flash_instance, get_instance
from appbridge.bootstrap.container import Container
from appbridge.bootstrap.providers import ServiceProvider
from appbridge.config.repository import Repository
from appbridge.database.config import FetchMode
from appbridge.diagnostics.debugbar import DebugBar
from appbridge.errors import (
    EntryNotFoundError,
    InvalidProviderError,
    UnboundServiceError,
    UndefinedOperationError,
)
from appbridge.events.dispatcher import Dispatcher
from appbridge.events.events import QueryExecuted
from appbridge.facades.facade import Facade, View
from appbridge.filesystem import Filesystem
from appbridge.pagination.paginator import AbstractPaginator, LengthAwarePaginator


class TestBootstrap:
    """Tests for bootstrap() and flash()."""

    def test_fresh_bridge_not_bootstrapped(self, alias_namespace):
        """A new bridge has not bootstrapped."""
        bridge = Bridge(alias_namespace=alias_namespace)

        assert bridge.is_bootstrapped() is False
        assert bridge.state is BridgeState.UNINITIALIZED
        assert bridge.has("config") is False

    def test_baseline_bindings(self, bridge):
        """Bootstrap binds config, request, events, files and app."""
        assert bridge.is_bootstrapped() is True
        for key in ("config", "request", "events", "files", "app"):
            assert bridge.has(key) is True

        assert isinstance(bridge.get("config"), Repository)
        assert bridge.get("config").all() == {}
        assert isinstance(bridge.get("events"), Dispatcher)
        assert isinstance(bridge.get("files"), Filesystem)
        assert isinstance(bridge.get("request"), Request)
        assert bridge.get("app") is bridge.get_app()

    def test_bootstrap_is_idempotent(self, bridge):
        """A second bootstrap changes nothing."""
        config = bridge.get_config()
        events = bridge.get_events()

        bridge.bootstrap()

        assert bridge.get_config() is config
        assert bridge.get_events() is events

    def test_flash_then_bootstrap(self, bridge):
        """After flash, bootstrap runs again with fresh services."""
        config = bridge.get_config()
        config.set("app.name", "first")

        bridge.flash()

        assert bridge.is_bootstrapped() is False
        assert bridge.has("config") is False

        bridge.bootstrap()

        assert bridge.get_config() is not config
        assert bridge.get_config().get("app.name") is None

    def test_flash_clears_providers(self, bridge):
        """flash() forgets loaded providers."""
        bridge.setup_pagination()

        bridge.flash()

        assert bridge.loaded_providers == []

    def test_flash_resets_paginator_resolvers(self, bridge):
        """Paginator resolvers do not outlive the container."""
        bridge.setup_pagination()

        bridge.flash()

        assert AbstractPaginator.current_page_resolver is None

    def test_bootstrap_points_facades_at_container(self, bridge):
        """Facades resolve from the bridge's container."""
        assert Facade.get_facade_application() is bridge.get_app()

        bridge.flash()

        assert Facade.get_facade_application() is None

    def test_request_is_singleton(self, bridge):
        """The request is captured once."""
        assert bridge.get_request() is bridge.get_request()


class TestAliases:
    """Tests for alias installation."""

    def test_view_alias_installed(self, bridge, alias_namespace):
        """Bootstrap installs the View alias."""
        assert alias_namespace.View is View

    def test_alias_removed_on_flash(self, bridge, alias_namespace):
        """flash() removes installed aliases."""
        bridge.flash()

        assert not hasattr(alias_namespace, "View")

    def test_existing_view_not_overwritten(self, alias_namespace):
        """A pre-existing global View is left alone."""
        existing = object()
        alias_namespace.View = existing

        bridge = Bridge(alias_namespace=alias_namespace).bootstrap()

        assert alias_namespace.View is existing

        bridge.flash()
        assert alias_namespace.View is existing

    def test_builtins_namespace_by_default(self):
        """Without a namespace, aliases go to builtins and leave on flash."""
        if hasattr(builtins, "View"):
            pytest.skip("builtins already defines View")

        bridge = Bridge().bootstrap()
        try:
            assert builtins.View is View
        finally:
            bridge.flash()

        assert not hasattr(builtins, "View")

    def test_custom_aliases(self, alias_namespace):
        """Custom alias maps replace the defaults."""
        bridge = Bridge(aliases={"Cfg": View}, alias_namespace=alias_namespace).bootstrap()

        assert alias_namespace.Cfg is View
        assert not hasattr(alias_namespace, "View")

        bridge.flash()


class TestLookup:
    """Tests for has/get and delegation."""

    def test_get_unbound_is_not_found(self, bridge):
        """Unbound ids raise EntryNotFoundError."""
        with pytest.raises(EntryNotFoundError):
            bridge.get("missing")

    def test_get_bound_failure_propagates(self, bridge):
        """Bound ids propagate constructor errors."""
        bridge.bind_singleton("broken", Mock(side_effect=ValueError("boom")))

        with pytest.raises(ValueError, match="boom"):
            bridge.get("broken")

    def test_delegated_operations(self, bridge):
        """Enumerated container operations are reachable on the bridge."""
        bridge.bind_instance("a", 1)
        bridge.bind_factory("b", lambda app: object())

        assert bridge.bound("a") is True
        assert bridge.resolve("a") == 1
        assert bridge.make("b") is not bridge.make("b")
        assert "a" in bridge.keys()

    def test_item_access(self, bridge):
        """Item access binds and resolves."""
        bridge["flag"] = True

        assert bridge["flag"] is True
        assert "flag" in bridge

    def test_undefined_operation(self, bridge):
        """Unknown operations raise UndefinedOperationError."""
        with pytest.raises(UndefinedOperationError) as exc_info:
            bridge.frobnicate()

        assert isinstance(exc_info.value, AttributeError)
        assert "frobnicate" in str(exc_info.value)

    def test_flush_not_delegated(self, bridge):
        """flush is not exposed; flash() is the reset operation."""
        with pytest.raises(UndefinedOperationError):
            bridge.flush()

    def test_resolve_unbound(self, bridge):
        """resolve() keeps the container's error."""
        with pytest.raises(UnboundServiceError):
            bridge.resolve("missing")


class TestSetupOperations:
    """Tests for setup_*()."""

    def test_setup_before_bootstrap_bootstraps(self, alias_namespace):
        """Setup operations bootstrap a fresh bridge first."""
        bridge = Bridge(alias_namespace=alias_namespace)

        bridge.setup_running_in_console()

        assert bridge.is_bootstrapped() is True
        assert bridge.running_in_console() is True
        bridge.flash()

    def test_running_in_console(self, bridge):
        """setup_running_in_console() binds the flag."""
        assert bridge.running_in_console() is False

        bridge.setup_running_in_console(False)
        assert bridge.get("runningInConsole") is False

        bridge.setup_running_in_console()
        assert bridge.running_in_console() is True

    def test_setup_view_stages_config(self, bridge, views_dir, tmp_path):
        """setup_view() stores paths and compiled path and binds view."""
        bridge.setup_view(str(views_dir), str(tmp_path / "compiled"))

        config = bridge.get_config()
        assert config.get("view.paths") == [str(views_dir)]
        assert config.get("view.compiled") == str(tmp_path / "compiled")
        assert bridge.get("view").render("hello", {"name": "x"}) == "Hello x"

    def test_setup_view_many_paths(self, bridge, views_dir, tmp_path):
        """A list of paths is stored as given."""
        other = tmp_path / "other"
        other.mkdir()

        bridge.setup_view([str(views_dir), str(other)], str(tmp_path / "compiled"))

        assert bridge.get_config().get("view.paths") == [str(views_dir), str(other)]

    def test_setup_database_stages_config(self, bridge, sqlite_connections):
        """setup_database() stores connections, default and fetch mode."""
        bridge.setup_database(sqlite_connections, "default")

        config = bridge.get_config()
        assert config.get("database.default") == "default"
        assert config.get("database.connections") == sqlite_connections
        assert config.get("database.fetch") is FetchMode.CLASS
        assert bridge.has("db") is True

    def test_setup_database_registers_lazily(self, bridge, sqlite_connections):
        """No connection is opened until one is requested."""
        bridge.setup_database(sqlite_connections)

        assert bridge.get("db").get_connections() == {}

    def test_setup_pagination(self, bridge):
        """setup_pagination() installs paginator resolvers."""
        bridge.setup_pagination()

        assert AbstractPaginator.current_page_resolver is not None
        assert AbstractPaginator.resolve_current_page() == 1

    def test_setup_translator(self, bridge, lang_dir):
        """setup_translator() binds path.lang and the translator."""
        bridge.setup_translator(str(lang_dir))

        assert bridge.get("path.lang") == str(lang_dir)
        assert bridge.get("translator").get("messages.welcome", {"name": "a"}) == "Welcome, a"

    def test_setup_locale_before_translator(self, bridge, lang_dir):
        """The configured locale is used when the translator is built."""
        bridge.setup_locale("fr")
        bridge.setup_translator(str(lang_dir))

        assert bridge.get_config().get("app.locale") == "fr"
        assert bridge.get("translator").get_locale() == "fr"

    def test_setup_locale_updates_resolved_translator(self, bridge, lang_dir):
        """An already built translator switches locale."""
        bridge.setup_translator(str(lang_dir))
        translator = bridge.get("translator")

        bridge.setup_locale("fr")

        assert translator.get_locale() == "fr"

    def test_invalid_locale_leaves_config(self, bridge, lang_dir):
        """A locale the translator rejects is not stored."""
        bridge.setup_translator(str(lang_dir))
        bridge.setup_locale("fr")
        bridge.get("translator")

        with pytest.raises(ValueError):
            bridge.setup_locale("../etc")

        assert bridge.get_config().get("app.locale") == "fr"
        assert bridge.get("translator").get_locale() == "fr"

    def test_pagination_before_view(self, bridge, views_dir, tmp_path):
        """Paginators render when views are set up after pagination."""
        bridge.setup_pagination()
        bridge.setup_view(str(views_dir), str(tmp_path / "compiled"))

        page = LengthAwarePaginator(range(5), total=50, per_page=5, current_page=2, path="/users")

        assert '<span class="active">2</span>' in page.render()

    def test_pagination_after_view_rebound(self, bridge, views_dir, tmp_path):
        """A second setup_view() keeps pagination views available."""
        bridge.setup_view(str(views_dir), str(tmp_path / "compiled"))
        bridge.setup_pagination()
        bridge.setup_view(str(views_dir), str(tmp_path / "compiled"))

        page = LengthAwarePaginator(range(5), total=50, per_page=5, current_page=2, path="/users")

        assert '<span class="active">2</span>' in page.render()
        assert bridge.get("view").has_namespace("pagination") is True

    def test_setup_diagnostics_twice_subscribes_once(self, bridge):
        """Repeated setup_diagnostics() keeps a single query listener."""
        bridge.setup_diagnostics()
        bridge.setup_diagnostics()

        assert len(bridge.get_events().get_listeners(QueryExecuted)) == 1

    def test_setup_diagnostics_binds_debugbar(self, bridge):
        """setup_diagnostics() binds the shared debug bar."""
        bridge.setup_diagnostics()

        assert bridge.get("debugbar") is DebugBar.instance()

    def test_setup_diagnostics_without_database_panel(self, bridge):
        """Without a database panel nothing is subscribed."""
        bridge.setup_diagnostics({"panels": {"database": False}})

        assert bridge.get_events().listener_count == 0


class TestCallableProvider:
    """Tests for setup_callable_provider()."""

    def test_provider_lifecycle(self, bridge):
        """The factory gets the container; register then boot run."""
        calls = []

        class Custom(ServiceProvider):
            def register(self, app):
                calls.append("register")
                app.bind_instance("custom", "value")

            def boot(self, app):
                calls.append("boot")

        factory = Mock(side_effect=lambda app: Custom(app))

        result = bridge.setup_callable_provider(factory)

        assert result is bridge
        factory.assert_called_once_with(bridge.get_app())
        assert calls == ["register", "boot"]
        assert bridge.get("custom") == "value"
        assert isinstance(bridge.loaded_providers[-1], Custom)

    def test_invalid_provider(self, bridge):
        """A factory returning something else raises InvalidProviderError."""
        with pytest.raises(InvalidProviderError):
            bridge.setup_callable_provider(lambda app: object())

    def test_boot_time_unbound_error(self, bridge):
        """A boot() that needs an unbound service raises UnboundServiceError."""
        class NeedsMissing(ServiceProvider):
            def boot(self, app):
                app.resolve("not.there")

        with pytest.raises(UnboundServiceError):
            bridge.setup_callable_provider(lambda app: NeedsMissing(app))

    def test_chaining(self, bridge, views_dir, tmp_path, lang_dir):
        """Setup operations chain."""
        result = (
            bridge.setup_view(str(views_dir), str(tmp_path / "compiled"))
            .setup_pagination()
            .setup_translator(str(lang_dir))
            .setup_locale("en")
        )

        assert result is bridge
        assert [p.name for p in bridge.loaded_providers] == [
            "ViewServiceProvider",
            "PaginationServiceProvider",
            "TranslationServiceProvider",
        ]


class TestGlobalInstance:
    """Tests for the process-wide bridge."""

    def test_create_instance_bootstraps(self):
        """create_instance() returns a bootstrapped bridge."""
        bridge = create_instance()

        assert bridge.is_bootstrapped() is True
        assert get_instance() is bridge

    def test_flash_instance_keeps_object(self):
        """flash_instance() resets state; the next access bootstraps again."""
        bridge = create_instance()
        config = bridge.get_config()

        flash_instance()

        assert bridge.is_bootstrapped() is False
        again = get_instance()
        assert again is bridge
        assert again.get_config() is not config

    def test_concurrent_creation(self):
        """Concurrent first access creates one bridge."""
        results = []

        def worker():
            results.append(create_instance())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(result is results[0] for result in results)
        assert bridge_module._instance is results[0]

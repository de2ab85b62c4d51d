"""
Unit tests for the service provider lifecycle.
"""

import pytest
from unittest.mock import Mock

from appbridge.bootstrap.container import Container
from appbridge.bootstrap.providers import ServiceProvider, boot_provider
from appbridge.errors import UnboundServiceError


class RecordingProvider(ServiceProvider):
    """Records lifecycle calls."""

    def __init__(self, app, calls):
        super().__init__(app)
        self.calls = calls

    def register(self, app):
        self.calls.append("register")
        app.bind_instance("recorded", "yes")

    def boot(self, app):
        self.calls.append(("boot", app.resolve("recorded")))


class RegisterOnlyProvider(ServiceProvider):
    def register(self, app):
        app.bind_instance("only", True)


class TestBootProvider:
    """Tests for boot_provider()."""

    def test_register_then_boot(self):
        """register() runs before boot(), which sees its bindings."""
        container = Container()
        calls = []

        boot_provider(container, RecordingProvider(container, calls))

        assert calls == ["register", ("boot", "yes")]

    def test_boot_is_optional(self):
        """Providers without boot() are registered only."""
        container = Container()

        provider = boot_provider(container, RegisterOnlyProvider(container))

        assert isinstance(provider, RegisterOnlyProvider)
        assert container.resolve("only") is True

    def test_boot_receives_container(self):
        """boot() is called with the container."""
        container = Container()
        provider = ServiceProvider(container)
        provider.boot = Mock()

        boot_provider(container, provider)

        provider.boot.assert_called_once_with(container)

    def test_boot_error_propagates(self):
        """A boot() failure reaches the caller."""
        container = Container()

        class NeedsMissing(ServiceProvider):
            def boot(self, app):
                app.resolve("missing")

        with pytest.raises(UnboundServiceError):
            boot_provider(container, NeedsMissing(container))


class TestServiceProvider:
    """Tests for the base class."""

    def test_base_register_is_noop(self):
        """The base provider binds nothing."""
        container = Container()

        ServiceProvider(container).register(container)

        assert container.keys() == []

    def test_name_and_app(self):
        """Providers know their container and class name."""
        container = Container()
        provider = RegisterOnlyProvider(container)

        assert provider.app is container
        assert provider.name == "RegisterOnlyProvider"
        assert provider.provides() == []

"""
appbridge test configuration and fixtures

Global state (the process-wide bridge, facades, paginator resolvers, the
debug bar and loaded configuration) is reset around every test.
"""

import json
from types import SimpleNamespace

import pytest

import appbridge.bootstrap.app as bridge_module
import appbridge.bootstrap.config as config_module
from appbridge.bootstrap.app import Bridge
from appbridge.diagnostics.debugbar import DebugBar
from appbridge.facades.facade import Facade
from appbridge.pagination.paginator import AbstractPaginator


@pytest.fixture(autouse=True)
def reset_global_state():
    """Flash the process-wide bridge and clear static state after each test."""
    yield

    if bridge_module._instance is not None:
        bridge_module._instance.flash()
    bridge_module._instance = None
    config_module._config = None

    Facade.set_facade_application(None)
    Facade.clear_resolved_instances()
    AbstractPaginator.reset_resolvers()
    DebugBar.reset()


@pytest.fixture
def alias_namespace():
    """Namespace standing in for builtins when installing aliases."""
    return SimpleNamespace()


@pytest.fixture
def bridge(alias_namespace):
    """A bootstrapped bridge whose aliases go to a private namespace."""
    instance = Bridge(alias_namespace=alias_namespace).bootstrap()
    yield instance
    instance.flash()


@pytest.fixture
def views_dir(tmp_path):
    """Template directory with a few views."""
    root = tmp_path / "views"
    (root / "users").mkdir(parents=True)
    (root / "users" / "index.html").write_text(
        "<ul>{% for user in users %}<li>{{ user }}</li>{% endfor %}</ul>"
    )
    (root / "hello.html").write_text("Hello {{ name }}")
    (root / "plain.txt").write_text("Plain {{ value }}")
    return root


@pytest.fixture
def lang_dir(tmp_path):
    """Translation files for en and fr."""
    root = tmp_path / "lang"
    (root / "en").mkdir(parents=True)
    (root / "fr").mkdir(parents=True)

    (root / "en" / "messages.json").write_text(json.dumps({
        "welcome": "Welcome, :name",
        "apple": "apple|apples",
        "apples": "{0} No apples|[1,19] Some apples|[20,*] Many apples",
        "nested": {"title": "Nested title"},
    }))
    (root / "fr" / "messages.json").write_text(json.dumps({
        "welcome": "Bienvenue, :name",
    }))
    (root / "fr.json").write_text(json.dumps({
        "Good morning": "Bonjour",
    }))
    return root


@pytest.fixture
def sqlite_connections(tmp_path):
    """Connection settings for a file-backed SQLite database."""
    return {
        "default": {"driver": "sqlite", "database": str(tmp_path / "app.db")},
    }

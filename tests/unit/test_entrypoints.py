"""
Unit tests for the command line entry point and logging setup.
"""

import json
import logging
import sqlite3

import pytest
from unittest.mock import patch

from appbridge.bootstrap.entrypoints import JSONFormatter, cli_main, setup_logging


@pytest.fixture
def no_logging_setup():
    with patch("appbridge.bootstrap.entrypoints.setup_logging") as mocked:
        yield mocked


@pytest.fixture
def config_file(tmp_path, views_dir):
    database = tmp_path / "cli.db"
    with sqlite3.connect(database) as conn:
        conn.execute("create table users (id integer primary key, name text)")
        conn.execute("insert into users (name) values ('ada'), ('grace')")
    conn.close()

    path = tmp_path / "appbridge.json"
    path.write_text(json.dumps({
        "view": {"paths": [str(views_dir)], "compiled_path": str(tmp_path / "compiled")},
        "database": {"connections": {"default": {"driver": "sqlite", "database": str(database)}}},
    }))
    return str(path)


class TestCliMain:
    """Tests for cli_main()."""

    def test_no_command_prints_help(self, no_logging_setup, capsys):
        """Without a command the help is shown."""
        assert cli_main([]) == 2
        assert "usage" in capsys.readouterr().out.lower()

    def test_info(self, no_logging_setup, config_file, capsys):
        """info prints bindings and providers as JSON."""
        assert cli_main(["-c", config_file, "info"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["bootstrapped"] is True
        assert data["running_in_console"] is True
        assert "view" in data["bindings"]
        assert "ViewServiceProvider" in data["providers"]

    def test_render(self, no_logging_setup, config_file, capsys):
        """render prints the rendered view."""
        code = cli_main(["-c", config_file, "render", "hello", "--data", '{"name": "cli"}'])

        assert code == 0
        assert capsys.readouterr().out.strip() == "Hello cli"

    def test_render_missing_view(self, no_logging_setup, config_file, capsys):
        """A missing view exits with an error."""
        assert cli_main(["-c", config_file, "render", "nope"]) == 1
        assert "nope" in capsys.readouterr().err

    def test_query(self, no_logging_setup, config_file, capsys):
        """query prints rows as JSON objects."""
        code = cli_main(["-c", config_file, "query", "select name from users where id > ? order by id", "-b", "0"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == [{"name": "ada"}, {"name": "grace"}]

    def test_query_without_database(self, no_logging_setup, tmp_path, capsys):
        """query needs a configured connection."""
        path = tmp_path / "empty.json"
        path.write_text("{}")

        assert cli_main(["-c", str(path), "query", "select 1"]) == 2

    def test_verbose_sets_debug(self, no_logging_setup, config_file):
        """--verbose configures DEBUG logging."""
        cli_main(["-c", config_file, "--verbose", "info"])

        assert no_logging_setup.call_args.kwargs["level"] == "DEBUG"


class TestSetupLogging:
    """Tests for setup_logging()."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_level_and_file(self, tmp_path):
        """The root logger gets the level and a file handler."""
        log_file = tmp_path / "app.log"

        setup_logging("DEBUG", str(log_file))
        logging.getLogger("bootstrap.test").debug("written")

        assert logging.getLogger().level == logging.DEBUG
        assert "written" in log_file.read_text()

    def test_json_format(self):
        """JSON format produces one object per record."""
        record = logging.LogRecord("x.y", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        data = json.loads(JSONFormatter().format(record))

        assert data["logger"] == "x.y"
        assert data["level"] == "INFO"
        assert data["message"] == "hello world"

"""
bootstrap/entrypoints.py - Command line entry point

    appbridge info
    appbridge -c appbridge.json render users.index --data '{"users": []}'
    appbridge query "select * from users where id = ?" --binding 1
"""

from __future__ import annotations
from typing import Any, Dict, List
import argparse
import json
import logging
import sys

from appbridge.errors import BridgeError

logger = logging.getLogger("bootstrap.entrypoints")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(level: str = "INFO", log_file: str = None, json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Console handler; stdout carries command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("babel").setLevel(logging.WARNING)


def _row_to_json(row: Any) -> Any:
    if hasattr(row, "_mapping"):
        return dict(row._mapping)
    if isinstance(row, dict):
        return row
    return list(row)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Application bridge CLI",
        prog="appbridge",
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    commands = parser.add_subparsers(dest="command")

    commands.add_parser("info", help="Show bindings and loaded providers")

    render = commands.add_parser("render", help="Render a view")
    render.add_argument("template", help="View name, e.g. users.index or ns::mail.welcome")
    render.add_argument("--data", help="JSON object passed to the view", default="{}")

    query = commands.add_parser("query", help="Run a select and print rows as JSON")
    query.add_argument("sql", help="SQL with ? placeholders")
    query.add_argument("-b", "--binding", action="append", default=[], help="Positional binding (repeatable)")
    query.add_argument("--connection", help="Connection name", default=None)

    return parser


def _info(bridge) -> Dict[str, Any]:
    return {
        "bootstrapped": bridge.is_bootstrapped(),
        "running_in_console": bridge.running_in_console(),
        "bindings": sorted(bridge.keys()),
        "providers": [provider.name for provider in bridge.loaded_providers],
    }


def cli_main(args: List[str] = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = _build_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 2

    # Setup logging
    log_level = "DEBUG" if parsed.verbose else parsed.log_level
    setup_logging(level=log_level, log_file=parsed.log_file, json_format=parsed.json_logs)

    try:
        from .app import Bridge, create_app
        from .config import load_config

        config = load_config(parsed.config)
        config.running_in_console = True
        bridge = create_app(config, Bridge())

        try:
            if parsed.command == "info":
                print(json.dumps(_info(bridge), indent=2))
                return 0

            if parsed.command == "render":
                if not bridge.has("view"):
                    print("Views are not configured", file=sys.stderr)
                    return 2
                data = json.loads(parsed.data)
                print(bridge.get("view").render(parsed.template, data))
                return 0

            if parsed.command == "query":
                if not bridge.has("db"):
                    print("No database connections are configured", file=sys.stderr)
                    return 2
                connection = bridge.get("db").connection(parsed.connection)
                rows = connection.select(parsed.sql, parsed.binding)
                print(json.dumps([_row_to_json(row) for row in rows], indent=2, default=str))
                return 0
        finally:
            bridge.flash()

        parser.error(f"unknown command: {parsed.command}")
        return 2

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except BridgeError as e:
        logger.error(f"{e.code.name}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


def main():
    """Main entry point for the package."""
    sys.exit(cli_main(sys.argv[1:]))


if __name__ == "__main__":
    main()

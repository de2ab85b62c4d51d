"""
bootstrap/config.py - Bridge configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("bootstrap.config")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("APPBRIDGE_LOG_LEVEL", "INFO"),
            format=os.getenv("APPBRIDGE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("APPBRIDGE_LOG_FILE"),
            json_logs=_env_flag("APPBRIDGE_JSON_LOGS"),
        )


@dataclass
class ViewConfig:
    """Template locations. View rendering is set up only when paths is non-empty."""

    paths: List[str] = field(default_factory=list)
    compiled_path: str = "./storage/views"

    @classmethod
    def from_env(cls) -> "ViewConfig":
        paths = os.getenv("APPBRIDGE_VIEW_PATHS", "")
        return cls(
            paths=[p for p in paths.split(",") if p] if paths else [],
            compiled_path=os.getenv("APPBRIDGE_VIEW_COMPILED", "./storage/views"),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.paths)


@dataclass
class DatabaseConfig:
    """Named connections. Database access is set up only when connections is non-empty."""

    connections: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    default: str = "default"
    fetch: str = "class"

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        default = os.getenv("APPBRIDGE_DB_DEFAULT", "default")
        url = os.getenv("APPBRIDGE_DB_URL")
        return cls(
            connections={default: {"url": url}} if url else {},
            default=default,
            fetch=os.getenv("APPBRIDGE_DB_FETCH", "class"),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.connections)


@dataclass
class TranslationConfig:
    """Translation files location and locale."""

    lang_path: Optional[str] = None
    locale: str = "en"
    fallback_locale: Optional[str] = None

    @classmethod
    def from_env(cls) -> "TranslationConfig":
        return cls(
            lang_path=os.getenv("APPBRIDGE_LANG_PATH"),
            locale=os.getenv("APPBRIDGE_LOCALE", "en"),
            fallback_locale=os.getenv("APPBRIDGE_FALLBACK_LOCALE"),
        )


@dataclass
class DiagnosticsConfig:
    """Debug bar configuration."""

    enabled: bool = False
    database_panel: bool = True
    slow_query_ms: float = 100.0
    max_queries: int = 500

    @classmethod
    def from_env(cls) -> "DiagnosticsConfig":
        return cls(
            enabled=_env_flag("APPBRIDGE_DEBUGBAR"),
            database_panel=_env_flag("APPBRIDGE_DEBUGBAR_DATABASE", "true"),
            slow_query_ms=float(os.getenv("APPBRIDGE_DEBUGBAR_SLOW_MS", "100")),
            max_queries=int(os.getenv("APPBRIDGE_DEBUGBAR_MAX_QUERIES", "500")),
        )

    def to_debugbar_config(self) -> Dict[str, Any]:
        panel: Any = False
        if self.database_panel:
            panel = {"slow_query_ms": self.slow_query_ms, "max_queries": self.max_queries}
        return {"enabled": self.enabled, "panels": {"database": panel}}


@dataclass
class BridgeConfig:
    """Root configuration for the bridge."""

    environment: str = "development"
    debug: bool = False
    version: str = "1.0.0"
    running_in_console: bool = False

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)

    # Staged into the config store as-is
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("APPBRIDGE_ENVIRONMENT", "development"),
            debug=_env_flag("APPBRIDGE_DEBUG"),
            running_in_console=_env_flag("APPBRIDGE_CONSOLE"),
            logging=LoggingConfig.from_env(),
            view=ViewConfig.from_env(),
            database=DatabaseConfig.from_env(),
            translation=TranslationConfig.from_env(),
            diagnostics=DiagnosticsConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "BridgeConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "BridgeConfig":
        """Create config from dictionary."""
        config = cls.from_env()

        # Override with file values
        for key in ("environment", "debug", "running_in_console"):
            if key in data:
                setattr(config, key, data[key])

        for section in ("logging", "view", "database", "translation", "diagnostics"):
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Unknown config key: {section}.{key}")

        if "settings" in data:
            config.settings.update(data["settings"])

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary. Connection passwords are left out."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "running_in_console": self.running_in_console,
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
            "view": {
                "paths": list(self.view.paths),
                "compiled_path": self.view.compiled_path,
            },
            "database": {
                "connections": sorted(self.database.connections),
                "default": self.database.default,
                "fetch": self.database.fetch,
            },
            "translation": {
                "lang_path": self.translation.lang_path,
                "locale": self.translation.locale,
            },
            "diagnostics": {
                "enabled": self.diagnostics.enabled,
                "slow_query_ms": self.diagnostics.slow_query_ms,
            },
        }


# Global config instance
_config: Optional[BridgeConfig] = None


def load_config(filepath: str = None) -> BridgeConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        BridgeConfig instance
    """
    global _config

    if filepath:
        _config = BridgeConfig.from_file(filepath)
    else:
        # Try default locations
        default_paths = [
            "./appbridge.json",
            "./config/appbridge.json",
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = BridgeConfig.from_file(path)
                return _config

        # Fall back to environment
        _config = BridgeConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> BridgeConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config

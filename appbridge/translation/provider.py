"""
translation/provider.py - Registers the translation subsystem

Needs 'path.lang' bound in the container; locales come from 'app.locale'
and 'app.fallback_locale' in the config store.
"""

from __future__ import annotations

from appbridge.bootstrap.providers import ServiceProvider
from .loader import FileLoader
from .translator import Translator


class TranslationServiceProvider(ServiceProvider):
    """Binds translation.loader and translator."""

    def register(self, app) -> None:
        app.bind_singleton(
            "translation.loader",
            lambda app: FileLoader(app["files"], app["path.lang"]),
        )
        app.bind_singleton("translator", self._create_translator)

    @staticmethod
    def _create_translator(app) -> Translator:
        config = app["config"]
        return Translator(
            app["translation.loader"],
            config.get("app.locale", "en"),
            fallback=config.get("app.fallback_locale"),
        )

    def provides(self) -> list:
        return ["translation.loader", "translator"]

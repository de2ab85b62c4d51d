"""
pagination/provider.py - Connects paginators to the captured request
"""

from __future__ import annotations
from pathlib import Path
import logging

from appbridge.bootstrap.providers import ServiceProvider
from .paginator import AbstractPaginator

logger = logging.getLogger("pagination.provider")

VIEWS_PATH = Path(__file__).parent / "templates"
VIEW_NAMESPACE = "pagination"


def register_views(factory) -> None:
    """Add the 'pagination' namespace to a view factory that lacks it."""
    if not factory.has_namespace(VIEW_NAMESPACE):
        factory.add_namespace(VIEW_NAMESPACE, str(VIEWS_PATH))
        logger.debug("Pagination views registered")


class PaginationServiceProvider(ServiceProvider):
    """
    Installs paginator resolvers on register. The 'pagination' view
    namespace is added on boot when views are active, and again whenever a
    view factory without it is resolved, so setup order does not matter.
    """

    def register(self, app) -> None:
        def current_path() -> str:
            return app["request"].base_url

        def current_page(page_name: str = "page") -> int:
            page = app["request"].args.get(page_name)
            try:
                page = int(page)
            except (TypeError, ValueError):
                return 1
            return page if page >= 1 else 1

        def view_factory():
            if not app.bound("view"):
                return None
            factory = app["view"]
            register_views(factory)
            return factory

        AbstractPaginator.current_path_resolver = current_path
        AbstractPaginator.current_page_resolver = current_page
        AbstractPaginator.view_factory_resolver = view_factory

    def boot(self, app) -> None:
        if app.bound("view"):
            register_views(app["view"])

"""
view/factory.py - View factory over a Jinja2 environment

View names use dot notation ('users.index' -> users/index.html) and may be
prefixed with a namespace ('pagination::default').
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
import fnmatch
import logging

from jinja2 import Environment, PrefixLoader, TemplateNotFound, TemplatesNotFound
from jinja2 import FileSystemLoader

from appbridge.errors import ViewNotFoundError

logger = logging.getLogger("view.factory")

NAMESPACE_DELIMITER = "::"
DEFAULT_EXTENSIONS = (".html", ".jinja2", ".j2", ".txt")


class View:
    """A named template with its data, rendered on demand."""

    def __init__(self, factory: "ViewFactory", name: str, template, data: Dict[str, Any]):
        self._factory = factory
        self.name = name
        self.template = template
        self.data = data

    def with_(self, key: Union[str, Dict[str, Any]], value: Any = None) -> "View":
        """Add data to the view. Accepts a key/value pair or a dict."""
        if isinstance(key, dict):
            self.data.update(key)
        else:
            self.data[key] = value
        return self

    def render(self) -> str:
        self._factory.call_composers(self)
        context = dict(self._factory.shared())
        context.update(self.data)
        return self.template.render(context)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"View({self.name!r})"


class ViewFactory:
    """
    Creates views from a Jinja2 environment.

    The environment's loader is expected to be a ChoiceLoader whose loaders
    include a FileSystemLoader (plain locations) and a PrefixLoader using
    '::' (namespaces). Both are located on construction so locations and
    namespaces can be added later.
    """

    def __init__(
        self,
        environment: Environment,
        events=None,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ):
        self._environment = environment
        self._events = events
        self._extensions = list(extensions)
        self._shared: Dict[str, Any] = {}
        self._composers: List[tuple] = []
        self._fs_loader, self._prefix_loader = self._find_loaders(environment.loader)

    @staticmethod
    def _find_loaders(loader):
        fs_loader = None
        prefix_loader = None
        children = getattr(loader, "loaders", [loader])
        for child in children:
            if isinstance(child, FileSystemLoader) and fs_loader is None:
                fs_loader = child
            elif isinstance(child, PrefixLoader) and prefix_loader is None:
                prefix_loader = child
        return fs_loader, prefix_loader

    @property
    def environment(self) -> Environment:
        return self._environment

    # ------------------------------------------------------------------
    # Name handling
    # ------------------------------------------------------------------

    def candidates(self, name: str) -> List[str]:
        """Get the template names tried for a view name."""
        namespace = None
        if NAMESPACE_DELIMITER in name:
            namespace, name = name.split(NAMESPACE_DELIMITER, 1)

        if any(name.endswith(ext) for ext in self._extensions):
            paths = [name]
        else:
            base = name.replace(".", "/")
            paths = [base + ext for ext in self._extensions]

        if namespace:
            return [f"{namespace}{NAMESPACE_DELIMITER}{path}" for path in paths]
        return paths

    def find(self, name: str):
        """
        Load the template for a view name.

        Raises:
            ViewNotFoundError: If no candidate exists
        """
        try:
            return self._environment.select_template(self.candidates(name))
        except (TemplatesNotFound, TemplateNotFound) as e:
            raise ViewNotFoundError(name) from e

    def exists(self, name: str) -> bool:
        try:
            self.find(name)
        except ViewNotFoundError:
            return False
        return True

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def make(self, name: str, data: Optional[Dict[str, Any]] = None, **extra: Any) -> View:
        """
        Create a view.

        Args:
            name: View name ('users.index', 'ns::users.index')
            data: Template context

        Returns:
            View
        """
        template = self.find(name)
        context = dict(data or {})
        context.update(extra)
        view = View(self, name, template, context)
        if self._events is not None:
            self._events.dispatch(f"creating: {name}", [view])
        return view

    def render(self, name: str, data: Optional[Dict[str, Any]] = None, **extra: Any) -> str:
        return self.make(name, data, **extra).render()

    def share(self, key: Union[str, Dict[str, Any]], value: Any = None) -> None:
        """Share data with every view."""
        if isinstance(key, dict):
            self._shared.update(key)
        else:
            self._shared[key] = value

    def shared(self, key: Optional[str] = None, default: Any = None) -> Any:
        if key is None:
            return self._shared
        return self._shared.get(key, default)

    def composer(self, views: Union[str, Iterable[str]], callback: Callable[[View], Any]) -> None:
        """Register a callback run before matching views render. Names may use wildcards."""
        if isinstance(views, str):
            views = [views]
        for pattern in views:
            self._composers.append((pattern, callback))

    def call_composers(self, view: View) -> None:
        for pattern, callback in self._composers:
            if fnmatch.fnmatchcase(view.name, pattern):
                callback(view)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def add_location(self, path: str) -> None:
        """Append a template directory."""
        if self._fs_loader is None:
            raise RuntimeError("View environment has no filesystem loader")
        if path not in self._fs_loader.searchpath:
            self._fs_loader.searchpath.append(str(path))

    def prepend_location(self, path: str) -> None:
        if self._fs_loader is None:
            raise RuntimeError("View environment has no filesystem loader")
        self._fs_loader.searchpath.insert(0, str(path))

    def add_namespace(self, namespace: str, paths: Union[str, List[str]]) -> None:
        """Register a template namespace ('ns::name')."""
        if self._prefix_loader is None:
            raise RuntimeError("View environment has no namespace loader")
        if isinstance(paths, str):
            paths = [paths]
        self._prefix_loader.mapping[namespace] = FileSystemLoader([str(p) for p in paths])
        logger.debug(f"Added view namespace {namespace}")

    def has_namespace(self, namespace: str) -> bool:
        return self._prefix_loader is not None and namespace in self._prefix_loader.mapping

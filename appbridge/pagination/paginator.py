"""
pagination/paginator.py - Simple and length-aware paginators

Current page, current path and the view factory are looked up through
class-level resolvers installed by PaginationServiceProvider, so paginators
created anywhere in the host pick up the captured request.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence
from urllib.parse import urlencode
import math

from markupsafe import Markup

DEFAULT_VIEW = "pagination::default"


class AbstractPaginator:
    """Shared paginator behaviour."""

    current_path_resolver: Optional[Callable[[], str]] = None
    current_page_resolver: Optional[Callable[[str], int]] = None
    view_factory_resolver: Optional[Callable[[], Any]] = None
    default_view: str = DEFAULT_VIEW

    def __init__(
        self,
        items: Sequence[Any],
        per_page: int,
        current_page: Optional[int] = None,
        path: Optional[str] = None,
        query: Optional[Dict[str, Any]] = None,
        page_name: str = "page",
    ):
        if per_page < 1:
            raise ValueError("per_page must be at least 1")
        self.per_page = int(per_page)
        self.page_name = page_name
        self.path = (path if path is not None else "/").rstrip("/") or "/"
        self.query: Dict[str, Any] = dict(query or {})
        self.current_page = self._normalize_page(current_page)
        self.items: List[Any] = list(items)

    @staticmethod
    def _normalize_page(page: Optional[int]) -> int:
        try:
            page = int(page)
        except (TypeError, ValueError):
            return 1
        return page if page >= 1 else 1

    # ------------------------------------------------------------------
    # Resolvers
    # ------------------------------------------------------------------

    @classmethod
    def resolve_current_path(cls, default: str = "/") -> str:
        if cls.current_path_resolver is not None:
            return cls.current_path_resolver()
        return default

    @classmethod
    def resolve_current_page(cls, page_name: str = "page", default: int = 1) -> int:
        if cls.current_page_resolver is not None:
            return cls.current_page_resolver(page_name)
        return default

    @classmethod
    def resolve_view_factory(cls):
        if cls.view_factory_resolver is not None:
            return cls.view_factory_resolver()
        return None

    @classmethod
    def reset_resolvers(cls) -> None:
        AbstractPaginator.current_path_resolver = None
        AbstractPaginator.current_page_resolver = None
        AbstractPaginator.view_factory_resolver = None

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def url(self, page: int) -> str:
        """Get the URL for a page number."""
        page = max(int(page), 1)
        params = dict(self.query)
        params[self.page_name] = page
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{urlencode(params)}"

    def appends(self, key, value: Any = None) -> "AbstractPaginator":
        """Add query string values to generated URLs."""
        if isinstance(key, dict):
            self.query.update(key)
        else:
            self.query[key] = value
        return self

    def previous_page_url(self) -> Optional[str]:
        if self.current_page > 1:
            return self.url(self.current_page - 1)
        return None

    def next_page_url(self) -> Optional[str]:
        if self.has_more_pages():
            return self.url(self.current_page + 1)
        return None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def has_more_pages(self) -> bool:
        raise NotImplementedError

    def has_pages(self) -> bool:
        return self.current_page != 1 or self.has_more_pages()

    def on_first_page(self) -> bool:
        return self.current_page <= 1

    def first_item(self) -> Optional[int]:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    def last_item(self) -> Optional[int]:
        if not self.items:
            return None
        return self.first_item() + len(self.items) - 1

    def is_empty(self) -> bool:
        return not self.items

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, view: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> str:
        """Render pagination links with the view subsystem."""
        factory = self.resolve_view_factory()
        if factory is None:
            raise RuntimeError("Pagination views require the view subsystem")
        context = {"paginator": self}
        context.update(data or {})
        return Markup(factory.render(view or self.default_view, context))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_page": self.current_page,
            "data": self.items,
            "first_page_url": self.url(1),
            "from": self.first_item(),
            "next_page_url": self.next_page_url(),
            "path": self.path,
            "per_page": self.per_page,
            "prev_page_url": self.previous_page_url(),
            "to": self.last_item(),
        }

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]


class Paginator(AbstractPaginator):
    """
    Paginator without a total count.

    Pass one item more than per_page to signal that a next page exists.
    """

    def __init__(self, items: Sequence[Any], per_page: int, current_page: Optional[int] = None, **kwargs):
        super().__init__(items, per_page, current_page, **kwargs)
        self._has_more = len(self.items) > self.per_page
        self.items = self.items[: self.per_page]

    def has_more_pages(self) -> bool:
        return self._has_more


class LengthAwarePaginator(AbstractPaginator):
    """Paginator that knows the total number of items."""

    def __init__(
        self,
        items: Sequence[Any],
        total: int,
        per_page: int,
        current_page: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(items, per_page, current_page, **kwargs)
        self.total = int(total)
        self.last_page = max(int(math.ceil(self.total / self.per_page)), 1)

    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    def elements(self) -> List[int]:
        """Page numbers to render as links."""
        return list(range(1, self.last_page + 1))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "last_page": self.last_page,
            "last_page_url": self.url(self.last_page),
            "total": self.total,
        })
        return data

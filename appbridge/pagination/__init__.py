"""
pagination/ - Paginators
"""

from .paginator import AbstractPaginator, LengthAwarePaginator, Paginator
from .provider import PaginationServiceProvider

__all__ = [
    "AbstractPaginator",
    "LengthAwarePaginator",
    "Paginator",
    "PaginationServiceProvider",
]

"""
events/ - Event dispatch
"""

from .dispatcher import Dispatcher
from .events import QueryExecuted

__all__ = ["Dispatcher", "QueryExecuted"]

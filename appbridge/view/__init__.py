"""
view/ - Template rendering (Jinja2)
"""

from .factory import View, ViewFactory
from .provider import ViewServiceProvider

__all__ = ["View", "ViewFactory", "ViewServiceProvider"]

"""
config/ - Configuration store
"""

from .repository import Repository

__all__ = ["Repository"]

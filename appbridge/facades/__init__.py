"""
facades/ - Facades and global aliases
"""

from .facade import DB, Config, Event, Facade, Lang, View
from .aliases import AliasLoader

__all__ = ["Facade", "View", "Config", "DB", "Event", "Lang", "AliasLoader"]

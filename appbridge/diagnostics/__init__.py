"""
diagnostics/ - Debug bar and query panel
"""

from .debugbar import DebugBar
from .panels import DatabasePanel, Panel, QueryRecord

__all__ = ["DebugBar", "DatabasePanel", "Panel", "QueryRecord"]

"""
events/events.py - Event types emitted by bridge subsystems
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union


@dataclass
class QueryExecuted:
    """
    Emitted by a database connection after each statement.

    time is the elapsed wall time in milliseconds.
    """
    sql: str
    bindings: Union[List[Any], Dict[str, Any]] = field(default_factory=list)
    time: float = 0.0
    connection: Any = None
    connection_name: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "sql": self.sql,
            "bindings": self.bindings,
            "time": self.time,
            "connection_name": self.connection_name,
            "timestamp": self.timestamp.isoformat(),
        }

"""
diagnostics/panels.py - Debug bar panels
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger("diagnostics.panels")


class Panel:
    """Base panel."""

    name: str = "panel"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config: Dict[str, Any] = dict(config or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}

    def render(self) -> str:
        return self.name


@dataclass
class QueryRecord:
    """A logged query."""
    sql: str
    bindings: Any
    time: float
    connection_name: Optional[str]
    driver: str = ""
    slow: bool = False
    logged_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sql": self.sql,
            "bindings": self.bindings,
            "time": self.time,
            "connection_name": self.connection_name,
            "driver": self.driver,
            "slow": self.slow,
            "logged_at": self.logged_at.isoformat(),
        }


class DatabasePanel(Panel):
    """
    Collects executed queries.

    Config:
        max_queries: Queries kept (oldest dropped first), default 500
        slow_query_ms: Threshold for flagging slow queries, default 100
    """

    name = "database"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.max_queries = int(self.config.get("max_queries", 500))
        self.slow_query_ms = float(self.config.get("slow_query_ms", 100))
        self._queries: List[QueryRecord] = []
        self._total_time = 0.0
        self._count = 0

    def log_query(
        self,
        sql: str,
        bindings: Any,
        time: float,
        connection_name: Optional[str],
        handle: Any = None,
    ) -> QueryRecord:
        """
        Record one executed query.

        Args:
            sql: Statement text
            bindings: Parameters
            time: Elapsed milliseconds
            connection_name: Name of the connection
            handle: Driver-level connection the query ran on
        """
        record = QueryRecord(
            sql=sql,
            bindings=bindings,
            time=float(time),
            connection_name=connection_name,
            driver=type(handle).__module__ if handle is not None else "",
            slow=float(time) >= self.slow_query_ms,
        )
        if record.slow:
            logger.warning(f"Slow query on [{connection_name}] ({record.time}ms): {sql}")

        self._queries.append(record)
        if len(self._queries) > self.max_queries:
            self._queries = self._queries[-self.max_queries:]

        self._total_time += record.time
        self._count += 1
        return record

    @property
    def queries(self) -> List[QueryRecord]:
        return list(self._queries)

    @property
    def count(self) -> int:
        """Queries logged, including ones dropped from the buffer."""
        return self._count

    @property
    def total_time(self) -> float:
        return round(self._total_time, 2)

    def slow_queries(self) -> List[QueryRecord]:
        return [q for q in self._queries if q.slow]

    def clear(self) -> None:
        self._queries.clear()
        self._total_time = 0.0
        self._count = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "count": self.count,
            "total_time": self.total_time,
            "queries": [q.to_dict() for q in self._queries],
        }

    def render(self) -> str:
        lines = [f"{self.count} queries, {self.total_time} ms"]
        for q in self._queries:
            marker = "!" if q.slow else " "
            lines.append(f"{marker} {q.time:>8.2f} ms  [{q.connection_name}]  {q.sql}")
        return "\n".join(lines)


PANELS = {
    DatabasePanel.name: DatabasePanel,
}

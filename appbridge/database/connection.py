"""
database/connection.py - A named database connection over an SQLAlchemy engine

Statements are plain SQL with named (:id) or positional (?) bindings. Every
statement is timed and reported as a QueryExecuted event when an event
dispatcher is attached.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union
import logging
import re
import time

from sqlalchemy import text
from sqlalchemy.engine import Engine

from appbridge.events.events import QueryExecuted
from .config import FetchMode

logger = logging.getLogger("database.connection")

Bindings = Union[Sequence[Any], Dict[str, Any], None]

# '?' placeholders outside single or double quoted literals
_POSITIONAL = re.compile(r"""('(?:[^']|'')*'|"(?:[^"]|"")*")|\?""")


def prepare(sql: str, bindings: Bindings) -> Tuple[str, Dict[str, Any]]:
    """
    Normalize bindings to SQLAlchemy named parameters.

    Positional '?' placeholders are rewritten to :p0, :p1, ...
    """
    if bindings is None:
        return sql, {}
    if isinstance(bindings, dict):
        return sql, dict(bindings)

    values = list(bindings)
    positions = iter(range(len(values)))
    seen = 0

    def substitute(match: "re.Match[str]") -> str:
        nonlocal seen
        if match.group(1):
            return match.group(1)
        seen += 1
        index = next(positions, None)
        return match.group(0) if index is None else f":p{index}"

    rewritten = _POSITIONAL.sub(substitute, sql)
    if seen != len(values):
        raise ValueError(
            f"Query has {seen} positional placeholders but {len(values)} bindings were given"
        )
    return rewritten, {f"p{i}": value for i, value in enumerate(values)}


class Connection:
    """
    Named database connection.

    Usage:
        users = connection.select("select * from users where active = ?", [1])
        with connection.transaction():
            connection.insert("insert into users (name) values (:name)", {"name": "ada"})
    """

    def __init__(
        self,
        engine: Engine,
        name: str,
        fetch_mode: FetchMode = FetchMode.CLASS,
        table_prefix: str = "",
        driver_name: Optional[str] = None,
    ):
        self._engine = engine
        self._name = name
        self._fetch_mode = FetchMode(fetch_mode)
        self._table_prefix = table_prefix
        self._driver_name = driver_name or engine.dialect.name
        self._connection = None
        self._transactions: List[Any] = []
        self._events = None
        self._logging_queries = False
        self._query_log: List[Dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_name(self) -> str:
        return self._name

    def get_driver_name(self) -> str:
        return self._driver_name

    def get_table_prefix(self) -> str:
        return self._table_prefix

    def get_engine(self) -> Engine:
        return self._engine

    def get_fetch_mode(self) -> FetchMode:
        return self._fetch_mode

    def set_fetch_mode(self, mode: FetchMode) -> None:
        self._fetch_mode = FetchMode(mode)

    def set_event_dispatcher(self, events) -> None:
        self._events = events

    def get_event_dispatcher(self):
        return self._events

    def get_connection(self):
        """Get the underlying SQLAlchemy connection, opening it if needed."""
        if self._connection is None or self._connection.closed:
            self._connection = self._engine.connect()
            logger.debug(f"Opened connection [{self._name}]")
        return self._connection

    def get_raw_connection(self) -> Any:
        """Get the driver-level (DBAPI) connection handle."""
        return self.get_connection().connection.dbapi_connection

    def disconnect(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self._transactions.clear()
            logger.debug(f"Closed connection [{self._name}]")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def select(self, sql: str, bindings: Bindings = None) -> List[Any]:
        """Run a select statement and return all rows shaped by the fetch mode."""
        def run(conn, statement, params):
            return [self._shape(row) for row in conn.execute(statement, params)]

        return self._run(sql, bindings, run)

    def select_one(self, sql: str, bindings: Bindings = None) -> Optional[Any]:
        rows = self.select(sql, bindings)
        return rows[0] if rows else None

    def scalar(self, sql: str, bindings: Bindings = None) -> Any:
        def run(conn, statement, params):
            return conn.execute(statement, params).scalar()

        return self._run(sql, bindings, run)

    def insert(self, sql: str, bindings: Bindings = None) -> bool:
        return self.statement(sql, bindings)

    def update(self, sql: str, bindings: Bindings = None) -> int:
        return self.affecting_statement(sql, bindings)

    def delete(self, sql: str, bindings: Bindings = None) -> int:
        return self.affecting_statement(sql, bindings)

    def statement(self, sql: str, bindings: Bindings = None) -> bool:
        def run(conn, statement, params):
            conn.execute(statement, params)
            return True

        return self._run(sql, bindings, run)

    def affecting_statement(self, sql: str, bindings: Bindings = None) -> int:
        def run(conn, statement, params):
            return conn.execute(statement, params).rowcount

        return self._run(sql, bindings, run)

    def paginate(
        self,
        sql: str,
        bindings: Bindings = None,
        per_page: int = 15,
        page: Optional[int] = None,
        page_name: str = "page",
    ):
        """
        Run a select and return one page of it.

        Returns:
            LengthAwarePaginator
        """
        from appbridge.pagination.paginator import LengthAwarePaginator

        page = page or LengthAwarePaginator.resolve_current_page(page_name)
        total = self.scalar(f"select count(*) from ({sql}) as aggregate_table", bindings)
        offset = max(page - 1, 0) * int(per_page)
        items = self.select(f"{sql} limit {int(per_page)} offset {offset}", bindings)
        return LengthAwarePaginator(
            items,
            total,
            per_page,
            page,
            path=LengthAwarePaginator.resolve_current_path(),
            page_name=page_name,
        )

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["Connection"]:
        """
        Run the block in a transaction; nested blocks use savepoints.

        Commits on success, rolls back and re-raises on error.
        """
        conn = self.get_connection()
        if self._transactions:
            trans = conn.begin_nested()
        else:
            if conn.in_transaction():
                conn.commit()
            trans = conn.begin()
        self._transactions.append(trans)

        try:
            yield self
        except Exception:
            self._transactions.pop()
            trans.rollback()
            raise
        else:
            self._transactions.pop()
            trans.commit()

    def transaction_level(self) -> int:
        return len(self._transactions)

    # ------------------------------------------------------------------
    # Query log
    # ------------------------------------------------------------------

    def enable_query_log(self) -> None:
        self._logging_queries = True

    def disable_query_log(self) -> None:
        self._logging_queries = False

    def get_query_log(self) -> List[Dict[str, Any]]:
        return list(self._query_log)

    def flush_query_log(self) -> None:
        self._query_log.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, sql: str, bindings: Bindings, callback: Callable) -> Any:
        statement, params = prepare(sql, bindings)
        conn = self.get_connection()

        start = time.perf_counter()
        try:
            result = callback(conn, text(statement), params)
        except Exception:
            if not self._transactions and conn.in_transaction():
                conn.rollback()
            raise
        if not self._transactions:
            conn.commit()
        elapsed = round((time.perf_counter() - start) * 1000, 2)

        self.log_query(sql, bindings, elapsed)
        return result

    def log_query(self, sql: str, bindings: Bindings, elapsed: float) -> None:
        """Record a statement and report it to the event dispatcher."""
        bound = list(bindings) if isinstance(bindings, (list, tuple)) else (bindings or [])

        if self._events is not None:
            self._events.dispatch(QueryExecuted(
                sql=sql,
                bindings=bound,
                time=elapsed,
                connection=self,
                connection_name=self._name,
            ))

        if self._logging_queries:
            self._query_log.append({"query": sql, "bindings": bound, "time": elapsed})

        logger.debug(f"[{self._name}] {elapsed}ms {sql}")

    def _shape(self, row) -> Any:
        if self._fetch_mode is FetchMode.ASSOC:
            return dict(row._mapping)
        if self._fetch_mode is FetchMode.NUM:
            return tuple(row)
        return row

    def __repr__(self) -> str:
        return f"Connection({self._name!r}, driver={self._driver_name!r})"

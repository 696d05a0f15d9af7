from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(conn, dict_cursor)`` for one transaction.

    Commits when the block exits normally and rolls back on any exception,
    so multi-statement writes are all-or-nothing.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        logger.debug("Transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Row]:
    return list(cur.fetchall() or ())


def in_clause(values: Iterable[Any]) -> Tuple[str, tuple]:
    """Placeholders and params for ``IN (...)``."""
    params = tuple(values)
    return ", ".join("%s" for _ in params), params


def build_where(filters: Mapping[str, Any]) -> Tuple[str, list]:
    """``col=%s AND ...`` for every non-None filter (enums are unwrapped to their value)."""
    active = [(column, value) for column, value in filters.items() if value is not None]
    if not active:
        return "1=1", []
    clause = " AND ".join(f"{column}=%s" for column, _ in active)
    return clause, [getattr(value, "value", value) for _, value in active]

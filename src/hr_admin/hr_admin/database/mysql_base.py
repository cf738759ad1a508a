from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_where(filters: Dict[str, Any], *, alias: str = "") -> tuple[str, list]:
    """Build an AND-ed WHERE clause from equality filters, skipping None values."""

    prefix = f"{alias}." if alias else ""
    clauses = ["1=1"]
    params: list = []
    for column, value in filters.items():
        if value is None:
            continue
        clauses.append(f"{prefix}{column}=%s")
        params.append(getattr(value, "value", value))
    return " AND ".join(clauses), params


def like_pattern(search: Optional[str]) -> Optional[str]:
    s = (search or "").strip()
    return f"%{s}%" if s else None

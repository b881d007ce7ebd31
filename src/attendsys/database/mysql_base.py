from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateRecordError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Open a connection + cursor for one unit of work.

    Commits on success, rolls back on error. A duplicate-key violation is
    re-raised as DuplicateRecordError so services can turn it into a conflict.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError(str(e)) from e
        raise
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


def build_update(table: str, key_col: str, key: Any, changes: Dict[str, Any]) -> tuple[str, tuple]:
    """Build a parametrised ``UPDATE`` for a partial change set.

    Column names come from the repositories' own whitelists, never from
    request payloads.
    """
    assignments = ", ".join(f"{col}=%s" for col in changes)
    params = tuple(changes.values()) + (key,)
    return f"UPDATE {table} SET {assignments} WHERE {key_col}=%s", params

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import CapabilityUnavailable, PersistenceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back on any error."""
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


@contextmanager
def translate_errors(operation: str, *, key: Optional[object] = None, cells: Sequence[object] = ()) -> Iterator[None]:
    """Map mysql-connector errors onto the domain error taxonomy.

    A missing table becomes CapabilityUnavailable; anything else the driver
    raises becomes PersistenceError with the operation context attached.
    """

    try:
        yield
    except mysql.connector.Error as e:
        if getattr(e, "errno", None) == errorcode.ER_NO_SUCH_TABLE:
            raise CapabilityUnavailable(f"Tabela de escalas não encontrada ({operation})") from e
        logger.error("Database operation %s failed for key=%s: %s", operation, key, e)
        raise PersistenceError(
            f"Falha ao gravar no banco ({operation}): {e}",
            operation=operation,
            key=key,
            cells=cells,
        ) from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])

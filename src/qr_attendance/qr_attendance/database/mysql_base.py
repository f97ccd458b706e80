from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(
    conn_factory: DatabaseConnection, *, dictionary: bool = True, readonly: bool = False
) -> Iterator[Tuple[Any, Any]]:
    """Open a connection + cursor for one operation.

    Writes are committed when the block exits cleanly and rolled back when it raises.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            if not readonly:
                conn.commit()
        finally:
            cur.close()
    except Exception:
        if not readonly:
            logger.debug("rolling back transaction on %s", conn_factory.target)
            conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])

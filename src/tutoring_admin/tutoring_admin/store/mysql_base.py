from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Short-lived connection and cursor for a single store call.

    The work is committed when the block exits normally and rolled back when
    it raises.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        cur.close()
        conn.close()

"""Create the MySQL database and collection tables from ``database/schema.sql``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .connection import DBConfig, DatabaseConnection

_CREATE_DB_RE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_LINE_COMMENT_RE = re.compile(r"(?m)^\s*--.*$")


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quoted strings."""
    start = 0
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _schema_statements(schema_path: str | Path) -> list[str]:
    # The database name comes from settings, not from the script.
    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _LINE_COMMENT_RE.sub("", _CREATE_DB_RE.sub("", sql))
    return list(iter_sql_statements(sql))


def _connection(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def ensure_database_exists(db_config: dict) -> None:
    factory = _connection(db_config)
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database (if needed) and the collection tables."""
    ensure_database_exists(db_config)
    statements = _schema_statements(schema_path)

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

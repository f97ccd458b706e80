"""Create the attendance database and apply database/schema.sql to it."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB_RE = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_RE = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


@contextmanager
def _server(target: DBConfig, *, with_database: bool) -> Iterator:
    conn = mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database))
    try:
        yield conn
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # The configured database name wins over whatever the script hardcodes.
    return _USE_RE.sub("", _CREATE_DB_RE.sub("", sql))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Yield statements split on ';' outside string literals.

    Handles quotes and backslash escapes, which covers schema files. It is not
    a SQL parser.
    """

    start = 0
    quote: Optional[str] = None
    escaped = False

    for i, ch in enumerate(sql):
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
        elif quote is not None:
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            start = i + 1
            if stmt:
                yield stmt

    tail = sql[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _server(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Idempotent: every statement in schema.sql uses IF NOT EXISTS."""

    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    path = Path(schema_path)
    statements = list(iter_sql_statements(_strip_create_db_and_use(path.read_text(encoding="utf-8"))))
    with _server(target, with_database=True) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    logger.info("applied %s (%d statements) to %s", path.name, len(statements), target.target)


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    with _server(target, with_database=True) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]

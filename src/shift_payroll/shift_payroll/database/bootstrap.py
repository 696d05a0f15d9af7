"""Schema and demo-data loading for local setups and the ``AUTO_INIT_DB`` switch."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Union

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Database selection is decided by DB_CONFIG, not by the SQL file.
_DB_DIRECTIVE = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def split_statements(sql: str) -> Iterator[str]:
    """Yield statements from a schema/seed file.

    Statements end with ``;`` at the end of a line; ``--`` comment lines are
    dropped.
    """
    pending: List[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        pending.append(line)
        if stripped.endswith(";"):
            statement = "\n".join(pending).strip().rstrip(";").strip()
            pending = []
            if statement and not _DB_DIRECTIVE.match(statement):
                yield statement
    leftover = "\n".join(pending).strip()
    if leftover and not _DB_DIRECTIVE.match(leftover):
        yield leftover


def _execute_file(db: DatabaseConnection, path: Path) -> int:
    conn = db.connect()
    count = 0
    try:
        cur = conn.cursor()
        for statement in split_statements(path.read_text(encoding="utf-8")):
            cur.execute(statement)
            count += 1
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    db = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = db.connect(with_database=False)
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{db.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: PathLike) -> None:
    ensure_database_exists(db_config)
    db = DatabaseConnection(DBConfig.from_dict(db_config))
    count = _execute_file(db, Path(schema_path))
    logger.info("Applied %s schema statements to %s", count, db.config.describe())


def apply_seed_sql(db_config: dict, *, seed_path: PathLike) -> None:
    db = DatabaseConnection(DBConfig.from_dict(db_config))
    count = _execute_file(db, Path(seed_path))
    logger.info("Applied %s seed statements to %s", count, db.config.describe())


def list_tables(db_config: dict) -> List[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()

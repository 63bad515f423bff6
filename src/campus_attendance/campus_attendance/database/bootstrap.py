from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from ..progression.model import StudentProfile
from ..progression.mysql_progression_repository import MySQLProgressionRepository
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_STUDENTS = (
    {
        "student_id": "demo-student-1",
        "first_name": "Asha",
        "last_name": "Rao",
        "roll_no": "CS-001",
        "institute_id": "demo-institute",
        "department": "CSE",
        "extensions": {"year": 2, "semester": 3},
    },
    {
        "student_id": "demo-student-2",
        "first_name": "Vikram",
        "last_name": "Iyer",
        "roll_no": "CS-002",
        "institute_id": "demo-institute",
        "department": "CSE",
        "extensions": {"year": 2, "semester": 3},
    },
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Splits on ';' outside quotes; '--' comment lines are dropped first.
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)


def ensure_demo_students(db_config: dict) -> int:
    """Create demo student profiles that do not exist yet. Returns how many were added."""

    repo = MySQLProgressionRepository(DatabaseConnection(DBConfig.from_dict(db_config)))
    created = 0
    for row in DEMO_STUDENTS:
        if repo.create_profile(StudentProfile(**row)):
            created += 1
    logger.info("Demo students ensured (created=%s)", created)
    return created


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

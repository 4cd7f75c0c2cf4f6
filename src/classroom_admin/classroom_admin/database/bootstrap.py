"""Schema/seed bootstrap used by the app factory and by scripts/."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "classroom_db")),
    )


@contextmanager
def _connect(target: DBTarget, *, with_database: bool = True) -> Iterator[mysql.connector.MySQLConnection]:
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the SQL file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: str | None = None
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


def _run_script(target: DBTarget, path: str | Path) -> int:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    count = 0
    with _connect(target) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    with _connect(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(_as_target(db_config), schema_path)
    logger.info("Applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(_as_target(db_config), seed_path)
    logger.info("Applied %d seed statements from %s", count, seed_path)


DEMO_PASSWORD = "demo1234"


def ensure_demo_users(db_config: dict) -> None:
    """Create (or refresh) demo cohort members, faculty and courses.

    Requires seed.sql to have created the demo cohorts.
    """
    target = _as_target(db_config)

    with _connect(target) as conn:
        cur = conn.cursor(dictionary=True)

        def cohort_id(name: str) -> int:
            cur.execute("SELECT cohort_id FROM cohorts WHERE cohort_name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing cohorts row for cohort_name={name}")
            return int(row["cohort_id"])

        def upsert_user(full_name: str, email: str, role: str, cohort: int | None, is_monitor: bool = False) -> int:
            password_hash = generate_password_hash(DEMO_PASSWORD)
            cur.execute(
                """
                INSERT INTO users (full_name, email, password_hash, role, cohort_id, is_monitor, is_active)
                VALUES (%s, %s, %s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), password_hash=VALUES(password_hash), role=VALUES(role),
                    cohort_id=VALUES(cohort_id), is_monitor=VALUES(is_monitor), is_active=1
                """,
                (full_name, email, password_hash, role, cohort, int(is_monitor)),
            )
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            return int(cur.fetchone()["user_id"])

        def upsert_course(code: str, name: str, cohort: int, instructor: int, weekday: int, start: str, end: str) -> None:
            cur.execute(
                """
                INSERT INTO courses (course_code, course_name, cohort_id, instructor_id,
                                     semester_start, semester_end, day_of_week, start_time, end_time)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    course_name=VALUES(course_name), cohort_id=VALUES(cohort_id), instructor_id=VALUES(instructor_id),
                    semester_start=VALUES(semester_start), semester_end=VALUES(semester_end),
                    day_of_week=VALUES(day_of_week), start_time=VALUES(start_time), end_time=VALUES(end_time)
                """,
                (code, name, cohort, instructor, "2024-09-02", "2025-01-17", weekday, start, end),
            )

        class_a = cohort_id("Class 2024-A")
        class_b = cohort_id("Class 2024-B")

        upsert_user("Admin Demo", "admin@test.com", "ADMIN", None)
        teacher = upsert_user("Professor Demo", "teacher1@test.com", "FACULTY", None)
        upsert_user("Student One", "student1@test.com", "STUDENT", class_a, is_monitor=True)
        upsert_user("Student Two", "student2@test.com", "STUDENT", class_a)
        upsert_user("Student Three", "student3@test.com", "STUDENT", class_a)
        upsert_user("Student Four", "student4@test.com", "STUDENT", class_b, is_monitor=True)

        upsert_course("CS101", "Intro to Programming", class_a, teacher, 1, "09:00", "10:30")
        upsert_course("MA101", "Calculus I", class_a, teacher, 3, "13:00", "14:30")
        upsert_course("EN101", "Academic English", class_b, teacher, 2, "10:00", "11:30")

        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    with _connect(target) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]

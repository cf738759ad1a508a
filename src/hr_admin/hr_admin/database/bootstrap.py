from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection


def _connection(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    factory = _connection(db_config)
    name = DBConfig.from_dict(db_config).database
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_employees(db_config: dict) -> None:
    """Upsert one admin and one in-office employee for local development."""

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(code: str, name: str, email: str, password: str, role: str, department: str, location: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET name=%s, password_hash=%s, role=%s, department=%s, work_location=%s
                    WHERE email=%s
                    """,
                    (name, password_hash, role, department, location, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (employee_code, name, email, password_hash, role, department, work_location)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (code, name, email, password_hash, role, department, location),
                )

        upsert("EMP001", "Admin Demo", "admin@example.com", "admin123", "admin", "HR", "in_office")
        upsert("EMP002", "Employee Demo", "employee@example.com", "employee123", "employee", "Engineering", "in_office")

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

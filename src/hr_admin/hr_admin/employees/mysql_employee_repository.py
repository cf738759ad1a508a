from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role, WorkLocation
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, name, email, phone, department,
    role, work_location, password_hash, created_at
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        name=row["name"],
        email=row["email"],
        phone=row.get("phone"),
        department=row["department"],
        role=Role(row["role"]),
        work_location=WorkLocation(row["work_location"]),
        password_hash=row["password_hash"],
        created_at=row.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self, *, search: Optional[str] = None) -> Sequence[Employee]:
        pattern = like_pattern(search)
        with db_cursor(self._conn_factory) as (_, cur):
            if pattern:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM employees
                    WHERE name LIKE %s OR email LIKE %s OR department LIKE %s OR employee_code LIKE %s
                    ORDER BY name
                    """,
                    (pattern, pattern, pattern, pattern),
                )
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name")
            return [_to_employee(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees")
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def max_code_number(self, prefix: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT MAX(CAST(SUBSTRING(employee_code, %s) AS UNSIGNED)) AS n
                FROM employees
                WHERE employee_code LIKE %s
                """,
                (len(prefix) + 1, f"{prefix}%"),
            )
            row = fetchone(cur)
            return int(row["n"] or 0) if row else 0

    def create(
        self,
        *,
        employee_code: str,
        name: str,
        email: str,
        phone: Optional[str],
        department: str,
        role: Role,
        work_location: WorkLocation,
        password_hash: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_code, name, email, phone, department, role, work_location, password_hash)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee_code, name, email, phone, department, role.value, work_location.value, password_hash),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        email: str,
        phone: Optional[str],
        department: str,
        role: Role,
        work_location: WorkLocation,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, email=%s, phone=%s, department=%s, role=%s, work_location=%s
                WHERE employee_id=%s
                """,
                (name, email, phone, department, role.value, work_location.value, int(employee_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import UPDATABLE_COLUMNS, EmployeeRepository

_SELECT = """
    SELECT e.id, e.name, e.email, e.department, e.avatar_url, e.organization_id,
           e.user_id, e.created_at, o.name AS organization_name
    FROM employees e
    JOIN organizations o ON o.id = e.organization_id
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        organization_id=int(row["organization_id"]),
        department=row.get("department"),
        avatar_url=row.get("avatar_url"),
        user_id=row.get("user_id"),
        created_at=row.get("created_at"),
        organization_name=row.get("organization_name"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", (value,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self, *, organization_id: Optional[int] = None) -> Sequence[Employee]:
        clauses = []
        params: list[object] = []
        if organization_id is not None:
            clauses.append("e.organization_id=%s")
            params.append(int(organization_id))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY e.created_at DESC, e.id DESC", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("e.id=%s", int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("e.email=%s", email)

    def get_by_user_id(self, user_id: str) -> Optional[Employee]:
        return self._get_one("e.user_id=%s", user_id)

    def create(
        self,
        *,
        name: str,
        email: str,
        organization_id: int,
        department: Optional[str] = None,
        avatar_url: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(name, email, department, avatar_url, organization_id, user_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, email, department, avatar_url, int(organization_id), user_id),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"{_SELECT} WHERE e.id=%s", (new_id,))
            return _to_employee(fetchone(cur))

    def update(self, employee_id: int, changes: dict) -> Optional[Employee]:
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_COLUMNS}
        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                sql, params = build_update("employees", "id", int(employee_id), changes)
                cur.execute(sql, params)
            cur.execute(f"{_SELECT} WHERE e.id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_id),))
            return cur.rowcount > 0

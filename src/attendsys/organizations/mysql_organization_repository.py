from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Organization
from .repository import UPDATABLE_COLUMNS, OrganizationRepository

_COLUMNS = "id, name, location, logo_url, created_by, created_at"


def _to_organization(row: dict) -> Organization:
    return Organization(
        id=int(row["id"]),
        name=row["name"],
        location=row.get("location"),
        logo_url=row.get("logo_url"),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
    )


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM organizations ORDER BY created_at DESC, id DESC")
            return [_to_organization(r) for r in fetchall(cur)]

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM organizations WHERE id=%s", (int(organization_id),))
            row = fetchone(cur)
            return _to_organization(row) if row else None

    def count_employees(self, organization_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM employees WHERE organization_id=%s",
                (int(organization_id),),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(
        self,
        *,
        name: str,
        location: Optional[str],
        logo_url: Optional[str],
        created_by: Optional[str],
    ) -> Organization:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO organizations(name, location, logo_url, created_by)
                VALUES(%s,%s,%s,%s)
                """,
                (name, location, logo_url, created_by),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM organizations WHERE id=%s", (new_id,))
            return _to_organization(fetchone(cur))

    def update(self, organization_id: int, changes: dict) -> Optional[Organization]:
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_COLUMNS}
        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                sql, params = build_update("organizations", "id", int(organization_id), changes)
                cur.execute(sql, params)
            cur.execute(f"SELECT {_COLUMNS} FROM organizations WHERE id=%s", (int(organization_id),))
            row = fetchone(cur)
            return _to_organization(row) if row else None

    def delete(self, organization_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM organizations WHERE id=%s", (int(organization_id),))
            return cur.rowcount > 0

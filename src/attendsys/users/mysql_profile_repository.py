from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "id, email, name, password_hash, role, organization_id, created_at"


def _to_profile(row: dict) -> Profile:
    org_id = row.get("organization_id")
    return Profile(
        id=str(row["id"]),
        email=row["email"],
        name=row.get("name"),
        password_hash=row.get("password_hash"),
        role=Role(row["role"]),
        organization_id=int(org_id) if org_id is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (profile_id,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def create_profile(
        self,
        *,
        profile_id: str,
        email: str,
        name: str,
        password_hash: Optional[str],
        role: Role,
        organization_id: Optional[int],
    ) -> Profile:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(id, email, name, password_hash, role, organization_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (profile_id, email, name, password_hash, role.value, organization_id),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (profile_id,))
            return _to_profile(fetchone(cur))

    def set_role(self, profile_id: str, *, role: Role, organization_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET role=%s, organization_id=%s WHERE id=%s",
                (role.value, organization_id, profile_id),
            )
            return cur.rowcount > 0

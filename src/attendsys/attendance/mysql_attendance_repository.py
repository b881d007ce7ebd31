from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, employee_id, work_date, check_in, check_out, is_absent, created_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        is_absent=bool(r.get("is_absent")),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _insert(self, *, employee_id: int, work_date: date, check_in: Optional[datetime], is_absent: bool) -> AttendanceRecord:
        # The (employee_id, work_date) unique key makes this the atomic conditional insert.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in, is_absent)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in, 1 if is_absent else 0),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (new_id,))
            return _to_record(fetchone(cur))

    def create_checkin(self, *, employee_id: int, work_date: date, check_in: datetime) -> AttendanceRecord:
        return self._insert(employee_id=employee_id, work_date=work_date, check_in=check_in, is_absent=False)

    def create_absence(self, *, employee_id: int, work_date: date) -> AttendanceRecord:
        return self._insert(employee_id=employee_id, work_date=work_date, check_in=None, is_absent=True)

    def update_checkout(self, *, record_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out=%s
                WHERE id=%s AND check_out IS NULL AND is_absent=0
                """,
                (check_out, int(record_id)),
            )
            return cur.rowcount > 0

    def list_for_date(self, *, work_date: date, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s AND employee_id IN ({placeholders})
                """,
                (work_date, *ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
        organization_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceListRow]:
        clauses: list[str] = []
        params: list[object] = []

        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)
        if employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(employee_id))
        if organization_id is not None:
            clauses.append("e.organization_id=%s")
            params.append(int(organization_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.id, ar.employee_id, ar.work_date, ar.check_in, ar.check_out,
                    ar.is_absent, ar.created_at,
                    e.name AS employee_name, e.email AS employee_email, e.department,
                    e.organization_id, o.name AS organization_name
                FROM attendance_records ar
                JOIN employees e ON e.id = ar.employee_id
                LEFT JOIN organizations o ON o.id = e.organization_id
                {where}
                ORDER BY ar.work_date DESC, ar.id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceListRow(
                    record=_to_record(r),
                    employee_name=r["employee_name"],
                    employee_email=r["employee_email"],
                    department=r.get("department"),
                    organization_id=int(r["organization_id"]),
                    organization_name=r.get("organization_name"),
                )
                for r in rows
            ]

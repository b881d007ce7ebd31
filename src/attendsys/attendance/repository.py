from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceListRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, *, employee_id: int, work_date: date, check_in: datetime) -> AttendanceRecord:
        """Insert a present record. Raises DuplicateRecordError if the day already has one."""

        raise NotImplementedError

    def create_absence(self, *, employee_id: int, work_date: date) -> AttendanceRecord:
        """Insert an absence record. Raises DuplicateRecordError if the day already has one."""

        raise NotImplementedError

    def update_checkout(self, *, record_id: int, check_out: datetime) -> bool:
        """Set check_out only if the record is still open (not checked out, not absent)."""

        raise NotImplementedError

    def list_for_date(self, *, work_date: date, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
        organization_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceListRow]:
        """Newest date first."""

        raise NotImplementedError

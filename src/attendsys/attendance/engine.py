"""Daily attendance lifecycle and presence aggregation.

Each (employee, date) key moves NO_RECORD -> CHECKED_IN -> CHECKED_OUT, or
NO_RECORD -> MARKED_ABSENT. The guards below raise the typed failure for any
other transition; they never touch the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceState
from ..core.exceptions import ConflictError, NotFoundError
from ..employees.model import Employee
from .model import AttendanceRecord


def state_of(record: Optional[AttendanceRecord]) -> AttendanceState:
    if record is None:
        return AttendanceState.NO_RECORD
    if record.is_absent:
        return AttendanceState.MARKED_ABSENT
    if record.check_out is None:
        return AttendanceState.CHECKED_IN
    return AttendanceState.CHECKED_OUT


def ensure_can_check_in(record: Optional[AttendanceRecord]) -> None:
    state = state_of(record)
    if state == AttendanceState.MARKED_ABSENT:
        raise ConflictError("Already marked absent today", record=record)
    if state != AttendanceState.NO_RECORD:
        raise ConflictError("Already checked in today", record=record)


def ensure_can_check_out(record: Optional[AttendanceRecord]) -> None:
    state = state_of(record)
    if state == AttendanceState.NO_RECORD:
        raise NotFoundError("No check-in found for today. Please check in first.")
    if state == AttendanceState.MARKED_ABSENT:
        raise ConflictError("Marked absent today, cannot check out", record=record)
    if state == AttendanceState.CHECKED_OUT:
        raise ConflictError("Already checked out today", record=record)


def ensure_can_mark_absent(record: Optional[AttendanceRecord]) -> None:
    if state_of(record) != AttendanceState.NO_RECORD:
        raise ConflictError("Attendance record already exists for this date", record=record)


def is_present(record: Optional[AttendanceRecord]) -> bool:
    # Checked-out still counts as present for the day.
    return record is not None and not record.is_absent


def attendance_percentage(present: int, total: int) -> int:
    """Share of present employees, rounded half-up to a whole percent."""
    if total <= 0:
        return 0
    return (200 * present + total) // (2 * total)


@dataclass(frozen=True)
class DailySummary:
    work_date: date
    total_employees: int
    present_count: int
    absent_count: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "date": isoformat(self.work_date),
            "total_employees": self.total_employees,
            "present": self.present_count,
            "absent": self.absent_count,
            "attendance_percentage": self.percentage,
        }


@dataclass(frozen=True)
class RosterEntry:
    employee: Employee
    record: Optional[AttendanceRecord]

    def to_dict(self) -> dict:
        return {
            "id": self.employee.id,
            "name": self.employee.name,
            "department": self.employee.department,
            "avatar_url": self.employee.avatar_url,
            "record": self.record.to_dict() if self.record else None,
        }


@dataclass(frozen=True)
class DailyRoster:
    work_date: date
    present: list[RosterEntry]
    absent: list[RosterEntry]

    def to_dict(self) -> dict:
        return {
            "date": isoformat(self.work_date),
            "present": [e.to_dict() for e in self.present],
            "absent": [e.to_dict() for e in self.absent],
        }


def _records_by_employee(records: Iterable[AttendanceRecord]) -> dict[int, AttendanceRecord]:
    return {r.employee_id: r for r in records}


def summarize(work_date: date, employees: Sequence[Employee], records: Iterable[AttendanceRecord]) -> DailySummary:
    by_employee = _records_by_employee(records)
    total = len(employees)
    present = sum(1 for e in employees if is_present(by_employee.get(e.id)))
    return DailySummary(
        work_date=work_date,
        total_employees=total,
        present_count=present,
        absent_count=total - present,
        percentage=attendance_percentage(present, total),
    )


def build_roster(work_date: date, employees: Sequence[Employee], records: Iterable[AttendanceRecord]) -> DailyRoster:
    by_employee = _records_by_employee(records)
    present: list[RosterEntry] = []
    absent: list[RosterEntry] = []

    for emp in employees:
        entry = RosterEntry(employee=emp, record=by_employee.get(emp.id))
        if is_present(entry.record):
            present.append(entry)
        else:
            absent.append(entry)

    # Most recent check-in first; entries without a check-in go last.
    timed = sorted((e for e in present if e.record.check_in is not None), key=lambda e: e.record.check_in, reverse=True)
    untimed = [e for e in present if e.record.check_in is None]
    return DailyRoster(work_date=work_date, present=timed + untimed, absent=absent)

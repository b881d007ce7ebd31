from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record, unique per (employee_id, work_date)."""

    id: int
    employee_id: int
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    is_absent: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": isoformat(self.work_date),
            "check_in": isoformat(self.check_in),
            "check_out": isoformat(self.check_out),
            "is_absent": self.is_absent,
            "created_at": isoformat(self.created_at),
        }


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for record listings (record joined with its employee and org)."""

    record: AttendanceRecord
    employee_name: str
    employee_email: str
    department: Optional[str]
    organization_id: int
    organization_name: Optional[str]

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["employee"] = {
            "name": self.employee_name,
            "email": self.employee_email,
            "department": self.department,
            "organization_id": self.organization_id,
            "organization_name": self.organization_name,
        }
        return data

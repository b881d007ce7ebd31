from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from ..authorization.policy import ADMIN_OR_MANAGER, ALL_ROLES, Scope, authorize
from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import ConflictError, DuplicateRecordError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..users.model import Identity
from .engine import (
    DailyRoster,
    DailySummary,
    build_roster,
    ensure_can_check_in,
    ensure_can_check_out,
    ensure_can_mark_absent,
    summarize,
)
from .model import AttendanceListRow, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: daily check-in/check-out/absence and presence reporting.

    Every write is keyed by (employee, server date). Guards run before the
    write; the store's unique key settles races between concurrent requests.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock

    def _own_employee(self, identity: Identity, scope: Scope) -> tuple[Scope, Employee]:
        own = self._employees.get_by_user_id(identity.id)
        scope = scope.bind_employee(own.id if own else None)
        return scope, own

    def _resolve_target(
        self,
        identity: Optional[Identity],
        roles: Iterable[Role],
        employee_id: Optional[int],
    ) -> Employee:
        scope = authorize(identity, roles)

        if scope.is_self_only:
            scope, own = self._own_employee(identity, scope)
            if employee_id is not None:
                scope.require_employee(int(employee_id), own.organization_id)
            return own

        if employee_id is None:
            raise ValidationError("employee_id is required")
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        scope.require_employee(employee.id, employee.organization_id)
        return employee

    def _conflict_from_race(self, employee_id: int, work_date: date, message: str) -> ConflictError:
        winner = self._attendance.get_for_employee_and_date(employee_id, work_date)
        logger.warning("Concurrent write lost for employee %s on %s", employee_id, work_date)
        return ConflictError(message, record=winner)

    def check_in(
        self,
        identity: Optional[Identity],
        *,
        employee_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        employee = self._resolve_target(identity, ALL_ROLES, employee_id)
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(employee.id, today)
        ensure_can_check_in(existing)

        try:
            record = self._attendance.create_checkin(
                employee_id=employee.id,
                work_date=today,
                check_in=timestamp or now,
            )
        except DuplicateRecordError:
            raise self._conflict_from_race(employee.id, today, "Already checked in today")

        logger.info("Employee %s checked in for %s", employee.id, today)
        return record

    def check_out(
        self,
        identity: Optional[Identity],
        *,
        employee_id: Optional[int] = None,
        timestamp: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        employee = self._resolve_target(identity, ALL_ROLES, employee_id)
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(employee.id, today)
        ensure_can_check_out(existing)

        # TODO: reject check_out earlier than check_in once clients agree on clock handling.
        check_out = timestamp or now
        if not self._attendance.update_checkout(record_id=existing.id, check_out=check_out):
            raise self._conflict_from_race(employee.id, today, "Already checked out today")

        logger.info("Employee %s checked out for %s", employee.id, today)
        return replace(existing, check_out=check_out)

    def mark_absent(
        self,
        identity: Optional[Identity],
        *,
        employee_id: Optional[int],
        work_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        employee = self._resolve_target(identity, ADMIN_OR_MANAGER, employee_id)
        work_date = work_date or (now or self._clock()).date()

        existing = self._attendance.get_for_employee_and_date(employee.id, work_date)
        ensure_can_mark_absent(existing)

        try:
            record = self._attendance.create_absence(employee_id=employee.id, work_date=work_date)
        except DuplicateRecordError:
            raise self._conflict_from_race(
                employee.id, work_date, "Attendance record already exists for this date"
            )

        logger.info("Employee %s marked absent for %s by %s", employee.id, work_date, identity.email)
        return record

    def list_records(
        self,
        identity: Optional[Identity],
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        employee_id: Optional[int] = None,
        organization_id: Optional[int] = None,
    ) -> Sequence[AttendanceListRow]:
        scope = authorize(identity, ALL_ROLES)
        if start and end and start > end:
            raise ValidationError("'from' must not be after 'to'")

        if scope.is_self_only:
            # Employees only ever see their own rows; other filters are ignored.
            scope, own = self._own_employee(identity, scope)
            employee_id = own.id
            organization_id = None
        elif not scope.is_unrestricted:
            if organization_id is not None:
                scope.require_organization(int(organization_id))
            organization_id = scope.organization_id

        return self._attendance.list_records(
            start_date=start,
            end_date=end,
            employee_id=employee_id,
            organization_id=organization_id,
        )

    def _employees_in_scope(
        self,
        identity: Optional[Identity],
        organization_id: Optional[int],
    ) -> list[Employee]:
        scope = authorize(identity, ADMIN_OR_MANAGER, resource_org_id=organization_id)
        org_id = organization_id if scope.is_unrestricted else scope.organization_id
        return list(self._employees.list_all(organization_id=org_id))

    def _records_for(self, employees: Sequence[Employee], work_date: date) -> Sequence[AttendanceRecord]:
        if not employees:
            return []
        return self._attendance.list_for_date(work_date=work_date, employee_ids=[e.id for e in employees])

    def daily_summary(
        self,
        identity: Optional[Identity],
        *,
        organization_id: Optional[int] = None,
        work_date: Optional[date] = None,
    ) -> DailySummary:
        employees = self._employees_in_scope(identity, organization_id)
        work_date = work_date or self._clock().date()
        return summarize(work_date, employees, self._records_for(employees, work_date))

    def daily_roster(
        self,
        identity: Optional[Identity],
        *,
        organization_id: Optional[int] = None,
        work_date: Optional[date] = None,
    ) -> DailyRoster:
        employees = self._employees_in_scope(identity, organization_id)
        work_date = work_date or self._clock().date()
        return build_roster(work_date, employees, self._records_for(employees, work_date))
